"""HTTP response assembly for images, JSON errors, metadata and static documents."""

from flask import Response, jsonify

from icanhazqr.codec import RenderedImage

SERVICE_NAME = "icanhazqrcode"

IMAGE_CONTENT_TYPE = "image/svg+xml; charset=utf-8"
IMAGE_MAX_AGE = 300
DOCUMENT_MAX_AGE = 3600
LANDING_MAX_AGE = 300

NOT_FOUND_HINT = (
    'Use GET /qr?data=hello or POST /qr with raw text or JSON {"data":"hello"}'
)

ENDPOINTS = [
    "GET / (landing page with QR form + optional ad slot)",
    "GET /health",
    "GET /robots.txt",
    "GET /sitemap.xml",
    "GET /llms.txt",
    "GET /qr?data=<text>&scale=8&border=4&ecc=M",
    "POST /qr (text/plain or application/json {data, scale, border, ecc})",
]


def json_response(payload: dict, status: int = 200) -> Response:
    """JSON body that clients must never cache."""
    response = jsonify(payload)
    response.status_code = status
    response.headers["Cache-Control"] = "no-store"
    return response


def bad_request(message: str) -> Response:
    return json_response({"error": message}, 400)


def not_found() -> Response:
    return json_response({"error": "Not Found", "hint": NOT_FOUND_HINT}, 404)


def health() -> Response:
    return json_response({"service": SERVICE_NAME, "endpoints": ENDPOINTS})


def image_response(image: RenderedImage) -> Response:
    """Serve rendered SVG bytes with a weak, content-derived ETag."""
    response = Response(image.body, status=200, content_type=IMAGE_CONTENT_TYPE)
    response.headers["Content-Length"] = str(len(image))
    response.headers["Cache-Control"] = f"public, max-age={IMAGE_MAX_AGE}"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.set_etag(image.fingerprint, weak=True)
    return response


def text_document(body: str, content_type: str, max_age: int = DOCUMENT_MAX_AGE) -> Response:
    response = Response(body, status=200, content_type=content_type)
    response.headers["Cache-Control"] = f"public, max-age={max_age}"
    return response
