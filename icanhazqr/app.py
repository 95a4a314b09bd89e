"""Flask application: routes every request to exactly one response."""

import time

from flask import Flask, g, request

from icanhazqr import pages, responses
from icanhazqr.ads import AdConfig
from icanhazqr.codec import CODEC_FAILURE, CodecError, render_svg
from icanhazqr.config import Settings
from icanhazqr.extract import Extraction, extract_body, extract_query
from icanhazqr.logging import audit, get_logger
from icanhazqr.options import normalize

log = get_logger("app")


def qr_response(extraction: Extraction):
    """Run an extracted /qr request through validation and the codec."""
    if not extraction.ok:
        audit("qr.rejected", logger=log, stage="extract", error=extraction.error)
        return responses.bad_request(extraction.error)

    outcome = normalize(extraction.data, extraction.options)
    if not outcome.ok:
        audit("qr.rejected", logger=log, stage="options", error=outcome.error)
        return responses.bad_request(outcome.error)

    qr_request = outcome.request
    try:
        image = render_svg(qr_request)
    except CodecError as exc:
        audit("qr.codec_failed", logger=log, length=len(qr_request.payload),
              ecc=qr_request.ecc.value, error=str(exc))
        return responses.bad_request(CODEC_FAILURE)

    audit("qr.rendered", logger=log, length=len(qr_request.payload),
          ecc=qr_request.ecc.value, scale=qr_request.scale,
          border=qr_request.border, bytes=len(image), etag=image.fingerprint)
    return responses.image_response(image)


def _origin() -> str:
    return pages.origin_of(request.scheme, request.host)


def create_app(settings: Settings | None = None) -> Flask:
    """Create the Flask app.

    Ad configuration is validated once here and shared read-only by all
    requests.
    """
    settings = settings or Settings.from_env()
    ads = AdConfig.from_raw(settings.adsense_client, settings.adsense_slot)

    app = Flask(__name__)

    @app.route("/", methods=["GET"], provide_automatic_options=False)
    def landing():
        return pages.landing_page(_origin(), ads)

    @app.route("/health", methods=["GET"], provide_automatic_options=False)
    def health():
        return responses.health()

    @app.route("/robots.txt", methods=["GET"], provide_automatic_options=False)
    def robots():
        return pages.robots_txt(_origin())

    @app.route("/sitemap.xml", methods=["GET"], provide_automatic_options=False)
    def sitemap():
        return pages.sitemap_xml(_origin())

    @app.route("/llms.txt", methods=["GET"], provide_automatic_options=False)
    def llms():
        return pages.llms_txt(_origin())

    @app.route("/qr", methods=["GET"], provide_automatic_options=False)
    def qr_from_query():
        return qr_response(extract_query(request.args))

    @app.route("/qr", methods=["POST"], provide_automatic_options=False)
    def qr_from_body():
        extraction = extract_body(request.content_type, request.args, request.get_data(cache=False))
        return qr_response(extraction)

    @app.errorhandler(404)
    @app.errorhandler(405)
    def unmatched(_error):
        return responses.not_found()

    @app.before_request
    def _start_timer():
        g.started = time.perf_counter()

    @app.before_request
    def _reject_head():
        # Flask answers HEAD on GET routes; only GET and POST are served.
        if request.method == "HEAD":
            return responses.not_found()

    @app.after_request
    def _log_request(response):
        started = g.get("started")
        elapsed = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        log.info("%s %s -> %d (%.1fms)", request.method, request.path, response.status_code, elapsed)
        return response

    audit("app.created", logger=log, ads_enabled=ads.enabled)
    return app
