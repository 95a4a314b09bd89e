import json

import pytest

from icanhazqr.app import create_app
from icanhazqr.codec import fnv1a_32
from icanhazqr.config import Settings

from conftest import VALID_CLIENT, VALID_SLOT

FALLBACK = "Ads are not configured yet"


def _error(response):
    return response.get_json()["error"]


def test_get_qr_returns_svg(client):
    response = client.get("/qr?data=hello")
    assert response.status_code == 200
    assert response.headers["Content-Type"] == "image/svg+xml; charset=utf-8"
    assert response.headers["Content-Length"] == str(len(response.data))
    assert response.headers["Cache-Control"] == "public, max-age=300"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["ETag"] == f'W/"{fnv1a_32(response.data)}"'
    assert b"<svg" in response.data[:100]


def test_same_request_twice_is_byte_identical(client):
    first = client.get("/qr?data=hello&scale=6&border=2&ecc=q")
    second = client.get("/qr?data=hello&scale=6&border=2&ecc=Q")
    assert first.data == second.data
    assert first.headers["ETag"] == second.headers["ETag"]


def test_get_without_data(client):
    response = client.get("/qr")
    assert response.status_code == 400
    assert response.headers["Cache-Control"] == "no-store"
    assert response.get_json() == {"error": "Missing required query parameter: data"}


@pytest.mark.parametrize("query, field", [
    ("scale=0", "scale"), ("scale=41", "scale"), ("scale=3.5", "scale"),
    ("border=21", "border"), ("ecc=X", "ecc"), ("ecc=", "ecc"),
])
def test_get_invalid_options(client, query, field):
    response = client.get(f"/qr?data=hello&{query}")
    assert response.status_code == 400
    assert _error(response).startswith(field)


def test_blank_scale_uses_default(client):
    assert client.get("/qr?data=hello&scale=&border=").status_code == 200


def test_data_length_boundary(client):
    assert client.get("/qr", query_string={"data": "a" * 2048, "ecc": "L"}).status_code == 200
    response = client.get("/qr", query_string={"data": "a" * 2049, "ecc": "L"})
    assert response.status_code == 400
    assert _error(response) == "Data too long. Max length is 2048 characters."


def test_codec_failure_is_generic_400(client):
    response = client.get("/qr", query_string={"data": "a" * 2000, "ecc": "H"})
    assert response.status_code == 400
    assert _error(response) == "Unable to encode QR for the provided input and options"


def test_post_json(client):
    response = client.post("/qr", json={"data": "hello", "scale": 6, "border": 0, "ecc": "h"})
    assert response.status_code == 200
    expected = client.get("/qr?data=hello&scale=6&border=0&ecc=H")
    assert response.data == expected.data


def test_post_json_body_scale_beats_query(client):
    response = client.post("/qr?scale=4", json={"data": "hello", "scale": 10})
    assert response.data == client.get("/qr?data=hello&scale=10").data
    assert response.data != client.get("/qr?data=hello&scale=4").data


def test_post_json_falls_back_to_query_options(client):
    response = client.post("/qr?border=0&ecc=L", json={"data": "hello"})
    assert response.data == client.get("/qr?data=hello&border=0&ecc=L").data


def test_post_invalid_json(client):
    response = client.post("/qr", data="{oops", content_type="application/json")
    assert response.status_code == 400
    assert _error(response) == "Invalid JSON body"


def test_post_json_array(client):
    response = client.post("/qr", data=json.dumps(["hello"]), content_type="application/json")
    assert _error(response) == "JSON body must be an object"


def test_post_json_missing_data(client):
    response = client.post("/qr", json={"scale": 5})
    assert _error(response) == "Missing data in request body"


def test_post_raw_text(client):
    response = client.post("/qr?scale=3", data="hello", content_type="text/plain")
    assert response.status_code == 200
    assert response.data == client.get("/qr?data=hello&scale=3").data


def test_post_empty_raw_body(client):
    response = client.post("/qr", data="", content_type="text/plain")
    assert response.status_code == 400
    assert _error(response) == "Missing data in request body"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.headers["Cache-Control"] == "no-store"
    body = response.get_json()
    assert body["service"] == "icanhazqrcode"
    assert "GET /health" in body["endpoints"]


@pytest.mark.parametrize("method, path", [
    ("GET", "/nonexistent"),
    ("POST", "/"),
    ("DELETE", "/qr"),
    ("OPTIONS", "/qr"),
    ("POST", "/health"),
])
def test_unmatched_routes(client, method, path):
    response = client.open(path, method=method)
    assert response.status_code == 404
    assert response.headers["Cache-Control"] == "no-store"
    body = response.get_json()
    assert body["error"] == "Not Found"
    assert "/qr" in body["hint"]


@pytest.mark.parametrize("path", ["/qr?data=hello", "/", "/health", "/nonexistent"])
def test_head_is_not_served(client, path):
    response = client.head(path)
    assert response.status_code == 404
    assert response.headers["Content-Type"] == "application/json"
    assert response.headers["Cache-Control"] == "no-store"
    assert "ETag" not in response.headers


def test_robots_txt(client):
    response = client.get("/robots.txt", base_url="https://qr.example")
    assert response.status_code == 200
    assert response.headers["Content-Type"] == "text/plain; charset=utf-8"
    assert response.headers["Cache-Control"] == "public, max-age=3600"
    text = response.get_data(as_text=True)
    assert "User-agent: *\nAllow: /" in text
    for agent in ("OAI-SearchBot", "GPTBot", "ClaudeBot", "Google-Extended"):
        assert f"User-agent: {agent}" in text
    assert "Sitemap: https://qr.example/sitemap.xml" in text


def test_sitemap_xml(client):
    response = client.get("/sitemap.xml")
    assert response.headers["Content-Type"] == "application/xml; charset=utf-8"
    assert response.headers["Cache-Control"] == "public, max-age=3600"
    assert "<loc>http://localhost/</loc>" in response.get_data(as_text=True)


def test_llms_txt(client):
    response = client.get("/llms.txt", base_url="https://qr.example")
    assert response.headers["Cache-Control"] == "public, max-age=3600"
    text = response.get_data(as_text=True)
    assert "(https://qr.example/qr?data=hello-world)" in text
    assert "2048 characters" in text
    assert "`L`, `M`, `Q`, `H`" in text


def test_landing_page_without_ads(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["Content-Type"] == "text/html; charset=utf-8"
    assert response.headers["Cache-Control"] == "public, max-age=300"
    html = response.get_data(as_text=True)
    assert FALLBACK in html
    assert '<div class="ad-fallback">' in html
    assert "adsbygoogle" not in html
    assert "googlesyndication" not in html
    assert '<script type="application/ld+json">' in html
    assert "FAQPage" in html
    assert "GET http://localhost/qr?data=hello-world" in html


def test_landing_page_with_ads(ads_client):
    html = ads_client.get("/").get_data(as_text=True)
    assert f"adsbygoogle.js?client={VALID_CLIENT}" in html
    assert f'data-ad-slot="{VALID_SLOT}"' in html
    assert f'<meta name="google-adsense-account" content="{VALID_CLIENT}">' in html
    assert FALLBACK not in html
    assert '<div class="ad-fallback">' not in html


@pytest.mark.parametrize("client_id, slot_id", [
    (VALID_CLIENT, None),
    (VALID_CLIENT, "not-a-slot"),
    ("ca-pub-1", VALID_SLOT),
    ('"><script>alert(1)</script>', VALID_SLOT),
])
def test_landing_page_partial_ads_fall_back(client_id, slot_id):
    app = create_app(Settings(adsense_client=client_id, adsense_slot=slot_id))
    html = app.test_client().get("/").get_data(as_text=True)
    assert FALLBACK in html
    assert '<div class="ad-fallback">' in html
    assert "googlesyndication" not in html
    assert "adsbygoogle" not in html
    assert "alert(1)" not in html
