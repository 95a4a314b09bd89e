"""Static documents: landing page, robots.txt, sitemap.xml and llms.txt.

Every document is rendered per request from Jinja templates so absolute URLs
always match the scheme and host the service was reached through.
"""

from flask import render_template

from icanhazqr.ads import AdConfig
from icanhazqr.options import (
    DEFAULT_BORDER,
    DEFAULT_ECC,
    DEFAULT_SCALE,
    ECCLevel,
    MAX_BORDER,
    MAX_DATA_LENGTH,
    MAX_SCALE,
    MIN_BORDER,
    MIN_SCALE,
)
from icanhazqr.responses import LANDING_MAX_AGE, text_document

AI_CRAWLERS = ["OAI-SearchBot", "GPTBot", "ClaudeBot", "Google-Extended"]

LIMITS = {
    "max_data_length": MAX_DATA_LENGTH,
    "min_scale": MIN_SCALE,
    "max_scale": MAX_SCALE,
    "default_scale": DEFAULT_SCALE,
    "min_border": MIN_BORDER,
    "max_border": MAX_BORDER,
    "default_border": DEFAULT_BORDER,
    "default_ecc": DEFAULT_ECC.value,
    "ecc_levels": [level.value for level in ECCLevel],
}


def origin_of(scheme: str, host: str) -> str:
    return f"{scheme}://{host}"


def faq_schema() -> dict:
    """schema.org FAQPage block embedded in the landing page."""
    return {
        "@context": "https://schema.org",
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": "How do I generate a QR code from the API?",
                "acceptedAnswer": {
                    "@type": "Answer",
                    "text": "Use GET /qr?data=your-text. Optional parameters are scale, border, and ecc.",
                },
            },
            {
                "@type": "Question",
                "name": "What are the input limits?",
                "acceptedAnswer": {
                    "@type": "Answer",
                    "text": (
                        f"Data is limited to {MAX_DATA_LENGTH} characters. "
                        f"Scale is {MIN_SCALE} to {MAX_SCALE}. "
                        f"Border is {MIN_BORDER} to {MAX_BORDER}."
                    ),
                },
            },
        ],
    }


def landing_page(origin: str, ads: AdConfig):
    html = render_template(
        "landing.html", origin=origin, ads=ads, faq=faq_schema(), limits=LIMITS,
    )
    return text_document(html, "text/html; charset=utf-8", max_age=LANDING_MAX_AGE)


def robots_txt(origin: str):
    body = render_template("robots.txt", origin=origin, crawlers=AI_CRAWLERS)
    return text_document(body, "text/plain; charset=utf-8")


def sitemap_xml(origin: str):
    body = render_template("sitemap.xml", origin=origin)
    return text_document(body, "application/xml; charset=utf-8")


def llms_txt(origin: str):
    body = render_template("llms.txt", origin=origin, limits=LIMITS)
    return text_document(body, "text/plain; charset=utf-8")
