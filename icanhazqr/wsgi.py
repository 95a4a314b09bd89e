"""WSGI entrypoint, e.g. ``gunicorn icanhazqr.wsgi:app``."""

from icanhazqr.app import create_app
from icanhazqr.config import Settings
from icanhazqr.logging import setup_logging

settings = Settings.from_env()
setup_logging(level=settings.log_level, json_format=settings.log_json)
app = create_app(settings)
