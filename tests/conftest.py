import pytest

from icanhazqr.app import create_app
from icanhazqr.config import Settings

VALID_CLIENT = "ca-pub-1234567890123456"
VALID_SLOT = "1234567890"


@pytest.fixture
def app():
    return create_app(Settings())


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ads_client():
    app = create_app(Settings(adsense_client=VALID_CLIENT, adsense_slot=VALID_SLOT))
    return app.test_client()
