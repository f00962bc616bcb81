import os

os.environ["FLASK_CONFIG"] = "testing"

from unittest.mock import MagicMock  # noqa

import pytest  # noqa

from app import create_app  # noqa
from app.config import TestingConfig  # noqa
from app.extensions import db  # noqa
from app.services.integration import IntegrationService  # noqa

CDN_URL = "https://cdn.test"
FRONTEND_URL = "http://frontend.test"


@pytest.fixture
def app(tmp_path):
    class Config(TestingConfig):
        UPLOAD_DIRECTORY = str(tmp_path / "uploads")

    flask_app = create_app(Config)
    with flask_app.app_context():
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def storage():
    storage = MagicMock()
    storage.upload_simple.return_value = f"{CDN_URL}/uploaded.png"
    return storage


@pytest.fixture
def service(app, storage):
    return IntegrationService(storage, CDN_URL, FRONTEND_URL)


@pytest.fixture
def make_integration(service):
    def _make(org="org-1", internal_id="page-1", **kwargs):
        params = {
            "name": "My Page",
            "picture": None,
            "type": "social",
            "provider": "facebook",
            "token": "access-token",
        }
        params.update(kwargs)
        return service.create_or_update_integration(
            org=org, internal_id=internal_id, **params
        )

    return _make
