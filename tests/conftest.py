import os
import sys
import tempfile

# Ensure Python path includes project root for `import nudge_api`
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Keep the import-time app from creating ./uploads in the checkout.
os.environ.setdefault("UPLOAD_DIR", os.path.join(tempfile.gettempdir(), "nudge_api_test_uploads"))

import mongomock
import pytest
from fastapi.testclient import TestClient

from nudge_api.app.core import db as db_module
from nudge_api.app.core.config import Settings
from nudge_api.app.main import create_app

API = "/api/v3/app"


@pytest.fixture
def mongo_client(monkeypatch):
    """In-memory MongoDB used by every MongoConnection built during the test."""
    client = mongomock.MongoClient()
    monkeypatch.setattr(db_module, "MongoClient", lambda *args, **kwargs: client)
    return client


@pytest.fixture
def app_settings(tmp_path):
    return Settings(upload_dir=str(tmp_path / "uploads"), db_name="event_management_test")


@pytest.fixture
def db(mongo_client, app_settings):
    return mongo_client[app_settings.db_name]


@pytest.fixture
def client(mongo_client, app_settings):
    app = create_app(app_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def create_event(client):
    def _create(**fields):
        response = client.post(f"{API}/events", data=fields)
        assert response.status_code == 201, response.text
        return response.json()["event_id"]

    return _create


@pytest.fixture
def create_nudge(client):
    def _create(**fields):
        response = client.post(f"{API}/nudges", data=fields)
        assert response.status_code == 201, response.text
        return response.json()["nudge_id"]

    return _create
