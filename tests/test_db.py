from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException
from pymongo.errors import ServerSelectionTimeoutError

from nudge_api.app.core import db as db_module
from nudge_api.app.core.db import MongoConnection, get_database


def _request_for(connection):
    return SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(connection=connection)))


def test_connect_returns_named_database(mongo_client):
    connection = MongoConnection("mongodb://db.test:27017", "events_db", 100)
    assert connection.get_database() is None

    database = connection.connect()
    assert database.name == "events_db"
    assert connection.get_database() is database
    assert connection.connect() is database


def test_connect_failure_exits(monkeypatch, caplog):
    client = MagicMock()
    client.admin.command.side_effect = ServerSelectionTimeoutError("no servers")
    monkeypatch.setattr(db_module, "MongoClient", lambda *args, **kwargs: client)

    connection = MongoConnection("mongodb://nowhere:27017", "events_db", 10)
    with pytest.raises(SystemExit) as excinfo:
        connection.connect()

    assert excinfo.value.code == 1
    assert connection.get_database() is None
    assert "MongoDB connection error" in caplog.text


def test_close_is_idempotent(mongo_client):
    connection = MongoConnection("mongodb://db.test:27017", "events_db", 100)
    connection.close()

    connection.connect()
    connection.close()
    connection.close()
    assert connection.get_database() is None


def test_close_logs_client_errors(monkeypatch, caplog):
    client = MagicMock()
    client.close.side_effect = RuntimeError("socket gone")
    monkeypatch.setattr(db_module, "MongoClient", lambda *args, **kwargs: client)

    connection = MongoConnection("mongodb://db.test:27017", "events_db", 100)
    connection.connect()
    connection.close()

    assert "Error closing MongoDB connection: socket gone" in caplog.text
    assert connection.get_database() is None


def test_get_database_dependency(mongo_client):
    connection = MongoConnection("mongodb://db.test:27017", "events_db", 100)

    with pytest.raises(HTTPException) as excinfo:
        get_database(_request_for(connection))
    assert excinfo.value.status_code == 503

    connection.connect()
    assert get_database(_request_for(connection)).name == "events_db"
