"""
MongoDB integration.

This module owns the single client/database handle used by the whole
process.  ``MongoConnection.connect`` is called once on application
startup and ``close`` on shutdown; routes obtain the database through
the ``get_database`` dependency and hand it to the service classes.

The pymongo client pools connections internally and is safe to share
between concurrent requests, so no extra locking happens here.
"""

import logging
from typing import Optional

from fastapi import HTTPException, Request, status
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .config import settings

logger = logging.getLogger(__name__)

EVENTS_COLLECTION = "events"
NUDGES_COLLECTION = "nudges"


class MongoConnection:
    """Process-wide MongoDB client wrapper."""

    def __init__(
        self,
        uri: Optional[str] = None,
        db_name: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ) -> None:
        self.uri = uri or settings.mongodb_uri
        self.db_name = db_name or settings.db_name
        self.timeout_ms = timeout_ms or settings.mongodb_timeout_ms
        self._client: Optional[MongoClient] = None
        self._db: Optional[Database] = None

    def connect(self) -> Database:
        """Open the client and return the database handle.

        The server is pinged once so that an unreachable database is
        detected at startup.  Such a failure is not recoverable: it is
        logged and the process exits with status 1.  Calling ``connect``
        again after a successful call returns the existing handle.
        """
        if self._db is not None:
            return self._db
        logger.info("Connecting to MongoDB...")
        try:
            client = MongoClient(self.uri, serverSelectionTimeoutMS=self.timeout_ms)
            client.admin.command("ping")
        except PyMongoError as e:
            logger.critical("MongoDB connection error: %s", e)
            raise SystemExit(1) from e
        self._client = client
        self._db = client[self.db_name]
        logger.info("MongoDB connected successfully (database '%s')", self.db_name)
        return self._db

    def get_database(self) -> Optional[Database]:
        """Return the database handle, or ``None`` before ``connect``."""
        return self._db

    def close(self) -> None:
        """Release the client.  Safe to call more than once."""
        client, self._client, self._db = self._client, None, None
        if client is None:
            return
        try:
            client.close()
            logger.info("MongoDB connection closed")
        except Exception as e:
            logger.error("Error closing MongoDB connection: %s", e)


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the connected database.

    The connection is stored on ``app.state`` by ``create_app``.  Routes
    must not trigger a connection themselves, so a missing handle is
    reported as a service failure.
    """
    connection: MongoConnection = request.app.state.connection
    db = connection.get_database()
    if db is None:
        logger.error("Database accessed before the connection was established")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not connected",
        )
    return db
