"""
Business logic for events.

``EventService`` works directly against the ``events`` collection.
Each operation performs a single lookup or write; there are no
transactions and concurrent updates to the same document follow
last-write-wins.
"""

import logging
import math
from typing import Any, Dict, Mapping, Optional

from pymongo import DESCENDING
from pymongo.database import Database
from starlette.datastructures import UploadFile

from ..core.coercion import (
    collect_updates,
    parse_object_id,
    text,
    to_datetime,
    to_int,
    to_list,
    utcnow,
)
from ..core.config import settings
from ..core.db import EVENTS_COLLECTION
from ..core.errors import NoChangesError, ResourceNotFoundError
from ..schemas.event import EventList, EventPage, EventPagination, EventRead
from .upload_service import UploadStorage

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("name", "tagline", "description", "moderator", "category", "sub_category")
DEFAULT_PAGE_SIZE = 5


class EventService:
    """Service managing the events collection.

    The database handle (and, for writes, the upload storage) is
    injected by the caller; see ``api/v1/endpoints/events.py``.
    """

    def __init__(
        self,
        db: Database,
        storage: Optional[UploadStorage] = None,
        default_uid: Optional[int] = None,
    ) -> None:
        self.collection = db[EVENTS_COLLECTION]
        self.storage = storage
        self.default_uid = settings.default_uid if default_uid is None else default_uid

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_event(self, event_id: str) -> EventRead:
        """Return one event.

        Raises ``InvalidIdentifierError`` for a malformed id and
        ``ResourceNotFoundError`` when no document matches.
        """
        oid = parse_object_id(event_id, "Invalid event ID")
        doc = self.collection.find_one({"_id": oid})
        if doc is None:
            raise ResourceNotFoundError("Event not found")
        return EventRead.model_validate(doc)

    def list_latest(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> EventPage:
        """Return one page of events, latest ``schedule`` first."""
        skip = (page - 1) * limit
        cursor = (
            self.collection.find({})
            .sort("schedule", DESCENDING)
            .skip(skip)
            .limit(limit)
        )
        events = [EventRead.model_validate(doc) for doc in cursor]
        total = self.collection.count_documents({})
        return EventPage(
            events=events,
            pagination=EventPagination(
                currentPage=page,
                totalPages=math.ceil(total / limit),
                totalEvents=total,
                limit=limit,
            ),
        )

    def list_events(self) -> EventList:
        """Return every event, in storage order and without paging."""
        events = [EventRead.model_validate(doc) for doc in self.collection.find({})]
        return EventList(events=events, total=len(events))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create_event(
        self, fields: Mapping[str, str], image: Optional[UploadFile] = None
    ) -> str:
        """Insert a new event built from form ``fields``.

        Missing or unparseable ``uid``, ``rigor_rank`` and ``schedule``
        fall back to their defaults.  ``attendees`` is a JSON-encoded
        list; malformed JSON propagates as an error.  Returns the new
        identifier as a string.
        """
        now = utcnow()
        doc: Dict[str, Any] = {
            "type": "event",
            "uid": to_int(fields.get("uid"), self.default_uid),
            "name": fields.get("name"),
            "tagline": fields.get("tagline"),
            "schedule": to_datetime(fields.get("schedule"), now),
            "description": fields.get("description"),
            "moderator": fields.get("moderator"),
            "category": fields.get("category"),
            "sub_category": fields.get("sub_category"),
            "rigor_rank": to_int(fields.get("rigor_rank"), 0),
            "attendees": to_list(fields["attendees"]) if fields.get("attendees") else [],
            "created_at": now,
            "updated_at": now,
        }
        if self.storage is not None:
            image_path = self.storage.save(image)
            if image_path:
                doc["files"] = {"image": image_path}
        result = self.collection.insert_one(doc)
        event_id = str(result.inserted_id)
        logger.info("Created event %s ('%s')", event_id, doc["name"])
        return event_id

    def update_event(
        self, event_id: str, fields: Mapping[str, str], image: Optional[UploadFile] = None
    ) -> str:
        """Apply a partial update.

        Only fields present in ``fields`` are touched; a field sent
        empty is cleared.  A new image replaces ``files.image``.  Raises
        ``NoChangesError`` when nothing would change.
        """
        oid = parse_object_id(event_id, "Invalid event ID")
        if self.collection.find_one({"_id": oid}, {"_id": 1}) is None:
            raise ResourceNotFoundError("Event not found")

        rules = {name: (text, None) for name in TEXT_FIELDS}
        rules.update(
            {
                "schedule": (to_datetime, None),
                "rigor_rank": (to_int, 0),
                "uid": (to_int, self.default_uid),
                "attendees": (to_list, []),
            }
        )
        updates = collect_updates(fields, rules)
        if self.storage is not None:
            image_path = self.storage.save(image)
            if image_path:
                updates["files.image"] = image_path
        if not updates:
            raise NoChangesError("No changes made to the event")

        updates["updated_at"] = utcnow()
        result = self.collection.update_one({"_id": oid}, {"$set": updates})
        if result.modified_count == 0:
            raise NoChangesError("No changes made to the event")
        logger.info("Updated event %s (%s)", event_id, ", ".join(sorted(updates)))
        return event_id

    def delete_event(self, event_id: str) -> str:
        """Hard delete an event.  Nudges pointing at it are left alone."""
        oid = parse_object_id(event_id, "Invalid event ID")
        result = self.collection.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise ResourceNotFoundError("Event not found")
        logger.info("Deleted event %s", event_id)
        return event_id
