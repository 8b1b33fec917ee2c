"""
Business logic for nudges.

Nudges live in their own collection and reference an event through
``event_id``.  The reference is stored as an ``ObjectId`` but never
checked against the events collection, so a nudge may outlive (or
predate) the event it points at.
"""

import logging
import math
from functools import partial
from typing import Any, Dict, Mapping, Optional

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.database import Database
from starlette.datastructures import UploadFile

from ..core.coercion import (
    collect_updates,
    parse_object_id,
    text,
    to_datetime,
    to_int,
    utcnow,
)
from ..core.config import settings
from ..core.db import NUDGES_COLLECTION
from ..core.errors import NoChangesError, ResourceNotFoundError
from ..schemas.nudge import NudgeList, NudgePage, NudgePagination, NudgeRead
from .upload_service import UploadStorage

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("title", "description", "invitation_line")
DEFAULT_PAGE_SIZE = 10
DEFAULT_STATUS = "draft"

_parse_event_ref = partial(parse_object_id, message="Invalid event ID")


class NudgeService:
    """Service managing the nudges collection."""

    def __init__(
        self,
        db: Database,
        storage: Optional[UploadStorage] = None,
        default_uid: Optional[int] = None,
    ) -> None:
        self.collection = db[NUDGES_COLLECTION]
        self.storage = storage
        self.default_uid = settings.default_uid if default_uid is None else default_uid

    def get_nudge(self, nudge_id: str) -> NudgeRead:
        oid = parse_object_id(nudge_id, "Invalid nudge ID")
        doc = self.collection.find_one({"_id": oid})
        if doc is None:
            raise ResourceNotFoundError("Nudge not found")
        return NudgeRead.model_validate(doc)

    def list_for_event(self, event_id: str) -> NudgeList:
        """Return every nudge whose ``event_id`` equals ``event_id``."""
        oid = _parse_event_ref(event_id)
        nudges = [NudgeRead.model_validate(doc) for doc in self.collection.find({"event_id": oid})]
        return NudgeList(nudges=nudges, total=len(nudges))

    def list_latest(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> NudgePage:
        """Return one page of nudges, latest ``send_time`` first."""
        skip = (page - 1) * limit
        cursor = (
            self.collection.find({})
            .sort("send_time", DESCENDING)
            .skip(skip)
            .limit(limit)
        )
        nudges = [NudgeRead.model_validate(doc) for doc in cursor]
        total = self.collection.count_documents({})
        return NudgePage(
            nudges=nudges,
            pagination=NudgePagination(
                currentPage=page,
                totalPages=math.ceil(total / limit),
                totalNudges=total,
                limit=limit,
            ),
        )

    def list_nudges(self) -> NudgeList:
        nudges = [NudgeRead.model_validate(doc) for doc in self.collection.find({})]
        return NudgeList(nudges=nudges, total=len(nudges))

    def _store_files(
        self,
        target: Dict[str, Any],
        cover_image: Optional[UploadFile],
        icon: Optional[UploadFile],
    ) -> None:
        if self.storage is None:
            return
        for name, upload in (("cover_image", cover_image), ("icon", icon)):
            path = self.storage.save(upload)
            if path:
                target[name] = path

    def create_nudge(
        self,
        fields: Mapping[str, str],
        cover_image: Optional[UploadFile] = None,
        icon: Optional[UploadFile] = None,
    ) -> str:
        """Insert a new nudge built from form ``fields``.

        ``event_id`` must be a 24-hex identifier when given (it is not
        looked up).  ``status`` defaults to ``"draft"`` and ``send_time``
        to the current time.
        """
        event_ref: Optional[ObjectId] = None
        if fields.get("event_id"):
            event_ref = _parse_event_ref(fields["event_id"])
        now = utcnow()
        doc: Dict[str, Any] = {
            "type": "nudge",
            "uid": to_int(fields.get("uid"), self.default_uid),
            "title": fields.get("title"),
            "event_id": event_ref,
            "send_time": to_datetime(fields.get("send_time"), now),
            "description": fields.get("description"),
            "invitation_line": fields.get("invitation_line"),
            "status": fields.get("status") or DEFAULT_STATUS,
            "created_at": now,
            "updated_at": now,
        }
        self._store_files(doc, cover_image, icon)
        result = self.collection.insert_one(doc)
        nudge_id = str(result.inserted_id)
        logger.info("Created nudge %s for event %s", nudge_id, event_ref)
        return nudge_id

    def update_nudge(
        self,
        nudge_id: str,
        fields: Mapping[str, str],
        cover_image: Optional[UploadFile] = None,
        icon: Optional[UploadFile] = None,
    ) -> str:
        """Apply a partial update; same field presence rules as events."""
        oid = parse_object_id(nudge_id, "Invalid nudge ID")
        if self.collection.find_one({"_id": oid}, {"_id": 1}) is None:
            raise ResourceNotFoundError("Nudge not found")

        rules = {name: (text, None) for name in TEXT_FIELDS}
        rules.update(
            {
                "event_id": (_parse_event_ref, None),
                "send_time": (to_datetime, None),
                "status": (text, DEFAULT_STATUS),
                "uid": (to_int, self.default_uid),
            }
        )
        updates = collect_updates(fields, rules)
        self._store_files(updates, cover_image, icon)
        if not updates:
            raise NoChangesError("No changes made to the nudge")

        updates["updated_at"] = utcnow()
        result = self.collection.update_one({"_id": oid}, {"$set": updates})
        if result.modified_count == 0:
            raise NoChangesError("No changes made to the nudge")
        logger.info("Updated nudge %s (%s)", nudge_id, ", ".join(sorted(updates)))
        return nudge_id

    def delete_nudge(self, nudge_id: str) -> str:
        oid = parse_object_id(nudge_id, "Invalid nudge ID")
        result = self.collection.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise ResourceNotFoundError("Nudge not found")
        logger.info("Deleted nudge %s", nudge_id)
        return nudge_id
