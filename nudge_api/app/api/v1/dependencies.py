"""
Shared dependencies for the v1 routes.

Services are built per request from the database handle and upload
storage held on ``app.state``, so routes never reach for module level
globals.  ``read_payload`` gives create/update routes a uniform view of
multipart forms and JSON bodies.
"""

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Tuple

from fastapi import Depends, Request
from pymongo.database import Database
from starlette.datastructures import FormData, UploadFile

from nudge_api.app.core.db import get_database
from nudge_api.app.services.event_service import EventService
from nudge_api.app.services.nudge_service import NudgeService
from nudge_api.app.services.upload_service import UploadStorage

Payload = Tuple[Dict[str, str], Dict[str, UploadFile]]


def get_upload_storage(request: Request) -> UploadStorage:
    return request.app.state.storage


def get_event_service(
    db: Database = Depends(get_database),
    storage: UploadStorage = Depends(get_upload_storage),
) -> EventService:
    return EventService(db, storage)


def get_nudge_service(
    db: Database = Depends(get_database),
    storage: UploadStorage = Depends(get_upload_storage),
) -> NudgeService:
    return NudgeService(db, storage)


def split_form(form: FormData) -> Payload:
    """Separate plain fields from file parts.

    Only the first value of a repeated name is kept, which caps every
    file field at one upload.
    """
    fields: Dict[str, str] = {}
    files: Dict[str, UploadFile] = {}
    for name, value in form.multi_items():
        if isinstance(value, UploadFile):
            files.setdefault(name, value)
        else:
            fields.setdefault(name, value)
    return fields, files


def json_fields(body: Any) -> Dict[str, str]:
    """Flatten a JSON object into form-style string fields.

    ``null`` becomes an empty string (an explicit clear); lists and
    objects are re-encoded so ``attendees`` reads the same as in a form.
    """
    if not isinstance(body, dict):
        return {}
    fields: Dict[str, str] = {}
    for name, value in body.items():
        if value is None:
            fields[name] = ""
        elif isinstance(value, str):
            fields[name] = value
        else:
            fields[name] = json.dumps(value)
    return fields


@asynccontextmanager
async def read_payload(request: Request) -> AsyncIterator[Payload]:
    """Yield ``(fields, files)`` for the request body.

    Uploaded files stay open until the block exits.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        yield json_fields(await request.json()), {}
        return
    async with request.form() as form:
        yield split_form(form)
