"""
Event endpoints for API v1.

``GET /events`` serves three mutually exclusive modes, picked in this
order: a single event by ``id``, a page of the latest events
(``type=latest``), or every event.  Create and update accept multipart
forms (with an optional ``image`` file) or JSON bodies.
"""

from typing import Optional, Union

from fastapi import APIRouter, Depends, Query, Request, status
from starlette.concurrency import run_in_threadpool

from nudge_api.app.api.v1.dependencies import get_event_service, read_payload
from nudge_api.app.core.coercion import to_positive_int
from nudge_api.app.core.errors import ApiError
from nudge_api.app.schemas.event import EventList, EventMutation, EventPage, EventRead
from nudge_api.app.services.event_service import DEFAULT_PAGE_SIZE, EventService

router = APIRouter()


@router.get("", response_model=None)
def get_events(
    id: Optional[str] = Query(None, description="Return a single event"),
    type: Optional[str] = Query(None, description="``latest`` for a paginated listing"),
    limit: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    service: EventService = Depends(get_event_service),
) -> Union[EventRead, EventPage, EventList]:
    """Get one event, a page of the latest events or all events.

    - **id**: 24-hex identifier; 400 when malformed, 404 when missing.
    - **type=latest**: sorted by ``schedule`` descending, paginated by
      **page** (default 1) and **limit** (default 5).
    - otherwise: every event, unsorted, as ``{events, total}``.
    """
    try:
        if id:
            return service.get_event(id)
        if type == "latest":
            return service.list_latest(
                page=to_positive_int(page, 1),
                limit=to_positive_int(limit, DEFAULT_PAGE_SIZE),
            )
        return service.list_events()
    except ApiError as e:
        raise e.to_http() from e


@router.post("", response_model=EventMutation, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: Request,
    service: EventService = Depends(get_event_service),
) -> EventMutation:
    """Create an event from the submitted fields.

    The server assigns the identifier and the ``created_at`` /
    ``updated_at`` timestamps.
    """
    async with read_payload(request) as (fields, files):
        event_id = await run_in_threadpool(service.create_event, fields, files.get("image"))
    return EventMutation(message="Event created successfully", event_id=event_id)


@router.put("/{event_id}", response_model=EventMutation)
async def update_event(
    event_id: str,
    request: Request,
    service: EventService = Depends(get_event_service),
) -> EventMutation:
    """Partially update an event.

    Fields that are not sent keep their stored value.  Responds 400
    with ``No changes made to the event`` when nothing was updated.
    """
    try:
        async with read_payload(request) as (fields, files):
            await run_in_threadpool(service.update_event, event_id, fields, files.get("image"))
    except ApiError as e:
        raise e.to_http() from e
    return EventMutation(message="Event updated successfully", event_id=event_id)


@router.delete("/{event_id}", response_model=EventMutation)
def delete_event(
    event_id: str,
    service: EventService = Depends(get_event_service),
) -> EventMutation:
    """Delete an event permanently."""
    try:
        service.delete_event(event_id)
    except ApiError as e:
        raise e.to_http() from e
    return EventMutation(message="Event deleted successfully", event_id=event_id)
