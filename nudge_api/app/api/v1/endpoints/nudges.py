"""
Nudge endpoints for API v1.

Same shape as the event routes, plus an ``event_id`` filter on the
listing.  Create and update accept up to one ``cover_image`` and one
``icon`` file.
"""

from typing import Optional, Union

from fastapi import APIRouter, Depends, Query, Request, status
from starlette.concurrency import run_in_threadpool

from nudge_api.app.api.v1.dependencies import get_nudge_service, read_payload
from nudge_api.app.core.coercion import to_positive_int
from nudge_api.app.core.errors import ApiError
from nudge_api.app.schemas.nudge import NudgeList, NudgeMutation, NudgePage, NudgeRead
from nudge_api.app.services.nudge_service import DEFAULT_PAGE_SIZE, NudgeService

router = APIRouter()


@router.get("", response_model=None)
def get_nudges(
    id: Optional[str] = Query(None, description="Return a single nudge"),
    event_id: Optional[str] = Query(None, description="Nudges attached to this event"),
    type: Optional[str] = Query(None, description="``latest`` for a paginated listing"),
    limit: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    service: NudgeService = Depends(get_nudge_service),
) -> Union[NudgeRead, NudgeList, NudgePage]:
    """Get one nudge, the nudges of an event, a page of the latest, or all.

    Modes are checked in the order **id**, **event_id**, **type=latest**
    (sorted by ``send_time`` descending, default **limit** 10).
    """
    try:
        if id:
            return service.get_nudge(id)
        if event_id:
            return service.list_for_event(event_id)
        if type == "latest":
            return service.list_latest(
                page=to_positive_int(page, 1),
                limit=to_positive_int(limit, DEFAULT_PAGE_SIZE),
            )
        return service.list_nudges()
    except ApiError as e:
        raise e.to_http() from e


@router.post("", response_model=NudgeMutation, status_code=status.HTTP_201_CREATED)
async def create_nudge(
    request: Request,
    service: NudgeService = Depends(get_nudge_service),
) -> NudgeMutation:
    """Create a nudge.  ``status`` defaults to ``draft``."""
    try:
        async with read_payload(request) as (fields, files):
            nudge_id = await run_in_threadpool(
                service.create_nudge, fields, files.get("cover_image"), files.get("icon")
            )
    except ApiError as e:
        raise e.to_http() from e
    return NudgeMutation(message="Nudge created successfully", nudge_id=nudge_id)


@router.put("/{nudge_id}", response_model=NudgeMutation)
async def update_nudge(
    nudge_id: str,
    request: Request,
    service: NudgeService = Depends(get_nudge_service),
) -> NudgeMutation:
    try:
        async with read_payload(request) as (fields, files):
            await run_in_threadpool(
                service.update_nudge,
                nudge_id,
                fields,
                files.get("cover_image"),
                files.get("icon"),
            )
    except ApiError as e:
        raise e.to_http() from e
    return NudgeMutation(message="Nudge updated successfully", nudge_id=nudge_id)


@router.delete("/{nudge_id}", response_model=NudgeMutation)
def delete_nudge(
    nudge_id: str,
    service: NudgeService = Depends(get_nudge_service),
) -> NudgeMutation:
    try:
        service.delete_nudge(nudge_id)
    except ApiError as e:
        raise e.to_http() from e
    return NudgeMutation(message="Nudge deleted successfully", nudge_id=nudge_id)
