"""
Pydantic models for event data.

``EventRead`` describes a stored event document.  Create and update
requests are multipart forms and are coerced field by field in
``EventService``; the response models below describe what the API
returns for each operation.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from .common import DocumentModel, PaginationBase


class EventFiles(BaseModel):
    image: Optional[str] = Field(None, examples=["/uploads/1704103200000-123456789.png"])


class EventRead(DocumentModel):
    """An event document as returned by the API."""

    type: Optional[str] = "event"
    uid: Optional[int] = Field(None, examples=[18])
    name: Optional[str] = Field(None, examples=["Launch"])
    tagline: Optional[str] = None
    schedule: Optional[datetime] = Field(None, examples=["2024-01-01T10:00:00Z"])
    description: Optional[str] = None
    moderator: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None
    rigor_rank: Optional[int] = 0
    attendees: Optional[List[Any]] = Field(default_factory=list)
    files: Optional[EventFiles] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EventList(BaseModel):
    events: List[EventRead]
    total: int


class EventPagination(PaginationBase):
    totalEvents: int


class EventPage(BaseModel):
    """One page of the ``type=latest`` listing."""

    events: List[EventRead]
    pagination: EventPagination


class EventMutation(BaseModel):
    message: str = Field(..., examples=["Event created successfully"])
    event_id: str
