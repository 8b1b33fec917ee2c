"""
Pydantic models for nudges.

A nudge is a reminder notice scheduled for ``send_time``.  Its
``event_id`` points at an event by value only; the referenced event may
not exist.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import DocumentModel, PaginationBase


class NudgeRead(DocumentModel):
    """A nudge document as returned by the API."""

    type: Optional[str] = "nudge"
    uid: Optional[int] = Field(None, examples=[18])
    title: Optional[str] = Field(None, examples=["Reminder"])
    event_id: Optional[str] = Field(None, examples=["65a1f0c2e4b0a1b2c3d4e5f6"])
    send_time: Optional[datetime] = None
    description: Optional[str] = None
    invitation_line: Optional[str] = None
    status: Optional[str] = Field("draft", examples=["draft"])
    cover_image: Optional[str] = None
    icon: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NudgeList(BaseModel):
    nudges: List[NudgeRead]
    total: int


class NudgePagination(PaginationBase):
    totalNudges: int


class NudgePage(BaseModel):
    nudges: List[NudgeRead]
    pagination: NudgePagination


class NudgeMutation(BaseModel):
    message: str = Field(..., examples=["Nudge created successfully"])
    nudge_id: str
