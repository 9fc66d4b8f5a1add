"""Note domain model."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, timezone
from uuid import uuid4


class NoteCreate(BaseModel):
    """Payload for creating a note."""
    title: str
    content: str


class NoteUpdate(BaseModel):
    """Payload for updating a note. Only provided fields are patched."""
    title: Optional[str] = None
    content: Optional[str] = None


class SummaryUpdate(BaseModel):
    """Payload for attaching an AI summary to a note."""
    summary: str


class Note(BaseModel):
    """A user-owned rich-text note with an optional AI summary."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    title: str
    content: str
    summary: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
