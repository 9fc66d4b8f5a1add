"""Result models for note actions."""

from pydantic import BaseModel, Field
from typing import Optional

from lucidnote.models.domain.note import Note
from lucidnote.models.enums import ErrorKind
from lucidnote.models.results.base import ServiceResult


class ActionError(BaseModel):
    """Tagged error value returned instead of raising."""
    kind: ErrorKind
    message: str


class ActionResult(ServiceResult):
    """Result of an action with no payload, such as delete."""
    error: Optional[ActionError] = None


class NoteResult(ActionResult):
    note: Optional[Note] = None


class NoteListResult(ActionResult):
    notes: list[Note] = Field(default_factory=list)
