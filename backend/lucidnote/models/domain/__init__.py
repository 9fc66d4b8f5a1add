"""Domain models: notes, sessions and study guides."""

from lucidnote.models.domain.note import Note, NoteCreate, NoteUpdate, SummaryUpdate
from lucidnote.models.domain.auth import Credentials, Session, Profile
from lucidnote.models.domain.study import (
    Flashcard,
    QuizQuestion,
    StudyGuide,
    SummarizeRequest,
    StudyGuideRequest,
)

__all__ = [
    "Note", "NoteCreate", "NoteUpdate", "SummaryUpdate",
    "Credentials", "Session", "Profile",
    "Flashcard", "QuizQuestion", "StudyGuide", "SummarizeRequest", "StudyGuideRequest",
]
