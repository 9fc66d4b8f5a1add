"""
LucidNote models.

Usage:
    from lucidnote.models import Note, NoteCreate, NoteUpdate, Session
    from lucidnote.models import ErrorKind, CacheStatus
    from lucidnote.models import NoteResult, StudyGuideResult
"""

# --- Enums ---
from lucidnote.models.enums import ErrorKind, CacheStatus, NotificationLevel

# --- Domain models ---
from lucidnote.models.domain import (
    Note, NoteCreate, NoteUpdate, SummaryUpdate,
    Credentials, Session, Profile,
    Flashcard, QuizQuestion, StudyGuide, SummarizeRequest, StudyGuideRequest,
)

# --- Result models ---
from lucidnote.models.results import (
    ServiceResult, GenerationResult,
    ActionError, ActionResult, NoteResult, NoteListResult,
    SummaryResult, StudyGuideResult,
)

__all__ = [
    # Enums
    "ErrorKind", "CacheStatus", "NotificationLevel",
    # Domain
    "Note", "NoteCreate", "NoteUpdate", "SummaryUpdate",
    "Credentials", "Session", "Profile",
    "Flashcard", "QuizQuestion", "StudyGuide", "SummarizeRequest", "StudyGuideRequest",
    # Results
    "ServiceResult", "GenerationResult",
    "ActionError", "ActionResult", "NoteResult", "NoteListResult",
    "SummaryResult", "StudyGuideResult",
]
