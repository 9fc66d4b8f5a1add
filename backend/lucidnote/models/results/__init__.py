"""Result models for service operations."""

from lucidnote.models.results.base import ServiceResult
from lucidnote.models.results.gemini import GenerationResult
from lucidnote.models.results.actions import ActionError, ActionResult, NoteResult, NoteListResult
from lucidnote.models.results.ai import SummaryResult, StudyGuideResult

__all__ = [
    "ServiceResult", "GenerationResult",
    "ActionError", "ActionResult", "NoteResult", "NoteListResult",
    "SummaryResult", "StudyGuideResult",
]
