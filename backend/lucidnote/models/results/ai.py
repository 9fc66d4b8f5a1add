"""Result models for AI summary and study-guide operations."""

from typing import Optional

from lucidnote.models.domain.study import StudyGuide
from lucidnote.models.results.actions import ActionResult


class SummaryResult(ActionResult):
    summary: Optional[str] = None
    status_code: Optional[int] = None


class StudyGuideResult(ActionResult):
    study_guide: Optional[StudyGuide] = None
    status_code: Optional[int] = None
