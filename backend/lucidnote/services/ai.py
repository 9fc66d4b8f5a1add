"""AI summaries and study guides on top of the Gemini transport."""

import asyncio
import json
import re
from typing import Any

import pydantic

from lucidnote.config import Settings, settings
from lucidnote.errors import LucidNoteError, ParseError, StoreError, ValidationError
from lucidnote.logging import get_logger
from lucidnote.models import StudyGuide, StudyGuideResult, SummaryResult
from lucidnote.services.gemini import GeminiService
from lucidnote.services.prompts import build_study_guide_prompt, build_summary_prompt

logger = get_logger("services.ai")

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json_object(raw_response: str) -> dict[str, Any]:
    """
    Pull the JSON object out of free-form model output.

    The model may wrap the object in prose or code fences, so everything from
    the first ``{`` to the last ``}`` is decoded.

    :raises ParseError: if no object is present or it does not decode
    """
    match = _JSON_OBJECT_RE.search(raw_response or "")
    if not match:
        raise ParseError("Failed to parse JSON from response")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ParseError(f"Model returned invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseError("Model returned JSON that is not an object")
    return data


def parse_study_guide(data: dict[str, Any]) -> StudyGuide:
    """
    Validate a decoded study guide, failing closed on a partial one.

    :raises ParseError: if summary, flashcards or quiz questions are missing
    """
    try:
        guide = StudyGuide.model_validate(data)
    except pydantic.ValidationError as e:
        raise ParseError(f"Study guide has an unexpected shape: {e.error_count()} error(s)") from e
    if not guide.summary.strip():
        raise ParseError("Study guide is missing a summary")
    if not guide.flashcards:
        raise ParseError("Study guide has no flashcards")
    if not guide.quiz_questions:
        raise ParseError("Study guide has no quiz questions")
    return guide


class AIService:
    """Summaries of note text and topic study guides."""

    def __init__(self, gemini: GeminiService, app_settings: Settings | None = None):
        self.gemini = gemini
        self.settings = app_settings or settings

    async def summarize(self, text: str, max_length: int | None = None) -> SummaryResult:
        if max_length is None:
            max_length = self.settings.SUMMARY_DEFAULT_WORDS
        try:
            if not text or not text.strip():
                raise ValidationError("No text provided for summarization")
            if not 1 <= max_length <= self.settings.SUMMARY_MAX_WORDS:
                raise ValidationError(
                    f"maxLength must be between 1 and {self.settings.SUMMARY_MAX_WORDS}"
                )
            result = await self.gemini.generate(
                build_summary_prompt(text, max_length),
                temperature=self.settings.SUMMARY_TEMPERATURE,
                max_output_tokens=self.settings.SUMMARY_MAX_OUTPUT_TOKENS,
            )
            if not result.success:
                raise StoreError(result.error or "Failed to generate summary", status_code=result.status_code)
        except LucidNoteError as e:
            return SummaryResult(success=False, error=e.to_error(), status_code=e.status_code)

        return SummaryResult(success=True, summary=result.text.strip())

    async def _generate_study_guide(self, topic: str) -> StudyGuide:
        result = await self.gemini.generate(
            build_study_guide_prompt(topic),
            temperature=self.settings.STUDY_GUIDE_TEMPERATURE,
            max_output_tokens=self.settings.STUDY_GUIDE_MAX_OUTPUT_TOKENS,
        )
        if not result.success:
            raise StoreError(result.error or "Failed to generate study guide", status_code=result.status_code)
        logger.debug(f"Study guide raw response: {result.text[:500]}")
        return parse_study_guide(extract_json_object(result.text))

    async def generate_study_guide(self, topic: str) -> StudyGuideResult:
        timeout = self.settings.STUDY_GUIDE_TIMEOUT_SECONDS
        try:
            if not topic or not topic.strip():
                raise ValidationError("No topic provided")
            guide = await asyncio.wait_for(self._generate_study_guide(topic.strip()), timeout=timeout)
        except asyncio.TimeoutError:
            logger.error(f"Study guide for '{topic[:40]}' abandoned after {timeout:.0f}s")
            error = StoreError("Study guide generation timed out", status_code=504)
            return StudyGuideResult(success=False, error=error.to_error(), status_code=504)
        except LucidNoteError as e:
            if isinstance(e, ParseError):
                logger.error(f"Study guide for '{topic[:40]}' could not be parsed: {e.message}")
            return StudyGuideResult(success=False, error=e.to_error(), status_code=e.status_code)

        logger.info(
            f"Study guide for '{topic[:40]}': {len(guide.flashcards)} flashcards, "
            f"{len(guide.quiz_questions)} quiz questions"
        )
        return StudyGuideResult(success=True, study_guide=guide)
