"""Client for the summary and study-guide endpoints."""

import httpx
import pydantic

from lucidnote.client.http import ApiClient
from lucidnote.models import ActionError, ErrorKind, StudyGuide, StudyGuideResult, SummaryResult


class AIHelperClient(ApiClient):
    """
    Thin pass-through to ``/api/ai``.

    Both calls return a tagged result and never raise; a study guide body
    that does not match the expected shape is a parse error.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 45.0,
    ):
        super().__init__(base_url, access_token=access_token, transport=transport, timeout=timeout)

    async def summarize(self, text: str, max_length: int = 100) -> SummaryResult:
        response = await self._request(
            "POST", "/api/ai/summarize", json={"text": text, "maxLength": max_length}
        )
        if isinstance(response, ActionError):
            return SummaryResult(success=False, error=response)
        try:
            summary = response.json()["summary"]
        except (ValueError, KeyError, TypeError):
            summary = None
        if not isinstance(summary, str):
            error = ActionError(kind=ErrorKind.PARSE, message="Summary response is missing 'summary'")
            return SummaryResult(success=False, error=error)
        return SummaryResult(success=True, summary=summary)

    async def generate_study_guide(self, topic: str) -> StudyGuideResult:
        response = await self._request("POST", "/api/ai/study-guide", json={"topic": topic})
        if isinstance(response, ActionError):
            return StudyGuideResult(success=False, error=response)
        try:
            guide = StudyGuide.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            error = ActionError(kind=ErrorKind.PARSE, message=f"Malformed study guide: {e}")
            return StudyGuideResult(success=False, error=error)
        return StudyGuideResult(success=True, study_guide=guide)
