"""
Gemini generative-language integration service.

Handles the HTTP client lifecycle, retries and response decoding for
generateContent. Prompting and output parsing live in AIService; this is the
transport layer.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx

from lucidnote.config import Settings, settings
from lucidnote.logging import get_logger
from lucidnote.models import GenerationResult

logger = get_logger('services.gemini')
_T = TypeVar("_T")

_TRANSIENT_STATUS = {429, 500, 502, 503, 504}


class GeminiService:
    """Service for calling the Gemini generateContent endpoint."""

    def __init__(
        self,
        app_settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = app_settings or settings
        self.transport = transport
        self.client: httpx.AsyncClient | None = None
        self._initialized = False

    async def initialize(self):
        if not self.settings.GEMINI_API_KEY:
            logger.warning("GEMINI_API_KEY not set - AI features will be disabled")
            return

        self.client = httpx.AsyncClient(
            base_url=self.settings.GEMINI_API_BASE_URL.rstrip("/"),
            timeout=self.settings.GEMINI_REQUEST_TIMEOUT_SECONDS,
            headers={"x-goog-api-key": self.settings.GEMINI_API_KEY},
            transport=self.transport,
        )
        self._initialized = True
        logger.info(f"Gemini client initialized (model={self.settings.GEMINI_MODEL})")

    async def close(self):
        if self.client is not None:
            await self.client.aclose()
        self.client = None
        self._initialized = False

    @property
    def is_available(self) -> bool:
        return self._initialized and self.client is not None

    def _is_transient_error(self, error: Exception) -> bool:
        if isinstance(error, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
            return True
        if isinstance(error, httpx.TransportError):
            return True
        if isinstance(error, httpx.HTTPStatusError):
            return error.response.status_code in _TRANSIENT_STATUS
        return False

    async def _run_with_retry(
        self,
        operation_name: str,
        operation: Callable[[], Awaitable[_T]],
    ) -> _T:
        max_retries = max(int(self.settings.GEMINI_MAX_RETRIES), 0)
        total_attempts = max_retries + 1
        base_delay = max(float(self.settings.GEMINI_RETRY_BASE_SECONDS), 0.0)
        max_delay = max(float(self.settings.GEMINI_RETRY_MAX_SECONDS), base_delay)

        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as error:
                should_retry = attempt < total_attempts and self._is_transient_error(error)
                if not should_retry:
                    raise

                delay = min(base_delay * (2 ** (attempt - 1)), max_delay)
                logger.warning(
                    "Gemini %s failed (attempt %d/%d): %s. Retrying in %.2fs",
                    operation_name,
                    attempt,
                    total_attempts,
                    error,
                    delay,
                )
                if delay > 0:
                    await asyncio.sleep(delay)
                attempt += 1

    def _build_payload(
        self,
        prompt: str,
        temperature: float,
        max_output_tokens: int,
        top_k: int,
        top_p: float,
    ) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "topK": top_k,
                "topP": top_p,
                "maxOutputTokens": max_output_tokens,
            },
        }

    def _extract_text(self, data: dict[str, Any]) -> str | None:
        candidates = data.get("candidates") or []
        if not candidates:
            return None
        parts = (candidates[0].get("content") or {}).get("parts") or []
        if not parts:
            return None
        text = parts[0].get("text")
        return text if isinstance(text, str) else None

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.4,
        max_output_tokens: int = 1024,
        top_k: int = 32,
        top_p: float = 0.95,
    ) -> GenerationResult:
        if not self.is_available:
            return GenerationResult(success=False, error="Server configuration error", status_code=500)

        model = self.settings.GEMINI_MODEL
        payload = self._build_payload(prompt, temperature, max_output_tokens, top_k, top_p)

        async def _post() -> httpx.Response:
            response = await self.client.post(f"/models/{model}:generateContent", json=payload)
            if response.status_code in _TRANSIENT_STATUS:
                response.raise_for_status()
            return response

        try:
            response = await self._run_with_retry("generateContent", _post)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"Gemini API error: {status}")
            return GenerationResult(success=False, error=f"API error: {status}", status_code=status)
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {e}")
            return GenerationResult(success=False, error=f"Gemini request failed: {e}", status_code=502)

        if response.status_code >= 400:
            logger.error(f"Gemini API error: {response.status_code} {response.text[:200]}")
            return GenerationResult(
                success=False,
                error=f"API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            logger.error("Gemini returned a non-JSON body")
            return GenerationResult(success=False, error="Failed to parse Gemini API response", status_code=500)

        text = self._extract_text(data)
        if text is None:
            logger.error(f"Unexpected Gemini response structure: {str(data)[:200]}")
            return GenerationResult(success=False, error="Failed to parse Gemini API response", status_code=500)

        usage = data.get("usageMetadata") or {}
        finish_reason = ((data.get("candidates") or [{}])[0]).get("finishReason")
        logger.info(
            "Gemini usage model=%s finish=%s tokens=%s/%s/%s",
            data.get("modelVersion") or model,
            finish_reason or "(unknown)",
            usage.get("promptTokenCount", "?"),
            usage.get("candidatesTokenCount", "?"),
            usage.get("totalTokenCount", "?"),
        )
        return GenerationResult(
            success=True,
            text=text,
            status_code=response.status_code,
            model_name=data.get("modelVersion") or model,
            prompt_tokens=usage.get("promptTokenCount"),
            output_tokens=usage.get("candidatesTokenCount"),
            total_tokens=usage.get("totalTokenCount"),
            finish_reason=finish_reason,
        )
