"""Tests for summaries, study guides and the Gemini transport."""

import asyncio
import json

import httpx
import pytest

from conftest import gemini_reply, study_guide_json
from lucidnote.errors import ParseError
from lucidnote.models import ErrorKind
from lucidnote.services.ai import AIService, extract_json_object, parse_study_guide
from lucidnote.services.gemini import GeminiService


async def _service(test_settings, handler) -> tuple[AIService, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    async def recording(request: httpx.Request):
        requests.append(request)
        response = handler(request)
        if asyncio.iscoroutine(response):
            response = await response
        return response

    gemini = GeminiService(app_settings=test_settings, transport=httpx.MockTransport(recording))
    await gemini.initialize()
    return AIService(gemini=gemini, app_settings=test_settings), requests


class TestExtractJsonObject:

    def test_object_wrapped_in_prose(self):
        raw = 'Sure! Here it is:\n```json\n{"summary": "s", "n": 1}\n```\nGood luck.'
        assert extract_json_object(raw) == {"summary": "s", "n": 1}

    def test_no_object(self):
        with pytest.raises(ParseError, match="Failed to parse JSON from response"):
            extract_json_object("I cannot help with that.")

    def test_invalid_json(self):
        with pytest.raises(ParseError):
            extract_json_object("{summary: unquoted}")

    def test_empty_response(self):
        with pytest.raises(ParseError):
            extract_json_object("")


class TestParseStudyGuide:

    def test_complete_guide(self):
        guide = parse_study_guide(json.loads(study_guide_json()))

        assert guide.summary.startswith("Photosynthesis")
        assert guide.flashcards[0].front == "Chlorophyll"
        assert guide.quiz_questions[0].correct_answer == "Chloroplast"

    @pytest.mark.parametrize("overrides", [
        {"summary": "   "},
        {"flashcards": []},
        {"quizQuestions": []},
        {"flashcards": [{"front": "only a front"}]},
        {"quizQuestions": "not a list"},
    ])
    def test_partial_guide_fails_closed(self, overrides):
        with pytest.raises(ParseError):
            parse_study_guide(json.loads(study_guide_json(**overrides)))


class TestSummarize:

    @pytest.mark.asyncio
    async def test_summary_is_returned_trimmed(self, test_settings):
        service, requests = await _service(test_settings, lambda r: gemini_reply("  A concise summary.\n"))

        result = await service.summarize("Long note text about mitochondria.", 50)

        assert result.success
        assert result.summary == "A concise summary."
        payload = json.loads(requests[0].content)
        assert "50 words" in payload["contents"][0]["parts"][0]["text"]
        assert payload["generationConfig"]["temperature"] == test_settings.SUMMARY_TEMPERATURE
        assert requests[0].headers["x-goog-api-key"] == "test-gemini-key"
        assert requests[0].url.path.endswith("/models/gemini-2.0-flash:generateContent")

    @pytest.mark.asyncio
    async def test_default_length(self, test_settings):
        service, requests = await _service(test_settings, lambda r: gemini_reply("ok"))

        await service.summarize("Some text")

        prompt = json.loads(requests[0].content)["contents"][0]["parts"][0]["text"]
        assert f"{test_settings.SUMMARY_DEFAULT_WORDS} words" in prompt

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text, max_length", [("", 100), ("   ", 100), ("text", 0), ("text", 5000)])
    async def test_invalid_input(self, test_settings, text, max_length):
        service, requests = await _service(test_settings, lambda r: gemini_reply("unused"))

        result = await service.summarize(text, max_length)

        assert result.error.kind is ErrorKind.VALIDATION
        assert requests == []

    @pytest.mark.asyncio
    async def test_upstream_error_keeps_status(self, test_settings):
        service, _ = await _service(test_settings, lambda r: httpx.Response(403, json={"error": "denied"}))

        result = await service.summarize("Some text", 20)

        assert result.error.kind is ErrorKind.STORE
        assert result.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_api_key(self, test_settings):
        test_settings.GEMINI_API_KEY = ""
        gemini = GeminiService(app_settings=test_settings)
        await gemini.initialize()
        service = AIService(gemini=gemini, app_settings=test_settings)

        result = await service.summarize("Some text", 20)

        assert not gemini.is_available
        assert result.error.kind is ErrorKind.STORE
        assert result.error.message == "Server configuration error"
        assert result.status_code == 500


class TestStudyGuide:

    @pytest.mark.asyncio
    async def test_guide_embedded_in_prose(self, test_settings):
        reply = f"Here is your study guide:\n```json\n{study_guide_json()}\n```"
        service, requests = await _service(test_settings, lambda r: gemini_reply(reply))

        result = await service.generate_study_guide("  Photosynthesis ")

        assert result.success
        assert len(result.study_guide.flashcards) == 1
        prompt = json.loads(requests[0].content)["contents"][0]["parts"][0]["text"]
        assert '"Photosynthesis"' in prompt

    @pytest.mark.asyncio
    async def test_reply_without_json_is_parse_error(self, test_settings):
        service, _ = await _service(test_settings, lambda r: gemini_reply("Sorry, no guide today."))

        result = await service.generate_study_guide("Photosynthesis")

        assert result.error.kind is ErrorKind.PARSE
        assert result.error.message == "Failed to parse JSON from response"

    @pytest.mark.asyncio
    async def test_guide_without_quiz_is_parse_error(self, test_settings):
        reply = study_guide_json(quizQuestions=[])
        service, _ = await _service(test_settings, lambda r: gemini_reply(reply))

        result = await service.generate_study_guide("Photosynthesis")

        assert result.error.kind is ErrorKind.PARSE

    @pytest.mark.asyncio
    async def test_empty_topic(self, test_settings):
        service, requests = await _service(test_settings, lambda r: gemini_reply("unused"))

        result = await service.generate_study_guide("  ")

        assert result.error.kind is ErrorKind.VALIDATION
        assert requests == []

    @pytest.mark.asyncio
    async def test_slow_model_times_out(self, test_settings):
        test_settings.STUDY_GUIDE_TIMEOUT_SECONDS = 0.05

        async def slow(request):
            await asyncio.sleep(1)
            return gemini_reply(study_guide_json())

        service, _ = await _service(test_settings, slow)

        result = await service.generate_study_guide("Photosynthesis")

        assert result.error.kind is ErrorKind.STORE
        assert result.status_code == 504


class TestGeminiRetry:

    @pytest.mark.asyncio
    async def test_transient_errors_are_retried(self, test_settings):
        statuses = iter([503, 429])

        def flaky(request):
            status = next(statuses, 200)
            if status != 200:
                return httpx.Response(status)
            return gemini_reply("recovered")

        service, requests = await _service(test_settings, flaky)

        result = await service.gemini.generate("prompt")

        assert result.success
        assert result.text == "recovered"
        assert result.total_tokens == 46
        assert len(requests) == 3

    @pytest.mark.asyncio
    async def test_retries_are_bounded(self, test_settings):
        service, requests = await _service(test_settings, lambda r: httpx.Response(500))

        result = await service.gemini.generate("prompt")

        assert result.status_code == 500
        assert len(requests) == test_settings.GEMINI_MAX_RETRIES + 1

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(self, test_settings):
        service, requests = await _service(test_settings, lambda r: httpx.Response(400, text="bad request"))

        result = await service.gemini.generate("prompt")

        assert result.status_code == 400
        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_connection_failure(self, test_settings):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        service, requests = await _service(test_settings, unreachable)

        result = await service.gemini.generate("prompt")

        assert not result.success
        assert result.status_code == 502
        assert len(requests) == test_settings.GEMINI_MAX_RETRIES + 1

    @pytest.mark.asyncio
    async def test_response_without_text(self, test_settings):
        service, _ = await _service(test_settings, lambda r: httpx.Response(200, json={"candidates": []}))

        result = await service.gemini.generate("prompt")

        assert result.error == "Failed to parse Gemini API response"
