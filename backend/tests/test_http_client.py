"""HTTP clients and NoteSync running against the application in-process."""

import httpx
import pytest

from conftest import gemini_reply, study_guide_json
from lucidnote.app import create_app
from lucidnote.client import AIHelperClient, HttpNoteActions, NoteSync, QueryCache
from lucidnote.client.http import error_from_response
from lucidnote.client.query_keys import NoteKeys
from lucidnote.models import ErrorKind

BASE_URL = "http://testserver"


@pytest.fixture
async def app(test_settings):
    replies = {"text": "A short summary."}
    application = create_app(
        test_settings,
        gemini_transport=httpx.MockTransport(lambda request: gemini_reply(replies["text"])),
    )
    application.state.gemini_replies = replies
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def token(app):
    session = await app.state.auth_service.sign_up("ada@example.com", "secret1")
    return session.access_token


@pytest.fixture
async def notes_client(app, token):
    async with HttpNoteActions(BASE_URL, access_token=token, transport=httpx.ASGITransport(app=app)) as client:
        yield client


@pytest.fixture
async def ai_client(app, token):
    async with AIHelperClient(BASE_URL, access_token=token, transport=httpx.ASGITransport(app=app)) as client:
        yield client


class TestErrorDecoding:

    def test_detail_with_kind(self):
        response = httpx.Response(404, json={"detail": {"kind": "not_found", "message": "Note not found"}})
        error = error_from_response(response)
        assert error.kind is ErrorKind.NOT_FOUND
        assert error.message == "Note not found"

    def test_ai_error_body(self):
        response = httpx.Response(502, json={"error": "Failed to parse JSON from response", "kind": "parse"})
        error = error_from_response(response)
        assert error.kind is ErrorKind.PARSE

    def test_request_validation_body(self):
        response = httpx.Response(422, json={"detail": [{"msg": "Field required"}]})
        error = error_from_response(response)
        assert error.kind is ErrorKind.VALIDATION
        assert error.message == "Field required"

    def test_non_json_body(self):
        error = error_from_response(httpx.Response(503, text="Service Unavailable"))
        assert error.kind is ErrorKind.STORE
        assert error.message == "HTTP 503"


class TestHttpNoteActions:

    @pytest.mark.asyncio
    async def test_round_trip(self, notes_client):
        created = await notes_client.create_note("Biology", "<p>Cells</p>")
        assert created.success

        fetched = await notes_client.get_note(created.note.id)
        assert fetched.note == created.note

        updated = await notes_client.update_note(created.note.id, {"content": "<p>Cells divide</p>"})
        assert updated.note.updated_at > created.note.updated_at

        listed = await notes_client.list_notes()
        assert [n.id for n in listed.notes] == [created.note.id]

        assert (await notes_client.delete_note(created.note.id)).success
        second = await notes_client.delete_note(created.note.id)
        assert second.error.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_validation_error_is_tagged(self, notes_client):
        result = await notes_client.create_note("Title", "<p></p>")

        assert result.error.kind is ErrorKind.VALIDATION
        assert result.error.message == "Content is required"

    @pytest.mark.asyncio
    async def test_missing_token_is_auth_error(self, app):
        async with HttpNoteActions(BASE_URL, transport=httpx.ASGITransport(app=app)) as anonymous:
            result = await anonymous.list_notes()

        assert result.error.kind is ErrorKind.AUTH

    @pytest.mark.asyncio
    async def test_network_failure_is_store_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with HttpNoteActions(BASE_URL, access_token="t", transport=httpx.MockTransport(refuse)) as client:
            result = await client.get_note("any")

        assert result.error.kind is ErrorKind.STORE
        assert result.error.message.startswith("Network error")


class TestAIHelperClient:

    @pytest.mark.asyncio
    async def test_summarize(self, ai_client):
        result = await ai_client.summarize("Mitochondria make ATP.", 20)
        assert result.summary == "A short summary."

    @pytest.mark.asyncio
    async def test_study_guide(self, app, ai_client):
        app.state.gemini_replies["text"] = study_guide_json()

        result = await ai_client.generate_study_guide("Photosynthesis")

        assert result.success
        assert result.study_guide.quiz_questions[0].correct_answer == "Chloroplast"

    @pytest.mark.asyncio
    async def test_study_guide_parse_error(self, app, ai_client):
        app.state.gemini_replies["text"] = "no json"

        result = await ai_client.generate_study_guide("Photosynthesis")

        assert result.error.kind is ErrorKind.PARSE

    @pytest.mark.asyncio
    async def test_malformed_summary_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"text": "wrong key"}))
        async with AIHelperClient(BASE_URL, transport=transport) as client:
            result = await client.summarize("text")

        assert result.error.kind is ErrorKind.PARSE


@pytest.mark.asyncio
async def test_note_sync_over_http(notes_client, ai_client):
    sync = NoteSync(cache=QueryCache(), actions=notes_client, summarizer=ai_client)
    await sync.fetch_notes()

    created = await sync.create_note("Cells", "<p>Cells divide by mitosis.</p>")
    summarized = await sync.summarize_note(created.note.id, max_length=25)

    cached = sync.reader.get_data(NoteKeys.lists())
    assert summarized.summary == "A short summary."
    assert cached[0].summary == "A short summary."
    assert (await notes_client.get_note(created.note.id)).note.summary == "A short summary."
