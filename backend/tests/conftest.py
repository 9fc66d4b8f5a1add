"""Shared test fixtures and configuration."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from lucidnote.config import Settings
from lucidnote.database.db import init_db
from lucidnote.services.auth import AuthService
from lucidnote.services.note_store import NoteStore
from lucidnote.services.notes import NoteActions
from lucidnote.services.revalidation import ViewRevalidator


def gemini_reply(text: str, status_code: int = 200) -> httpx.Response:
    """Build a generateContent response carrying ``text``."""
    return httpx.Response(
        status_code,
        json={
            "candidates": [
                {"content": {"parts": [{"text": text}]}, "finishReason": "STOP"}
            ],
            "usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 34, "totalTokenCount": 46},
            "modelVersion": "gemini-2.0-flash",
        },
    )


def study_guide_json(**overrides) -> str:
    guide = {
        "summary": "Photosynthesis turns light into chemical energy.",
        "flashcards": [{"front": "Chlorophyll", "back": "Green pigment that absorbs light"}],
        "quizQuestions": [
            {
                "question": "Where does photosynthesis happen?",
                "options": ["Chloroplast", "Nucleus", "Ribosome", "Golgi"],
                "correctAnswer": "Chloroplast",
            }
        ],
    }
    guide.update(overrides)
    return json.dumps(guide)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "notes.db")


@pytest.fixture
def test_settings(db_path):
    return Settings(
        DATABASE_PATH=db_path,
        GEMINI_API_KEY="test-gemini-key",
        GEMINI_MAX_RETRIES=2,
        GEMINI_RETRY_BASE_SECONDS=0.0,
        GEMINI_RETRY_MAX_SECONDS=0.0,
        STUDY_GUIDE_TIMEOUT_SECONDS=2.0,
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
async def auth_service(db_path):
    await init_db(db_path)
    return AuthService(db_path=db_path, session_ttl_seconds=3600)


@pytest.fixture
async def session(auth_service):
    return await auth_service.sign_up("ada@example.com", "correct-horse")


@pytest.fixture
async def other_session(auth_service):
    return await auth_service.sign_up("grace@example.com", "battery-staple")


@pytest.fixture
def store(db_path):
    return NoteStore(db_path=db_path)


@pytest.fixture
def sio():
    server = MagicMock()
    server.emit = AsyncMock()
    return server


@pytest.fixture
def revalidator(sio):
    return ViewRevalidator(sio=sio)


@pytest.fixture
def actions(store, revalidator, session):
    return NoteActions(store=store, revalidator=revalidator, session=session)
