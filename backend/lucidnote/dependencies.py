"""
Dependency injection for FastAPI routes.

Provides typed service dependencies that enable IDE navigation (Ctrl+Click).
"""

from typing import Annotated
from fastapi import Request, Depends, HTTPException

from lucidnote.models import Session
from lucidnote.services.ai import AIService
from lucidnote.services.auth import AuthService
from lucidnote.services.notes import NoteActions


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_ai_service(request: Request) -> AIService:
    return request.app.state.ai_service


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_optional_session(
    request: Request,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> Session | None:
    return await auth.get_session(_bearer_token(request))


async def get_session(
    session: Annotated[Session | None, Depends(get_optional_session)],
) -> Session:
    if session is None:
        raise HTTPException(401, {"kind": "auth", "message": "User not authenticated"})
    return session


def get_note_actions(
    request: Request,
    session: Annotated[Session, Depends(get_session)],
) -> NoteActions:
    state = request.app.state
    return NoteActions(
        store=state.note_store,
        revalidator=state.revalidator,
        session=session,
        title_max_chars=state.settings.NOTE_TITLE_MAX_CHARS,
    )


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
AIServiceDep = Annotated[AIService, Depends(get_ai_service)]
SessionDep = Annotated[Session, Depends(get_session)]
NoteActionsDep = Annotated[NoteActions, Depends(get_note_actions)]
