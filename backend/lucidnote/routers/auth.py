"""Account and session routes."""

from fastapi import APIRouter, HTTPException

from lucidnote.dependencies import AuthServiceDep, SessionDep
from lucidnote.errors import HTTP_STATUS_BY_KIND, LucidNoteError
from lucidnote.models import Credentials, Profile, Session

router = APIRouter()


def _raise(error: LucidNoteError) -> None:
    raise HTTPException(HTTP_STATUS_BY_KIND[error.kind], error.to_error().model_dump(mode="json")) from error


@router.post("/sign-up", response_model=Session, status_code=201)
async def sign_up(body: Credentials, service: AuthServiceDep):
    try:
        return await service.sign_up(body.email, body.password)
    except LucidNoteError as e:
        _raise(e)


@router.post("/sign-in", response_model=Session)
async def sign_in(body: Credentials, service: AuthServiceDep):
    try:
        return await service.sign_in(body.email, body.password)
    except LucidNoteError as e:
        _raise(e)


@router.post("/sign-out")
async def sign_out(session: SessionDep, service: AuthServiceDep):
    await service.sign_out(session.access_token)
    return {"status": "signed_out"}


@router.get("/profile", response_model=Profile)
async def get_profile(session: SessionDep, service: AuthServiceDep):
    try:
        return await service.get_profile(session)
    except LucidNoteError as e:
        _raise(e)
