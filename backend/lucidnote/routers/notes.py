"""Note routes."""

from fastapi import APIRouter, HTTPException

from lucidnote.dependencies import NoteActionsDep
from lucidnote.errors import HTTP_STATUS_BY_KIND
from lucidnote.models import ActionError, Note, NoteCreate, NoteUpdate, SummaryUpdate

router = APIRouter()


def _raise(error: ActionError) -> None:
    raise HTTPException(HTTP_STATUS_BY_KIND[error.kind], error.model_dump(mode="json"))


@router.get("", response_model=list[Note])
async def list_notes(actions: NoteActionsDep):
    result = await actions.list_notes()
    if not result.success:
        _raise(result.error)
    return result.notes


@router.post("", response_model=Note, status_code=201)
async def create_note(body: NoteCreate, actions: NoteActionsDep):
    result = await actions.create_note(body.title, body.content)
    if not result.success:
        _raise(result.error)
    return result.note


@router.get("/{note_id}", response_model=Note)
async def get_note(note_id: str, actions: NoteActionsDep):
    result = await actions.get_note(note_id)
    if not result.success:
        _raise(result.error)
    return result.note


@router.put("/{note_id}", response_model=Note)
async def update_note(note_id: str, body: NoteUpdate, actions: NoteActionsDep):
    result = await actions.update_note(note_id, body)
    if not result.success:
        _raise(result.error)
    return result.note


@router.delete("/{note_id}")
async def delete_note(note_id: str, actions: NoteActionsDep):
    result = await actions.delete_note(note_id)
    if not result.success:
        _raise(result.error)
    return {"status": "deleted", "id": note_id}


@router.put("/{note_id}/summary", response_model=Note)
async def save_summary(note_id: str, body: SummaryUpdate, actions: NoteActionsDep):
    result = await actions.save_summary(note_id, body.summary)
    if not result.success:
        _raise(result.error)
    return result.note
