"""Note actions: owner-scoped CRUD that reports failures as tagged results."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from lucidnote.errors import AuthError, LucidNoteError, NotFoundError, ValidationError
from lucidnote.logging import get_logger
from lucidnote.models import (
    ActionResult,
    Note,
    NoteListResult,
    NoteResult,
    NoteUpdate,
    Session,
)
from lucidnote.services.note_store import NoteStore
from lucidnote.services.revalidation import DASHBOARD_PATH, ViewRevalidator, note_path
from lucidnote.util import is_blank_rich_text

logger = get_logger("services.notes")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _next_timestamp(previous: datetime) -> datetime:
    # updated_at must strictly increase even when the clock has not advanced.
    now = _now()
    if previous.tzinfo is None:
        previous = previous.replace(tzinfo=timezone.utc)
    return now if now > previous else previous + timedelta(microseconds=1)


def _row_to_note(row: dict) -> Note:
    return Note(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        content=row["content"],
        summary=row.get("summary"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class NoteActions:
    """
    Note operations for one caller.

    Rows are always filtered by the session owner, so a caller can never see
    or touch another user's notes. Every method returns a result model; none
    of them raise for expected failures.
    """

    def __init__(
        self,
        store: NoteStore,
        revalidator: ViewRevalidator,
        session: Session | None,
        title_max_chars: int = 100,
    ):
        self.store = store
        self.revalidator = revalidator
        self.session = session
        self.title_max_chars = title_max_chars

    def _owner_id(self) -> str:
        if self.session is None:
            raise AuthError("User not authenticated")
        return self.session.user_id

    def _validate_title(self, title: str | None) -> str:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required")
        if len(title) > self.title_max_chars:
            raise ValidationError(f"Title must be at most {self.title_max_chars} characters")
        return title

    def _validate_content(self, content: str | None) -> str:
        if is_blank_rich_text(content):
            raise ValidationError("Content is required")
        return content

    async def _revalidate(self, note_id: str | None = None) -> None:
        paths = [DASHBOARD_PATH]
        if note_id:
            paths.append(note_path(note_id))
        await self.revalidator.mark_stale(self._owner_id(), *paths)

    async def list_notes(self) -> NoteListResult:
        if self.session is None:
            return NoteListResult(success=True, notes=[])
        try:
            rows = await self.store.select({"user_id": self.session.user_id})
        except LucidNoteError as e:
            logger.error(f"Error fetching notes: {e.message}")
            return NoteListResult(success=False, error=e.to_error())
        return NoteListResult(success=True, notes=[_row_to_note(r) for r in rows])

    async def get_note(self, note_id: str) -> NoteResult:
        try:
            if self.session is None:
                raise NotFoundError("Note not found")
            row = await self.store.select_one({"id": note_id, "user_id": self.session.user_id})
        except LucidNoteError as e:
            if not isinstance(e, NotFoundError):
                logger.error(f"Error fetching note {note_id[:8]}: {e.message}")
            return NoteResult(success=False, error=e.to_error())
        return NoteResult(success=True, note=_row_to_note(row))

    async def create_note(self, title: str, content: str) -> NoteResult:
        try:
            owner_id = self._owner_id()
            title = self._validate_title(title)
            content = self._validate_content(content)
            now = _now().isoformat(timespec="microseconds")
            row = await self.store.insert({
                "id": str(uuid4()),
                "user_id": owner_id,
                "title": title,
                "content": content,
                "summary": None,
                "created_at": now,
                "updated_at": now,
            })
        except LucidNoteError as e:
            logger.error(f"Error creating note: {e.message}")
            return NoteResult(success=False, error=e.to_error())

        note = _row_to_note(row)
        await self._revalidate()
        logger.info(f"Created note {note.id[:8]} for user {note.user_id[:8]}")
        return NoteResult(success=True, note=note)

    async def update_note(self, note_id: str, fields: NoteUpdate | dict) -> NoteResult:
        if isinstance(fields, dict):
            fields = NoteUpdate(**fields)
        try:
            owner_id = self._owner_id()
            changes: dict = {}
            if fields.title is not None:
                changes["title"] = self._validate_title(fields.title)
            if fields.content is not None:
                changes["content"] = self._validate_content(fields.content)
            filters = {"id": note_id, "user_id": owner_id}
            existing = _row_to_note(await self.store.select_one(filters))
            changes["updated_at"] = _next_timestamp(existing.updated_at).isoformat(timespec="microseconds")
            row = await self.store.update(filters, changes)
        except LucidNoteError as e:
            logger.error(f"Error updating note {note_id[:8]}: {e.message}")
            return NoteResult(success=False, error=e.to_error())

        await self._revalidate(note_id)
        return NoteResult(success=True, note=_row_to_note(row))

    async def delete_note(self, note_id: str) -> ActionResult:
        try:
            owner_id = self._owner_id()
            deleted = await self.store.delete({"id": note_id, "user_id": owner_id})
            if deleted == 0:
                raise NotFoundError("Note not found")
        except LucidNoteError as e:
            if not isinstance(e, NotFoundError):
                logger.error(f"Error deleting note {note_id[:8]}: {e.message}")
            return ActionResult(success=False, error=e.to_error())

        await self._revalidate(note_id)
        logger.info(f"Deleted note {note_id[:8]}")
        return ActionResult(success=True)

    async def save_summary(self, note_id: str, summary: str) -> NoteResult:
        try:
            owner_id = self._owner_id()
            filters = {"id": note_id, "user_id": owner_id}
            existing = _row_to_note(await self.store.select_one(filters))
            row = await self.store.update(filters, {
                "summary": summary,
                "updated_at": _next_timestamp(existing.updated_at).isoformat(timespec="microseconds"),
            })
        except LucidNoteError as e:
            logger.error(f"Error saving summary for note {note_id[:8]}: {e.message}")
            return NoteResult(success=False, error=e.to_error())

        await self._revalidate(note_id)
        return NoteResult(success=True, note=_row_to_note(row))
