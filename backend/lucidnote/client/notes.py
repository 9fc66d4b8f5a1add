"""
Note synchronization layer.

Keeps every cached view of a note consistent after a mutation without
refetching: creates are prepended to the list, updates and summaries are
patched in place, deletes are removed optimistically and undone by a resync
if the backend refuses them.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from lucidnote.client.cache import QueryCache, CacheReader
from lucidnote.client.notifier import Notifier
from lucidnote.client.query_keys import NoteKeys, QueryKey
from lucidnote.errors import LucidNoteError, error_from
from lucidnote.logging import get_logger
from lucidnote.models import (
    ActionError,
    ActionResult,
    ErrorKind,
    Note,
    NoteListResult,
    NoteResult,
    NoteUpdate,
    SummaryResult,
)
from lucidnote.util import strip_tags

logger = get_logger("client.notes")


@runtime_checkable
class NoteActionsPort(Protocol):
    async def list_notes(self) -> NoteListResult:
        ...

    async def get_note(self, note_id: str) -> NoteResult:
        ...

    async def create_note(self, title: str, content: str) -> NoteResult:
        ...

    async def update_note(self, note_id: str, fields: NoteUpdate | dict) -> NoteResult:
        ...

    async def delete_note(self, note_id: str) -> ActionResult:
        ...

    async def save_summary(self, note_id: str, summary: str) -> NoteResult:
        ...


class SummarizerPort(Protocol):
    async def summarize(self, text: str, max_length: int = 100) -> SummaryResult:
        ...


def _by_recency(notes: list[Note]) -> list[Note]:
    return sorted(notes, key=lambda n: n.updated_at, reverse=True)


def _upsert(notes: list[Note] | None, note: Note) -> list[Note]:
    rest = [n for n in notes or [] if n.id != note.id]
    return _by_recency([note, *rest])


def _reinsert(notes: list[Note] | None, index: int, note: Note) -> list[Note]:
    notes = list(notes or [])
    if any(n.id == note.id for n in notes):
        return notes
    notes.insert(min(index, len(notes)), note)
    return notes


@dataclass(frozen=True)
class TentativeRemoval:
    """A delete applied to the cache before the backend confirmed it."""
    note_id: str
    removed: tuple[tuple[QueryKey, int, Note], ...]

    def revert(self, cache: QueryCache) -> None:
        with cache.batch():
            for key, index, note in self.removed:
                cache.update_data(key, lambda notes, i=index, n=note: _reinsert(notes, i, n))


class NoteSync:
    """Cached note queries and the mutations that keep them consistent."""

    def __init__(
        self,
        cache: QueryCache,
        actions: NoteActionsPort,
        notifier: Notifier | None = None,
        summarizer: SummarizerPort | None = None,
    ):
        self.cache = cache
        self.actions = actions
        self.notifier = notifier or Notifier()
        self.summarizer = summarizer

    @property
    def reader(self) -> CacheReader:
        return self.cache.reader()

    # ── Queries ──

    async def fetch_notes(self, force: bool = False) -> list[Note]:
        async def _fetch() -> list[Note]:
            result = await self.actions.list_notes()
            if not result.success:
                raise error_from(result.error)
            return result.notes

        return await self.cache.fetch(NoteKeys.lists(), _fetch, force=force)

    async def fetch_note(self, note_id: str, force: bool = False) -> Note:
        async def _fetch() -> Note:
            result = await self.actions.get_note(note_id)
            if not result.success:
                raise error_from(result.error)
            return result.note

        return await self.cache.fetch(NoteKeys.detail(note_id), _fetch, force=force)

    async def resync(self) -> list[Note]:
        """Drop the cached list and reload it from the backend."""
        self.cache.invalidate(NoteKeys.lists())
        return await self.fetch_notes()

    # ── Mutations ──

    def _list_keys(self) -> list[QueryKey]:
        return [e.key for e in self.cache.entries(NoteKeys.lists())]

    async def create_note(self, title: str, content: str) -> NoteResult:
        result = await self.actions.create_note(title, content)
        if not result.success:
            self.notifier.error(f"Failed to create note: {result.error.message}")
            return result

        note = result.note
        with self.cache.batch():
            # Newest first by assumption; the list is not re-sorted here.
            for key in self._list_keys():
                self.cache.update_data(key, lambda notes: [note, *(n for n in notes or [] if n.id != note.id)])
            self.cache.set_data(NoteKeys.detail(note.id), note)
        self.notifier.success("Note created successfully")
        return result

    async def update_note(self, note_id: str, fields: NoteUpdate | dict) -> NoteResult:
        result = await self.actions.update_note(note_id, fields)
        if not result.success:
            self.notifier.error(f"Failed to update note: {result.error.message}")
            return result

        note = result.note
        with self.cache.batch():
            for key in self._list_keys():
                self.cache.update_data(key, lambda notes: _upsert(notes, note))
            self.cache.set_data(NoteKeys.detail(note.id), note)
        self.notifier.success("Note updated successfully")
        return result

    def _remove_tentatively(self, note_id: str) -> TentativeRemoval:
        removed: list[tuple[QueryKey, int, Note]] = []
        with self.cache.batch():
            for key in self._list_keys():
                notes = self.cache.get_data(key) or []
                for index, note in enumerate(notes):
                    if note.id == note_id:
                        removed.append((key, index, note))
                        self.cache.update_data(key, lambda ns: [n for n in ns if n.id != note_id])
                        break
        return TentativeRemoval(note_id=note_id, removed=tuple(removed))

    async def _recover_from_failed_delete(self, removal: TentativeRemoval) -> None:
        try:
            await self.resync()
        except LucidNoteError as e:
            logger.warning(f"Resync after failed delete failed ({e.message}); restoring cached note")
            removal.revert(self.cache)

    async def delete_note(self, note_id: str) -> ActionResult:
        removal = self._remove_tentatively(note_id)
        result = await self.actions.delete_note(note_id)

        if result.success or result.error.kind is ErrorKind.NOT_FOUND:
            # Gone either way: the tentative removal stands.
            self.cache.remove(NoteKeys.detail(note_id))
            if result.success:
                self.notifier.success("Note deleted successfully")
            else:
                self.notifier.info("Note was already deleted")
            return result

        await self._recover_from_failed_delete(removal)
        self.notifier.error(f"Failed to delete note: {result.error.message}")
        return result

    async def save_summary(self, note_id: str, summary: str) -> NoteResult:
        result = await self.actions.save_summary(note_id, summary)
        if not result.success:
            self.notifier.error(f"Failed to save summary: {result.error.message}")
            return result

        saved = result.note

        def _patch(note: Note | None) -> Note | None:
            if note is None or note.id != note_id:
                return note
            return note.model_copy(update={"summary": saved.summary, "updated_at": saved.updated_at})

        # List position is kept; only the changed fields are patched in.
        with self.cache.batch():
            self.cache.update_data(NoteKeys.detail(note_id), lambda _note: saved)
            for key in self._list_keys():
                self.cache.update_data(key, lambda notes: [_patch(n) for n in notes or []])
        return result

    async def summarize_note(self, note_id: str, max_length: int = 100) -> SummaryResult:
        """Summarize a note's content with the AI helper and save the summary."""
        if self.summarizer is None:
            error = ActionError(kind=ErrorKind.STORE, message="No summarizer configured")
            return SummaryResult(success=False, error=error)
        try:
            note = await self.fetch_note(note_id)
        except LucidNoteError as e:
            self.notifier.error(f"Failed to summarize note: {e.message}")
            return SummaryResult(success=False, error=e.to_error())

        summary = await self.summarizer.summarize(strip_tags(note.content), max_length)
        if not summary.success:
            self.notifier.error(f"Failed to summarize note: {summary.error.message}")
            return summary

        saved = await self.save_summary(note_id, summary.summary)
        if not saved.success:
            return SummaryResult(success=False, error=saved.error)
        return summary
