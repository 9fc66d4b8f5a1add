"""
Keyed in-memory query cache.

Entries move through ``fresh -> stale -> refetching -> fresh``. Mutations may
write a fresh entry directly. Writes made inside ``batch()`` reach
subscribers as a single notification once the block exits, so a subscriber
never observes a half-applied mutation.
"""

import asyncio
import copy
import time
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from lucidnote.client.query_keys import QueryKey, matches
from lucidnote.logging import get_logger
from lucidnote.models import CacheStatus

logger = get_logger("client.cache")

Listener = Callable[[frozenset], None]


@dataclass
class CacheEntry:
    key: QueryKey
    data: Any = None
    status: CacheStatus = CacheStatus.STALE
    updated_at: float = 0.0
    error: str | None = None


class QueryCache:
    """Explicit keyed store; owned by the sync layer, read through ``reader()``."""

    def __init__(self):
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._listeners: list[tuple[QueryKey, Listener]] = []
        self._inflight: dict[QueryKey, asyncio.Task] = {}
        self._batch_depth = 0
        self._pending: set[QueryKey] = set()

    # ── Reads ──

    def get(self, key: QueryKey) -> CacheEntry | None:
        return self._entries.get(key)

    def get_data(self, key: QueryKey) -> Any:
        entry = self._entries.get(key)
        return entry.data if entry else None

    def status(self, key: QueryKey) -> CacheStatus | None:
        entry = self._entries.get(key)
        return entry.status if entry else None

    def entries(self, prefix: QueryKey) -> list[CacheEntry]:
        return [e for k, e in self._entries.items() if matches(k, prefix)]

    # ── Notifications ──

    def subscribe(self, prefix: QueryKey, listener: Listener) -> Callable[[], None]:
        item = (prefix, listener)
        self._listeners.append(item)

        def unsubscribe() -> None:
            if item in self._listeners:
                self._listeners.remove(item)

        return unsubscribe

    def _notify(self, key: QueryKey) -> None:
        self._pending.add(key)
        if self._batch_depth == 0:
            self._flush()

    def _flush(self) -> None:
        changed, self._pending = frozenset(self._pending), set()
        if not changed:
            return
        for prefix, listener in list(self._listeners):
            keys = frozenset(k for k in changed if matches(k, prefix))
            if not keys:
                continue
            try:
                listener(keys)
            except Exception:
                logger.exception(f"Cache listener failed for {prefix}")

    @contextmanager
    def batch(self) -> Iterator[None]:
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self._flush()

    # ── Writes ──

    def set_data(self, key: QueryKey, data: Any) -> None:
        entry = self._entries.get(key)
        if entry is None:
            entry = CacheEntry(key=key)
            self._entries[key] = entry
        entry.data = data
        entry.status = CacheStatus.FRESH
        entry.updated_at = time.monotonic()
        entry.error = None
        self._notify(key)

    def update_data(self, key: QueryKey, updater: Callable[[Any], Any]) -> bool:
        """Replace an existing entry's data with ``updater(data)``; False if absent."""
        entry = self._entries.get(key)
        if entry is None:
            return False
        entry.data = updater(entry.data)
        entry.updated_at = time.monotonic()
        self._notify(key)
        return True

    def remove(self, key: QueryKey) -> bool:
        if self._entries.pop(key, None) is None:
            return False
        self._notify(key)
        return True

    def invalidate(self, prefix: QueryKey) -> list[QueryKey]:
        keys = []
        for entry in self.entries(prefix):
            if entry.status is CacheStatus.FRESH:
                entry.status = CacheStatus.STALE
                keys.append(entry.key)
                self._notify(entry.key)
        return keys

    # ── Fetching ──

    async def fetch(
        self,
        key: QueryKey,
        fetcher: Callable[[], Awaitable[Any]],
        force: bool = False,
    ) -> Any:
        """
        Return cached data when fresh, otherwise fetch it.

        Concurrent fetches of one key share a single request. On failure the
        entry keeps its last-known-good data, goes back to stale and the
        error propagates.
        """
        entry = self._entries.get(key)
        if entry is not None and entry.status is CacheStatus.FRESH and not force:
            return entry.data

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run_fetch(key, fetcher))
            self._inflight[key] = task
            task.add_done_callback(lambda _t: self._inflight.pop(key, None))
        return await asyncio.shield(task)

    async def _run_fetch(self, key: QueryKey, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            entry = CacheEntry(key=key)
            self._entries[key] = entry
        entry.status = CacheStatus.REFETCHING
        self._notify(key)
        try:
            data = await fetcher()
        except Exception as e:
            current = self._entries.get(key)
            if current is not None:
                current.status = CacheStatus.STALE
                current.error = str(e)
                self._notify(key)
            raise
        if self._entries.get(key) is not entry:
            # Removed or replaced while the fetch was running.
            logger.debug(f"Discarding fetched data for {key}: entry changed during fetch")
            return data
        self.set_data(key, data)
        return data

    def reader(self) -> "CacheReader":
        return CacheReader(self)


class CacheReader:
    """Read-only view of a QueryCache handed to presentation code."""

    def __init__(self, cache: QueryCache):
        self._cache = cache

    def get_data(self, key: QueryKey) -> Any:
        return copy.copy(self._cache.get_data(key))

    def status(self, key: QueryKey) -> CacheStatus | None:
        return self._cache.status(key)

    def subscribe(self, prefix: QueryKey, listener: Listener) -> Callable[[], None]:
        return self._cache.subscribe(prefix, listener)
