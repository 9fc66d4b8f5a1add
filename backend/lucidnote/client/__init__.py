"""
Client-side note synchronization.

Usage:
    cache = QueryCache()
    async with HttpNoteActions(base_url, access_token=token) as actions:
        sync = NoteSync(cache, actions, Notifier())
        notes = await sync.fetch_notes()
"""

from lucidnote.client.ai import AIHelperClient
from lucidnote.client.cache import CacheEntry, CacheReader, QueryCache
from lucidnote.client.http import HttpNoteActions
from lucidnote.client.notes import NoteActionsPort, NoteSync, TentativeRemoval
from lucidnote.client.notifier import Notification, Notifier
from lucidnote.client.query_keys import NoteKeys

__all__ = [
    "AIHelperClient",
    "CacheEntry", "CacheReader", "QueryCache",
    "HttpNoteActions",
    "NoteActionsPort", "NoteSync", "TentativeRemoval",
    "Notification", "Notifier",
    "NoteKeys",
]
