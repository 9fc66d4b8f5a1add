"""
Enum definitions for the LucidNote API.
"""
from enum import Enum


class ErrorKind(str, Enum):
    """Tag carried by every failed action or AI result."""
    AUTH = "auth"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORE = "store"
    PARSE = "parse"


class CacheStatus(str, Enum):
    """Lifecycle of a client cache entry: fresh -> stale -> refetching -> fresh."""
    FRESH = "fresh"
    STALE = "stale"
    REFETCHING = "refetching"


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"
