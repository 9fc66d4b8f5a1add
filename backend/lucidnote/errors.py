"""
Error taxonomy shared by the store, actions, AI and client layers.

Service boundaries convert these into tagged ``ActionError`` values; only the
store and the parsing helpers raise them directly.
"""

from lucidnote.models.enums import ErrorKind
from lucidnote.models.results.actions import ActionError


class LucidNoteError(Exception):
    """Base class for all expected application failures."""

    kind: ErrorKind = ErrorKind.STORE

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def to_error(self) -> ActionError:
        return ActionError(kind=self.kind, message=self.message)


class AuthError(LucidNoteError):
    """No active session, or credentials were rejected."""
    kind = ErrorKind.AUTH


class ValidationError(LucidNoteError):
    """A required field is empty or malformed."""
    kind = ErrorKind.VALIDATION


class NotFoundError(LucidNoteError):
    kind = ErrorKind.NOT_FOUND


class StoreError(LucidNoteError):
    """Backend, network or upstream API failure."""
    kind = ErrorKind.STORE


class ParseError(LucidNoteError):
    """An AI response was not well-formed."""
    kind = ErrorKind.PARSE


_BY_KIND: dict[ErrorKind, type[LucidNoteError]] = {
    ErrorKind.AUTH: AuthError,
    ErrorKind.VALIDATION: ValidationError,
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.STORE: StoreError,
    ErrorKind.PARSE: ParseError,
}


def error_from(error: ActionError) -> LucidNoteError:
    """Rebuild the exception for a tagged error value."""
    return _BY_KIND[error.kind](error.message)


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.AUTH: 401,
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORE: 500,
    ErrorKind.PARSE: 502,
}
