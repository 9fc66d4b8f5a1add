"""Query keys for cached note queries."""

QueryKey = tuple


def matches(key: QueryKey, prefix: QueryKey) -> bool:
    """True when ``prefix`` is a leading segment of ``key``."""
    return key[:len(prefix)] == prefix


class NoteKeys:
    all: QueryKey = ("notes",)

    @staticmethod
    def lists() -> QueryKey:
        return (*NoteKeys.all, "list")

    @staticmethod
    def details() -> QueryKey:
        return (*NoteKeys.all, "detail")

    @staticmethod
    def detail(note_id: str) -> QueryKey:
        return (*NoteKeys.details(), note_id)
