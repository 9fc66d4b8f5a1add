"""User-visible notifications raised by the sync layer."""

import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

from lucidnote.logging import get_logger
from lucidnote.models import NotificationLevel

logger = get_logger("client.notifier")


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str
    created_at: float = field(default_factory=time.time)


class Notifier:
    """Keeps a bounded history of notifications and fans them out to listeners."""

    def __init__(self, max_history: int = 50):
        self._history: deque[Notification] = deque(maxlen=max_history)
        self._listeners: list[Callable[[Notification], None]] = []

    def subscribe(self, listener: Callable[[Notification], None]) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def _emit(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level=level, message=message)
        self._history.append(notification)
        if level is NotificationLevel.ERROR:
            logger.warning(message)
        else:
            logger.info(message)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                logger.exception(f"Notification listener failed for {level.value} message")
        return notification

    def success(self, message: str) -> Notification:
        return self._emit(NotificationLevel.SUCCESS, message)

    def info(self, message: str) -> Notification:
        return self._emit(NotificationLevel.INFO, message)

    def error(self, message: str) -> Notification:
        return self._emit(NotificationLevel.ERROR, message)

    @property
    def history(self) -> list[Notification]:
        return list(self._history)

    def clear(self) -> None:
        self._history.clear()
