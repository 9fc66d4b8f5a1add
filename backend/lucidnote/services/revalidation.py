"""Socket.IO revalidation broadcasts for server-rendered views."""

import socketio

from lucidnote.logging import get_logger

logger = get_logger("services.revalidation")

DASHBOARD_PATH = "/dashboard"


def note_path(note_id: str) -> str:
    return f"{DASHBOARD_PATH}/notes/{note_id}"


class ViewRevalidator:
    """Tells a user's connected clients which views to refresh."""

    def __init__(self, sio: socketio.AsyncServer | None = None):
        self.sio = sio

    async def mark_stale(self, user_id: str, *paths: str) -> None:
        if not paths or self.sio is None:
            return
        logger.debug(f"Views stale for user {user_id[:8]}: {', '.join(paths)}")
        try:
            await self.sio.emit("revalidate", {"paths": list(paths)}, room=user_id)
        except Exception as e:
            # Views still refresh on their next load.
            logger.warning(f"Revalidate broadcast failed for user {user_id[:8]}: {e}")
