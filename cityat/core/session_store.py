import logging
import time
import uuid
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class SessionStateStore:
    """
    Server-side home of each session's client state.

    The session cookie only carries the session id. Snapshots expire
    `max_age_seconds` after their last save.
    """

    def __init__(self, max_age_seconds: float):
        self.max_age_seconds = max_age_seconds
        self._snapshots: Dict[str, Tuple[Dict[str, Any], float]] = {}

    def __len__(self) -> int:
        return len(self._snapshots)

    @staticmethod
    def new_session_id() -> str:
        return uuid.uuid4().hex

    def load(self, session_id: str) -> Optional[Dict[str, Any]]:
        record = self._snapshots.get(session_id)
        if record is None:
            return None
        snapshot, expires_at = record
        if expires_at <= time.monotonic():
            del self._snapshots[session_id]
            return None
        return snapshot

    def save(self, session_id: str, snapshot: Dict[str, Any]) -> None:
        now = time.monotonic()
        self.prune(now)
        self._snapshots[session_id] = (snapshot, now + self.max_age_seconds)

    def discard(self, session_id: str) -> None:
        self._snapshots.pop(session_id, None)

    def prune(self, now: Optional[float] = None) -> int:
        now = time.monotonic() if now is None else now
        expired = [sid for sid, (_, expires_at) in self._snapshots.items() if expires_at <= now]
        for sid in expired:
            del self._snapshots[sid]
        if expired:
            logger.debug(f"Dropped {len(expired)} expired session snapshots")
        return len(expired)
