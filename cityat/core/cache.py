import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, Optional, Tuple, Union

logger = logging.getLogger(__name__)

# "Order" covers every order query, ("Order", "42") only the one for order 42.
Tag = Union[str, Tuple[str, str]]


@dataclass
class _Entry:
    value: Any
    tags: Tuple[Tag, ...]
    expires_at: float = field(default=0.0)


def _tag_type(tag: Tag) -> str:
    return tag if isinstance(tag, str) else tag[0]


class TagCache:
    """
    Query result cache invalidated by tags.

    Queries store their result together with the tags they provide.
    Mutations invalidate tags: a bare type tag drops every entry of that
    type, a (type, id) tag drops only entries providing that exact tag.
    """

    def __init__(self, ttl_seconds: float = 60):
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[Hashable, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: Hashable) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= time.monotonic():
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: Hashable, value: Any, tags: Iterable[Tag]) -> None:
        now = time.monotonic()
        self.prune(now)
        self._entries[key] = _Entry(
            value=value,
            tags=tuple(tags),
            expires_at=now + self.ttl_seconds,
        )

    def prune(self, now: Optional[float] = None) -> int:
        """Drop every expired entry, not only the ones read again."""
        now = time.monotonic() if now is None else now
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def invalidate(self, tags: Iterable[Tag]) -> int:
        tags = list(tags)
        type_tags = {t for t in tags if isinstance(t, str)}
        id_tags = {t for t in tags if not isinstance(t, str)}

        stale = [
            key for key, entry in self._entries.items()
            if any(_tag_type(t) in type_tags or t in id_tags for t in entry.tags)
        ]
        for key in stale:
            del self._entries[key]

        if stale:
            logger.debug(f"Invalidated {len(stale)} cached queries for tags {tags}")
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
