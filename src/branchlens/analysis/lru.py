"""Bounded in-memory LRU map."""

from __future__ import annotations

from collections import OrderedDict
from typing import Generic, Hashable, Optional, TypeVar

from ..logging_config import get_logger

logger = get_logger(__name__)

V = TypeVar("V")


class LruCache(Generic[V]):
    """Ordered map with move-to-end on read and single-entry eviction on overflow.

    Not thread-safe; callers mutate it from one event loop only.
    """

    def __init__(self, max_entries: int, name: str = "cache"):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.name = name
        self._entries: OrderedDict[Hashable, V] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def get(self, key: Hashable) -> Optional[V]:
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def set(self, key: Hashable, value: V) -> V:
        self._entries[key] = value
        self._entries.move_to_end(key)

        if len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("%s: evicted least recently used entry %s", self.name, _short(evicted))

        return value

    def clear(self) -> None:
        self._entries.clear()


def _short(key: Hashable) -> str:
    text = repr(key)
    return text if len(text) <= 80 else text[:77] + "..."
