from collections import OrderedDict


class ResponseCache:
    """Session-scoped mapping from cache key to serialized response body.

    Values are JSON strings, never live objects, so every read hands out a
    fresh copy. Not thread-safe; meant for a single event loop.

    Args:
        max_entries: Optional capacity. When set, the cache behaves as an LRU:
            reads refresh recency and writes beyond capacity evict the
            least-recently-used key. Unbounded by default.
    """

    def __init__(self, max_entries: int = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be a positive integer")
        self._entries: OrderedDict[str, str] = OrderedDict()
        self._max_entries = max_entries
        self.evictions = 0

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return key in self._entries

    def __repr__(self):
        return f"ResponseCache(entries={len(self._entries)}, max_entries={self._max_entries})"

    @property
    def max_entries(self) -> int | None:
        return self._max_entries

    def get(self, key: str) -> str | None:
        value = self._entries.get(key)
        if value is not None and self._max_entries is not None:
            self._entries.move_to_end(key)
        return value

    def set(self, key: str, serialized: str):
        if not isinstance(serialized, str):
            raise TypeError(f"ResponseCache stores serialized strings, got {type(serialized).__name__}")
        self._entries[key] = serialized
        if self._max_entries is not None:
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
                self.evictions += 1

    def delete(self, key: str):
        self._entries.pop(key, None)

    def keys(self) -> list[str]:
        """Snapshot of the current keys, safe to iterate while mutating the cache."""
        return list(self._entries.keys())

    def items(self) -> list[tuple[str, str]]:
        return list(self._entries.items())

    def clear(self):
        self._entries = OrderedDict()
