from enum import Enum
from typing import Any, Iterable

from .endpoints import DERIVED_ENDPOINTS, RECORD_ENDPOINTS
from .fetcher import deserialize_payload, serialize_payload
from .keys import endpoint_name, endpoint_of
from .loggable import Loggable
from .payloads import Unrecognized, decode_payload
from .response_cache import ResponseCache


class CacheMaintainer(Loggable):
    """Bulk invalidation and in-place record patching over a ResponseCache.

    Args:
        cache: The session's ResponseCache, shared by reference.
        record_endpoints: Endpoint groups whose payloads carry records and are
            patched by ``patch_record``. Matched by exact endpoint segment.
        derived_endpoints: Secondary views of the same records. They are evicted
            after a patch instead of being rewritten.
        id_field: Record field holding the stable identifier.
        status_field: Record field rewritten by ``patch_record``.
        logging: True=log clears and patches.
    """

    def __init__(self,
                 cache: ResponseCache,
                 record_endpoints: Iterable[str | Enum] = None,
                 derived_endpoints: Iterable[str | Enum] = None,
                 id_field: str = "id",
                 status_field: str = "approved",
                 logging: bool = True):
        self._cache = cache
        self.record_endpoints = frozenset(
            endpoint_name(e) for e in (RECORD_ENDPOINTS if record_endpoints is None else record_endpoints)
        )
        self.derived_endpoints = frozenset(
            endpoint_name(e) for e in (DERIVED_ENDPOINTS if derived_endpoints is None else derived_endpoints)
        )
        self.id_field = id_field
        self.status_field = status_field
        self._init_logging(logging)

    def clear_all(self) -> int:
        """Drop every cached entry. Returns the number removed."""
        removed = len(self._cache)
        self._cache.clear()
        self._log(f"Cleared cache ({removed} entries)")
        return removed

    def clear_by_endpoint_prefix(self, endpoints: str | Enum | Iterable[str | Enum]) -> int:
        """Remove every key whose endpoint segment starts with one of ``endpoints``.

        Only the endpoint segment is compared, never the serialized params. A single
        identifier is accepted as well as a collection of them.
        """
        if isinstance(endpoints, (str, Enum)):
            endpoints = [endpoints]
        prefixes = tuple(endpoint_name(e) for e in endpoints)
        if not prefixes:
            return 0
        removed = 0
        for key in self._cache.keys():
            if endpoint_of(key).startswith(prefixes):
                self._cache.delete(key)
                removed += 1
        if removed:
            self._log(f"Cleared {removed} entries for {', '.join(prefixes)}")
        return removed

    def _patch(self, record: Any, record_id: Any, new_status: Any) -> Any:
        if isinstance(record, dict) and record.get(self.id_field) == record_id:
            return {**record, self.status_field: new_status}
        return record

    def patch_record(self, record_id: Any, new_status: Any) -> int:
        """Rewrite the status of ``record_id`` in every cached record payload.

        Entries are decoded and patched before anything is written back, so a
        corrupt entry raises SerializationError with the cache unmodified.
        Derived groups are evicted afterwards. Returns the number of entries
        rewritten.
        """
        updates: dict[str, str] = {}
        for key, serialized in self._cache.items():
            group = endpoint_of(key)
            if group not in self.record_endpoints or group in self.derived_endpoints:
                continue
            payload = decode_payload(deserialize_payload(serialized))
            if isinstance(payload, Unrecognized):
                self._log(f"Skipping unrecognized payload at {key}")
                continue
            patched = payload.map_records(lambda r: self._patch(r, record_id, new_status))
            updates[key] = serialize_payload(patched.encode())

        for key, serialized in updates.items():
            self._cache.set(key, serialized)
        self._log(f"Patched record {record_id} in {len(updates)} entries")

        self._evict_groups(self.derived_endpoints)
        return len(updates)

    def _evict_groups(self, groups: frozenset) -> int:
        removed = 0
        for key in self._cache.keys():
            if endpoint_of(key) in groups:
                self._cache.delete(key)
                removed += 1
        if removed:
            self._log(f"Evicted {removed} derived entries")
        return removed
