from enum import Enum
from typing import Any, Callable, Iterable, Mapping

from .fetcher import CacheAwareFetcher, RemoteCall
from .keys import endpoint_of
from .loggable import Loggable
from .maintainer import CacheMaintainer
from .request_executor import RequestExecutor
from .response_cache import ResponseCache


class Fetcherator(Loggable):
    """Caller-facing request layer: cached reads, invalidation and record patching.

    The cache and executor belong to the hosting session. Pass the same
    instances to every Fetcherator that should share cached data and the
    loading flag; when omitted, fresh ones are created for this instance only.
    """

    def __init__(self,
                 remote_call: RemoteCall,
                 cache: ResponseCache = None,
                 executor: RequestExecutor = None,
                 *,
                 logging: bool = True,
                 dedupe_in_flight: bool = False,
                 record_endpoints: Iterable[str | Enum] = None,
                 derived_endpoints: Iterable[str | Enum] = None,
                 id_field: str = "id",
                 status_field: str = "approved"):
        """Initialize the request layer.

        Args:
            remote_call: ``async (endpoint, params) -> data`` supplied by the host
            cache: Shared ResponseCache (default: a new unbounded one)
            executor: Shared RequestExecutor owning the loading flag
            logging: True=log cache activity, False=silent (default: True)
            dedupe_in_flight: Share one remote call between concurrent identical misses
            record_endpoints: Endpoint groups patched by update_record_in_cache
            derived_endpoints: Endpoint groups evicted by update_record_in_cache
            id_field: Record identifier field (default: "id")
            status_field: Record status field (default: "approved")
        """
        self.cache = cache if cache is not None else ResponseCache()
        self.executor = executor if executor is not None else RequestExecutor()
        self._fetcher = CacheAwareFetcher(remote_call, self.cache, self.executor,
                                          dedupe_in_flight=dedupe_in_flight, logging=logging)
        self._maintainer = CacheMaintainer(self.cache,
                                           record_endpoints=record_endpoints,
                                           derived_endpoints=derived_endpoints,
                                           id_field=id_field,
                                           status_field=status_field,
                                           logging=logging)

    @property
    def loading(self) -> bool:
        return self.executor.loading

    @property
    def cache_status(self) -> dict[str, str]:
        return self._fetcher.cache_status

    @property
    def last_cache_status(self) -> str | None:
        return self._fetcher.last_cache_status

    def subscribe_loading(self, callback: Callable[[bool], None]):
        self.executor.subscribe(callback)

    def unsubscribe_loading(self, callback: Callable[[bool], None]):
        self.executor.unsubscribe(callback)

    async def fetch_with_cache(self, endpoint: str | Enum, params: Mapping = None) -> Any | None:
        return await self._fetcher.fetch_with_cache(endpoint, params)

    async def fetch_without_cache(self, endpoint: str | Enum, params: Mapping = None) -> Any | None:
        return await self._fetcher.fetch_without_cache(endpoint, params)

    def clear_cache(self) -> int:
        return self._maintainer.clear_all()

    def clear_cache_by_endpoint(self, endpoints: str | Enum | Iterable[str | Enum]) -> int:
        return self._maintainer.clear_by_endpoint_prefix(endpoints)

    def update_record_in_cache(self, record_id: Any, new_status: Any) -> int:
        return self._maintainer.patch_record(record_id, new_status)

    def stats(self) -> dict:
        """Return cache statistics."""
        stats = {
            "total_entries": len(self.cache),
            "endpoints": {},
            "hits": self._fetcher.hits,
            "misses": self._fetcher.misses,
            "evictions": self.cache.evictions,
        }
        for key in self.cache.keys():
            name = endpoint_of(key)
            stats["endpoints"][name] = stats["endpoints"].get(name, 0) + 1
        return stats
