import asyncio
import json
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping

from .date_time_encoder import DateTimeEncoder
from .errors import SerializationError
from .keys import build_key, endpoint_name
from .loggable import Loggable
from .request_executor import RequestExecutor
from .response_cache import ResponseCache

RemoteCall = Callable[[str, Mapping | None], Awaitable[Any]]


def serialize_payload(payload: Any) -> str:
    try:
        return json.dumps(payload, ensure_ascii=False, cls=DateTimeEncoder)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Payload is not serializable: {e}") from e


def deserialize_payload(serialized: str) -> Any:
    try:
        return json.loads(serialized)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cached payload is not valid JSON: {e}") from e


class CacheAwareFetcher(Loggable):
    """Read-through cache in front of a remote call boundary.

    Args:
        remote_call: ``async (endpoint, params) -> data`` supplied by the host.
        cache: The session's ResponseCache, shared by reference.
        executor: The session's RequestExecutor (owns the loading flag).
        dedupe_in_flight: Share one pending remote call between concurrent
            misses for the same key. Off by default: concurrent misses each
            call the remote boundary and the last write wins.
        logging: True=log hits, misses and failures.
    """

    def __init__(self,
                 remote_call: RemoteCall,
                 cache: ResponseCache,
                 executor: RequestExecutor = None,
                 dedupe_in_flight: bool = False,
                 logging: bool = True):
        self._remote_call = remote_call
        self._cache = cache
        self._executor = executor or RequestExecutor()
        self._dedupe_in_flight = dedupe_in_flight
        self._pending: dict[str, asyncio.Future] = {}
        self._init_logging(logging)
        self.cache_status: dict[str, str] = {}
        self.last_cache_status: str | None = None
        self.hits = 0
        self.misses = 0

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    def _record_status(self, key: str, status: str):
        self.cache_status[key] = status
        self.last_cache_status = status
        if status == "hit":
            self.hits += 1
        else:
            self.misses += 1
        self._log(f"Cache {status}: {key}")

    async def _run_remote(self, name: str, params: Mapping | None):
        try:
            return await self._executor.execute(lambda: self._remote_call(name, params))
        except Exception as e:
            self._log_error(f"Remote call '{name}' failed: {e}")
            raise

    async def _fetch_and_store(self, key: str, name: str, params: Mapping | None):
        result = await self._run_remote(name, params)
        # no await between serializing and writing
        serialized = serialize_payload(result)
        self._cache.set(key, serialized)
        return result, serialized

    def _forget_pending(self, key: str, future: asyncio.Future):
        if self._pending.get(key) is future:
            del self._pending[key]

    async def _fetch_shared(self, key: str, name: str, params: Mapping | None):
        future = self._pending.get(key)
        if future is None:
            future = asyncio.ensure_future(self._fetch_and_store(key, name, params))
            self._pending[key] = future
            future.add_done_callback(lambda f: self._forget_pending(key, f))
        _, serialized = await asyncio.shield(future)
        return deserialize_payload(serialized)

    async def fetch_with_cache(self, endpoint: str | Enum, params: Mapping = None) -> Any | None:
        """Return the cached payload for (endpoint, params), fetching and storing it on a miss."""
        key = build_key(endpoint, params)
        cached = self._cache.get(key)
        if cached is not None:
            self._record_status(key, "hit")
            return deserialize_payload(cached)

        self._record_status(key, "miss")
        name = endpoint_name(endpoint)
        if self._dedupe_in_flight:
            return await self._fetch_shared(key, name, params)
        result, _ = await self._fetch_and_store(key, name, params)
        return result

    async def fetch_without_cache(self, endpoint: str | Enum, params: Mapping = None) -> Any | None:
        """Call the remote boundary directly; the cache is neither read nor written."""
        return await self._run_remote(endpoint_name(endpoint), params)
