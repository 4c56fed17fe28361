import asyncio
from datetime import datetime

import pytest

from fetcherator import CacheAwareFetcher, RemoteCallError, RequestExecutor, ResponseCache, SerializationError


def make_fetcher(remote_call, **kwargs):
    return CacheAwareFetcher(remote_call, ResponseCache(), RequestExecutor(), logging=False, **kwargs)


class TestFetchWithCache:

    @pytest.mark.asyncio
    async def test_second_call_served_from_cache(self, api):
        fetcher = make_fetcher(api)
        first = await fetcher.fetch_with_cache("employees")
        second = await fetcher.fetch_with_cache("employees")

        assert first == second
        assert api.count("employees") == 1
        assert fetcher.last_cache_status == "hit"
        assert fetcher.hits == 1
        assert fetcher.misses == 1

    @pytest.mark.asyncio
    async def test_stores_serialized_payload(self, api):
        fetcher = make_fetcher(api)
        await fetcher.fetch_with_cache("transactionsByEmployee", {"employeeId": "e1"})
        stored = fetcher.cache.get('transactionsByEmployee@{"employeeId":"e1"}')
        assert isinstance(stored, str)
        assert '"t1"' in stored

    @pytest.mark.asyncio
    async def test_different_params_are_separate_entries(self, api):
        fetcher = make_fetcher(api)
        e1 = await fetcher.fetch_with_cache("transactionsByEmployee", {"employeeId": "e1"})
        e2 = await fetcher.fetch_with_cache("transactionsByEmployee", {"employeeId": "e2"})
        assert [t["id"] for t in e1] == ["t1", "t3"]
        assert [t["id"] for t in e2] == ["t2", "t4"]
        assert api.count() == 2
        assert len(fetcher.cache) == 2

    @pytest.mark.asyncio
    async def test_hits_return_independent_copies(self, api):
        fetcher = make_fetcher(api)
        await fetcher.fetch_with_cache("employees")
        hit = await fetcher.fetch_with_cache("employees")
        hit[0]["firstName"] = "Changed"
        again = await fetcher.fetch_with_cache("employees")
        assert again[0]["firstName"] == "James"

    @pytest.mark.asyncio
    async def test_hit_does_not_touch_executor(self, api):
        fetcher = make_fetcher(api)
        changes = []
        await fetcher.fetch_with_cache("employees")
        fetcher.executor.subscribe(changes.append)
        await fetcher.fetch_with_cache("employees")
        assert changes == []

    @pytest.mark.asyncio
    async def test_none_result_is_cached(self, api):
        fetcher = make_fetcher(api)
        assert await fetcher.fetch_with_cache("nothing") is None
        assert await fetcher.fetch_with_cache("nothing") is None
        assert api.count("nothing") == 1

    @pytest.mark.asyncio
    async def test_failed_fetch_never_writes(self, api):
        fetcher = make_fetcher(api)
        api.fail_with = RemoteCallError("employees")
        with pytest.raises(RemoteCallError):
            await fetcher.fetch_with_cache("employees")
        assert len(fetcher.cache) == 0
        assert fetcher.executor.loading is False

        api.fail_with = None
        assert await fetcher.fetch_with_cache("employees") is not None
        assert api.count("employees") == 2

    @pytest.mark.asyncio
    async def test_remote_error_propagates_unchanged(self, api):
        fetcher = make_fetcher(api)
        error = TimeoutError("slow network")
        api.fail_with = error
        with pytest.raises(TimeoutError) as exc_info:
            await fetcher.fetch_with_cache("employees")
        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_non_serializable_result_leaves_cache_unmodified(self):
        async def remote_call(endpoint, params):
            return {"value": object()}

        fetcher = make_fetcher(remote_call)
        with pytest.raises(SerializationError):
            await fetcher.fetch_with_cache("weird")
        assert len(fetcher.cache) == 0

    @pytest.mark.asyncio
    async def test_datetime_result_is_encoded(self):
        async def remote_call(endpoint, params):
            return {"at": datetime(2025, 2, 18)}

        fetcher = make_fetcher(remote_call)
        await fetcher.fetch_with_cache("dated")
        assert await fetcher.fetch_with_cache("dated") == {"at": "2025-02-18T00:00:00.000000"}

    @pytest.mark.asyncio
    async def test_corrupt_entry_raises(self, api):
        fetcher = make_fetcher(api)
        fetcher.cache.set("employees", "{not json")
        with pytest.raises(SerializationError):
            await fetcher.fetch_with_cache("employees")
        assert fetcher.cache.get("employees") == "{not json"
        assert api.count() == 0

    @pytest.mark.asyncio
    async def test_non_serializable_params_raise_before_remote_call(self, api):
        fetcher = make_fetcher(api)
        with pytest.raises(SerializationError):
            await fetcher.fetch_with_cache("employees", {"bad": {1, 2}})
        assert api.count() == 0


class TestFetchWithoutCache:

    @pytest.mark.asyncio
    async def test_never_populates_cache(self, api):
        fetcher = make_fetcher(api)
        for _ in range(3):
            await fetcher.fetch_without_cache("employees")
        assert len(fetcher.cache) == 0
        assert api.count("employees") == 3

        fetcher.cache.clear()
        await fetcher.fetch_with_cache("employees")
        assert api.count("employees") == 4

    @pytest.mark.asyncio
    async def test_ignores_existing_entry(self, api):
        fetcher = make_fetcher(api)
        fetcher.cache.set("employees", "[]")
        result = await fetcher.fetch_without_cache("employees")
        assert len(result) == 2
        assert fetcher.cache.get("employees") == "[]"

    @pytest.mark.asyncio
    async def test_passes_params_through(self, api):
        fetcher = make_fetcher(api)
        page = await fetcher.fetch_without_cache("paginatedTransactions", {"page": 1})
        assert [t["id"] for t in page["data"]] == ["t3", "t4"]
        assert api.calls == [("paginatedTransactions", {"page": 1})]


class TestConcurrentFetches:

    @pytest.mark.asyncio
    async def test_concurrent_misses_are_not_deduplicated_by_default(self, slow_api):
        fetcher = make_fetcher(slow_api)
        results = await asyncio.gather(*[fetcher.fetch_with_cache("employees") for _ in range(3)])
        assert results[0] == results[1] == results[2]
        assert slow_api.count("employees") == 3
        assert len(fetcher.cache) == 1

    @pytest.mark.asyncio
    async def test_dedupe_in_flight_shares_one_call(self, slow_api):
        fetcher = make_fetcher(slow_api, dedupe_in_flight=True)
        results = await asyncio.gather(*[fetcher.fetch_with_cache("employees") for _ in range(5)])
        assert all(r == results[0] for r in results)
        assert slow_api.count("employees") == 1
        assert fetcher._pending == {}

    @pytest.mark.asyncio
    async def test_dedupe_in_flight_keeps_keys_apart(self, slow_api):
        fetcher = make_fetcher(slow_api, dedupe_in_flight=True)
        params = [{"employeeId": "e1"}, {"employeeId": "e2"}, {"employeeId": "e1"}]
        results = await asyncio.gather(*[fetcher.fetch_with_cache("transactionsByEmployee", p) for p in params])
        assert results[0] == results[2]
        assert results[0] != results[1]
        assert slow_api.count() == 2

    @pytest.mark.asyncio
    async def test_dedupe_in_flight_failure_reaches_every_caller(self, slow_api):
        fetcher = make_fetcher(slow_api, dedupe_in_flight=True)
        slow_api.fail_with = RemoteCallError("employees")
        results = await asyncio.gather(
            *[fetcher.fetch_with_cache("employees") for _ in range(3)], return_exceptions=True
        )
        assert all(isinstance(r, RemoteCallError) for r in results)
        assert slow_api.count() == 1
        assert len(fetcher.cache) == 0
        assert fetcher.executor.loading is False

    @pytest.mark.asyncio
    async def test_loading_flag_shared_between_entry_points(self, slow_api):
        fetcher = make_fetcher(slow_api)
        task = asyncio.ensure_future(fetcher.fetch_with_cache("employees"))
        await asyncio.sleep(0)
        assert fetcher.executor.loading is True
        await fetcher.fetch_without_cache("employees")
        await task
        assert fetcher.executor.loading is False
