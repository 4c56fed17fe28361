"""
Example demonstrating cached reads, record patching and invalidation
"""
import asyncio
import time

from fetcherator import Endpoint, Fetcherator, RequestExecutor, ResponseCache, set_transaction_approval

TRANSACTIONS = [
    {"id": "t1", "amount": 100, "employee": {"id": "e1"}, "approved": False},
    {"id": "t2", "amount": 250, "employee": {"id": "e2"}, "approved": False},
]


async def fake_api(endpoint: str, params=None):
    """Simulate a slow remote API"""
    print(f"Calling {endpoint} with {params}...")
    await asyncio.sleep(1)
    if endpoint == "paginatedTransactions":
        return {"data": [dict(t) for t in TRANSACTIONS], "nextPage": None}
    if endpoint == "transactionsByEmployee":
        return [dict(t) for t in TRANSACTIONS if t["employee"]["id"] == params["employeeId"]]
    if endpoint == "setTransactionApproval":
        for t in TRANSACTIONS:
            if t["id"] == params["transactionId"]:
                t["approved"] = params["value"]
        return None
    return []


async def main():
    # One cache and one executor per session, shared explicitly
    cache = ResponseCache()
    executor = RequestExecutor()
    client = Fetcherator(fake_api, cache, executor)

    print("=== First call (will take 1 second) ===")
    start = time.time()
    page = await client.fetch_with_cache(Endpoint.PAGINATED_TRANSACTIONS, {"page": 0})
    print(f"Result: {page}")
    print(f"Time: {time.time() - start:.2f}s\n")

    print("=== Second call (instant from cache) ===")
    start = time.time()
    page = await client.fetch_with_cache(Endpoint.PAGINATED_TRANSACTIONS, {"page": 0})
    print(f"Time: {time.time() - start:.2f}s\n")

    print("=== Approve t1 (remote call, then cache patch) ===")
    await set_transaction_approval(client, "t1", True)
    page = await client.fetch_with_cache(Endpoint.PAGINATED_TRANSACTIONS, {"page": 0})
    print(f"Cached t1 approved: {page['data'][0]['approved']}\n")

    print(f"Stats: {client.stats()}")


if __name__ == "__main__":
    asyncio.run(main())
