"""
Cache Status Example
====================
Demonstrates per-key cache hit/miss detection via cache_status and last_cache_status.

  1st fetch of a key: cache miss - remote call runs, result stored
  2nd fetch of a key: cache hit  - result read from the cache, no remote call
"""
import asyncio

from fetcherator import Fetcherator


async def source(endpoint: str, params=None):
    print(f"  fetching '{endpoint}' {params or ''} from source...")
    return {"endpoint": endpoint, "params": params}


async def main():
    svc = Fetcherator(source, logging=False)

    print("--- After init ---")
    print(f"  last_cache_status: {svc.last_cache_status}")  # None - no call yet
    print(f"  cache_status:      {svc.cache_status}")

    await svc.fetch_with_cache("employees")
    print(f"\nAfter fetch('employees'): last_cache_status = {svc.last_cache_status}")

    await svc.fetch_with_cache("employees")
    print(f"After fetch('employees'): last_cache_status = {svc.last_cache_status}")

    await svc.fetch_with_cache("transactionsByEmployee", {"employeeId": "e1"})
    print(f"After fetch('transactionsByEmployee'): last_cache_status = {svc.last_cache_status}")

    print("\n--- Full cache_status ---")
    for key, status in svc.cache_status.items():
        print(f"  {key}: {status}")


if __name__ == "__main__":
    asyncio.run(main())
