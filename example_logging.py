"""
Example showing how to control logging in Fetcherator
"""
import asyncio

from fetcherator import Fetcherator


async def fake_api(endpoint, params=None):
    return [{"id": "e1"}]


async def main():
    # Method 1: Disable logging globally for all instances
    print("=== Method 1: Global logging control ===")
    Fetcherator.set_logging(False)
    quiet = Fetcherator(fake_api)
    await quiet.fetch_with_cache("employees")
    print("No logging output above!")

    # Method 2: Disable logging per instance
    print("\n=== Method 2: Per-instance logging control ===")
    Fetcherator.set_logging(True)  # Re-enable globally
    selective = Fetcherator(fake_api, logging=False)
    await selective.fetch_with_cache("employees")
    print("This instance has no logging!")

    loud = Fetcherator(fake_api, logging=True)
    await loud.fetch_with_cache("employees")
    print("This instance has logging enabled (see above)")

    # Method 3: Mix both approaches
    print("\n=== Method 3: Global off, but instance can't override ===")
    Fetcherator.set_logging(False)
    still_quiet = Fetcherator(fake_api, logging=True)  # Won't log because global is False
    await still_quiet.fetch_with_cache("employees")
    print("Even with logging=True, global setting takes precedence")


if __name__ == "__main__":
    asyncio.run(main())
