"""Per-resource consumers of the request layer.

Each resource keeps the last data it loaded and goes through a shared
Fetcherator for every remote read.
"""

from typing import Any

from .endpoints import Endpoint
from .fetcherator import Fetcherator


class EmployeesResource:

    def __init__(self, fetcherator: Fetcherator):
        self.fetcherator = fetcherator
        self.data: list | None = None

    @property
    def loading(self) -> bool:
        return self.fetcherator.loading

    async def fetch_all(self) -> list | None:
        self.data = await self.fetcherator.fetch_with_cache(Endpoint.EMPLOYEES)
        return self.data

    def invalidate(self):
        self.data = None


class PaginatedTransactionsResource:
    """Accumulates transaction pages into a single envelope.

    The first page is read through the cache; later pages bypass it so they
    never collide with the cached first-page key.
    """

    def __init__(self, fetcherator: Fetcherator):
        self.fetcherator = fetcherator
        self.data: dict | None = None

    @property
    def loading(self) -> bool:
        return self.fetcherator.loading

    @property
    def has_more(self) -> bool:
        return self.data is None or self.data.get("nextPage") is not None

    async def fetch_all(self) -> dict | None:
        if not self.has_more:
            return self.data

        if self.data is None:
            response = await self.fetcherator.fetch_with_cache(Endpoint.PAGINATED_TRANSACTIONS, {"page": 0})
        else:
            response = await self.fetcherator.fetch_without_cache(
                Endpoint.PAGINATED_TRANSACTIONS, {"page": self.data["nextPage"]}
            )
        if response is None:
            return self.data

        if self.data is None:
            self.data = response
        else:
            self.data = {**response, "data": self.data["data"] + response["data"]}
        return self.data

    def invalidate(self):
        self.data = None


class TransactionsByEmployeeResource:

    def __init__(self, fetcherator: Fetcherator):
        self.fetcherator = fetcherator
        self.data: list | None = None

    @property
    def loading(self) -> bool:
        return self.fetcherator.loading

    async def fetch_by_id(self, employee_id: str) -> list | None:
        self.data = await self.fetcherator.fetch_with_cache(
            Endpoint.TRANSACTIONS_BY_EMPLOYEE, {"employeeId": employee_id}
        )
        return self.data

    def invalidate(self):
        self.data = None


async def set_transaction_approval(fetcherator: Fetcherator, transaction_id: str, value: bool) -> Any:
    """Send an approval change upstream, then patch every cached copy of the transaction."""
    result = await fetcherator.fetch_without_cache(
        Endpoint.SET_TRANSACTION_APPROVAL, {"transactionId": transaction_id, "value": value}
    )
    fetcherator.update_record_in_cache(transaction_id, value)
    return result
