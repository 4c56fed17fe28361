import asyncio
import copy

import pytest

from fetcherator import Fetcherator, RemoteCallError


TRANSACTIONS = [
    {"id": "t1", "amount": 100, "employee": {"id": "e1"}, "approved": False},
    {"id": "t2", "amount": 250, "employee": {"id": "e2"}, "approved": False},
    {"id": "t3", "amount": 75, "employee": {"id": "e1"}, "approved": True},
    {"id": "t4", "amount": 10, "employee": {"id": "e2"}, "approved": False},
]

EMPLOYEES = [
    {"id": "e1", "firstName": "James", "lastName": "Smith"},
    {"id": "e2", "firstName": "Mary", "lastName": "Jones"},
]

PAGE_SIZE = 2


class FakeApi:
    """In-memory stand-in for the remote call boundary, counting every call."""

    def __init__(self, delay: float = 0.0):
        self.transactions = copy.deepcopy(TRANSACTIONS)
        self.employees = copy.deepcopy(EMPLOYEES)
        self.calls = []
        self.delay = delay
        self.fail_with = None

    def count(self, endpoint: str = None) -> int:
        return len([c for c in self.calls if endpoint is None or c[0] == endpoint])

    async def __call__(self, endpoint, params=None):
        self.calls.append((endpoint, params))
        await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        if endpoint == "employees":
            return copy.deepcopy(self.employees)
        if endpoint == "paginatedTransactions":
            page = params["page"]
            start = page * PAGE_SIZE
            end = start + PAGE_SIZE
            return {
                "data": copy.deepcopy(self.transactions[start:end]),
                "nextPage": page + 1 if end < len(self.transactions) else None,
            }
        if endpoint == "transactionsByEmployee":
            return [copy.deepcopy(t) for t in self.transactions if t["employee"]["id"] == params["employeeId"]]
        if endpoint == "setTransactionApproval":
            for t in self.transactions:
                if t["id"] == params["transactionId"]:
                    t["approved"] = params["value"]
                    return None
            raise RemoteCallError(endpoint, f"Invalid transaction id {params['transactionId']}")
        if endpoint == "nothing":
            return None
        raise RemoteCallError(endpoint, f"Unknown endpoint {endpoint}")


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def slow_api():
    return FakeApi(delay=0.02)


@pytest.fixture
def fetcherator(api):
    return Fetcherator(api, logging=False)
