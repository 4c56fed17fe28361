from enum import Enum


class Endpoint(str, Enum):
    EMPLOYEES = "employees"
    PAGINATED_TRANSACTIONS = "paginatedTransactions"
    TRANSACTIONS_BY_EMPLOYEE = "transactionsByEmployee"
    SET_TRANSACTION_APPROVAL = "setTransactionApproval"


# Resource groups whose cached payloads carry transaction records.
RECORD_ENDPOINTS = frozenset({
    Endpoint.PAGINATED_TRANSACTIONS.value,
    Endpoint.TRANSACTIONS_BY_EMPLOYEE.value,
})

# Per-filter views that are evicted instead of patched after a record changes.
DERIVED_ENDPOINTS = frozenset({
    Endpoint.TRANSACTIONS_BY_EMPLOYEE.value,
})
