from .endpoints import DERIVED_ENDPOINTS, RECORD_ENDPOINTS, Endpoint
from .errors import FetcheratorError, RemoteCallError, SerializationError
from .fetcher import CacheAwareFetcher
from .fetcherator import Fetcherator
from .keys import build_key, endpoint_name, endpoint_of
from .maintainer import CacheMaintainer
from .payloads import Envelope, RecordSequence, Unrecognized, decode_payload
from .request_executor import RequestExecutor
from .resources import (
    EmployeesResource,
    PaginatedTransactionsResource,
    TransactionsByEmployeeResource,
    set_transaction_approval,
)
from .response_cache import ResponseCache
