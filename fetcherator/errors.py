class FetcheratorError(Exception):
    """Base class for errors raised by fetcherator."""


class SerializationError(FetcheratorError, ValueError):
    """Params or a cached payload could not be encoded or decoded as JSON."""


class RemoteCallError(FetcheratorError):
    """Failure at the remote call boundary.

    Raised by ``remote_call`` implementations, never by fetcherator itself:
    errors from the boundary propagate to the caller unchanged.
    """

    def __init__(self, endpoint: str, message: str = None):
        self.endpoint = endpoint
        super().__init__(message or f"Remote call to '{endpoint}' failed")
