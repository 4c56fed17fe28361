import json
from enum import Enum
from typing import Mapping

from .date_time_encoder import DateTimeEncoder
from .errors import SerializationError

SEPARATOR = "@"


def endpoint_name(endpoint: str | Enum) -> str:
    """Normalize an endpoint identifier (plain string or Enum member) to its string name."""
    name = endpoint.value if isinstance(endpoint, Enum) else endpoint
    if not isinstance(name, str) or not name:
        raise ValueError(f"Invalid endpoint identifier: {endpoint!r}")
    if SEPARATOR in name:
        raise ValueError(f"Endpoint identifier '{name}' must not contain '{SEPARATOR}'")
    return name


def serialize_params(params: Mapping) -> str:
    """Canonical JSON for request params: sorted keys, compact separators."""
    if isinstance(params, Mapping) and not isinstance(params, dict):
        params = dict(params)
    try:
        return json.dumps(params, sort_keys=True, separators=(",", ":"), cls=DateTimeEncoder)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Params are not serializable: {e}") from e


def build_key(endpoint: str | Enum, params: Mapping = None) -> str:
    """Derive the cache key for an endpoint and optional params.

    Without params the key is the endpoint name verbatim, otherwise the
    canonical JSON of the params is appended after ``@``. An empty mapping
    counts as present.
    """
    name = endpoint_name(endpoint)
    if params is None:
        return name
    return f"{name}{SEPARATOR}{serialize_params(params)}"


def endpoint_of(key: str) -> str:
    """Return the endpoint segment of a cache key."""
    return key.split(SEPARATOR, 1)[0]
