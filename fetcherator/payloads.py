"""Payload shapes found in cached responses.

Cached bodies are opaque JSON. Before patching, the maintainer decodes each
one into exactly one of three shapes:

- ``Envelope``: a paginated wrapper, a mapping whose ``data`` is a list of
  records next to pagination metadata (``nextPage`` and so on).
- ``RecordSequence``: a bare list of records.
- ``Unrecognized``: anything else. Patching it is a no-op.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Union


@dataclass(frozen=True)
class Envelope:
    body: dict[str, Any]

    @property
    def records(self) -> list:
        return self.body["data"]

    def map_records(self, fn: Callable[[Any], Any]) -> "Envelope":
        return Envelope({**self.body, "data": [fn(record) for record in self.records]})

    def encode(self) -> dict[str, Any]:
        return self.body


@dataclass(frozen=True)
class RecordSequence:
    records: list = field(default_factory=list)

    def map_records(self, fn: Callable[[Any], Any]) -> "RecordSequence":
        return RecordSequence([fn(record) for record in self.records])

    def encode(self) -> list:
        return self.records


@dataclass(frozen=True)
class Unrecognized:
    value: Any = None

    def map_records(self, fn: Callable[[Any], Any]) -> "Unrecognized":
        return self

    def encode(self) -> Any:
        return self.value


Payload = Union[Envelope, RecordSequence, Unrecognized]


def decode_payload(value: Any) -> Payload:
    if isinstance(value, dict) and isinstance(value.get("data"), list):
        return Envelope(value)
    if isinstance(value, list):
        return RecordSequence(value)
    return Unrecognized(value)
