import inspect
from contextlib import contextmanager
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")


class RequestExecutor:
    """Runs remote operations and owns the session-wide loading flag.

    The flag is True while at least one execution is outstanding. Callbacks
    registered with ``subscribe`` are called with the new value whenever the
    flag flips.
    """

    def __init__(self):
        self._in_flight = 0
        self._listeners: list[Callable[[bool], None]] = []

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def subscribe(self, callback: Callable[[bool], None]):
        if callback not in self._listeners:
            self._listeners.append(callback)

    def unsubscribe(self, callback: Callable[[bool], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self, value: bool):
        for callback in list(self._listeners):
            callback(value)

    @contextmanager
    def _loading(self):
        self._in_flight += 1
        if self._in_flight == 1:
            self._notify(True)
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._notify(False)

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T | None:
        """Await ``operation()`` with the loading flag raised.

        Errors propagate unchanged; the flag is lowered either way.
        """
        with self._loading():
            result = operation()
            if inspect.isawaitable(result):
                result = await result
            return result
