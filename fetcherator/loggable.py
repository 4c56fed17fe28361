from logorator import Logger


class Loggable:
    """Mixin providing the per-instance / global logging switch."""

    _global_logging = True

    @classmethod
    def set_logging(cls, enabled: bool):
        """Set logging globally for every fetcherator component. True=enabled, False=disabled."""
        Loggable._global_logging = enabled

    def _init_logging(self, logging: bool):
        self._logging = Loggable._global_logging and logging

    def _should_log(self) -> bool:
        return getattr(self, "_logging", False)

    def _log(self, message: str):
        if self._should_log():
            Logger.note(message, mode="short")

    def _log_error(self, message: str):
        if self._should_log():
            Logger.note(f"ERROR: {message}", mode="short")
