from typing import Any

from typing_extensions import Protocol


class BoundLogger(Protocol):
    """Logger carrying fixed context fields on every event."""

    def info(self, event: str, **kwargs: Any) -> None: ...

    def warning(self, event: str, **kwargs: Any) -> None: ...

    def error(self, event: str, exc_info: bool = False, **kwargs: Any) -> None:
        """
        Log an error event.

        Args:
            event: snake_case event name
            exc_info: Attach the exception being handled
            **kwargs: Additional context fields
        """
        ...


class LoggingPort(Protocol):
    """Protocol for structured logging."""

    def bind(self, **kwargs: Any) -> BoundLogger:
        """
        Create a logger whose events all carry ``kwargs``.

        Args:
            **kwargs: Context fields, e.g. request_id, payment_id, step
        """
        ...
