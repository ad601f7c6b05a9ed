from typing import Any


class NoOpLogger:
    """Stands in for a bound logger when no LoggingPort is wired (tests, scripts)."""

    def info(self, event: str, **kwargs: Any) -> None:
        pass

    def warning(self, event: str, **kwargs: Any) -> None:
        pass

    def error(self, event: str, exc_info: bool = False, **kwargs: Any) -> None:
        pass
