"""
Logging adapter that implements LoggingPort protocol.

Wraps structlog so the application layer only depends on the port.
"""
from typing import Any
from domain.interfaces import LoggingPort, BoundLogger
from infrastructure.logging.structlog_logs import logger as structlog_logger


class StructlogBoundLogger:
    """structlog bound logger exposed through the BoundLogger protocol."""

    def __init__(self, bound_logger):
        self._logger = bound_logger

    def info(self, event: str, **kwargs: Any) -> None:
        self._logger.info(event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._logger.warning(event, **kwargs)

    def error(self, event: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._logger.error(event, exc_info=exc_info, **kwargs)


class LoggingAdapter(LoggingPort):
    """
    JSON structured logging for the ledger services.

    Every logger handed out carries the context given to ``bind`` (request id,
    payment id, contract id, step) on all of its events.
    """

    def __init__(self, **base_context: Any):
        self._base_context = base_context

    def bind(self, **kwargs: Any) -> BoundLogger:
        bound_logger = structlog_logger.bind(**self._base_context, **kwargs)
        return StructlogBoundLogger(bound_logger)
