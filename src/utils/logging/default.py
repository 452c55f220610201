import logging
from typing import Optional

from src.utils.logging.app_logger import get_logger


class Logger:
    """
    Context-carrying logger.

    Wraps a named application logger and merges a fixed context (request id,
    delivery id, repository, ...) into the ``extra`` of every record, so that
    all lines emitted while handling one request can be correlated.

    Args:
        name (str): The name of the underlying logger
        request_context (dict, optional): Context merged into every record
    """

    def __init__(self, name: str, request_context: Optional[dict] = None):
        self.name = name
        self.base_logger: logging.Logger = get_logger(name)
        self.request_context = request_context or {}

    def bind(self, **context) -> "Logger":
        """Return a new logger whose context is extended with ``context``."""
        merged = dict(self.request_context)
        merged.update(context)
        return Logger(self.name, merged)

    def _merge_extra(self, extra: Optional[dict]) -> Optional[dict]:
        if not extra:
            return self.request_context or None
        if not self.request_context:
            return extra

        merged = extra.copy()
        merged.update(self.request_context)
        return merged

    def _log(self, level: int, message, extra: Optional[dict] = None):
        self.base_logger.log(level, message, extra=self._merge_extra(extra))

    def debug(self, message, extra=None):
        self._log(logging.DEBUG, message, extra)

    def info(self, message, extra=None):
        self._log(logging.INFO, message, extra)

    def warning(self, message, extra=None):
        self._log(logging.WARNING, message, extra)

    def error(self, message, extra=None):
        self._log(logging.ERROR, message, extra)

    def critical(self, message, extra=None):
        self._log(logging.CRITICAL, message, extra)
