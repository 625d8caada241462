"""Job logging — the logger protocol, a tag-prefixing decorator and the stdlib sink."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

DEFAULT_LOGGER_NAME = "jobcron.jobs"


@runtime_checkable
class CronLogger(Protocol):
    """Protocol for the logger object passed as part of a job config."""

    def trace(self, msg: Any) -> None:
        """Log a trace level message."""
        ...

    def debug(self, msg: Any) -> None:
        """Log a debug level message."""
        ...

    def error(self, msg: Any) -> None:
        """Log an error message."""
        ...


class LoggingSink:
    """Adapts a standard library logger to ``CronLogger``.

    ``trace`` messages are emitted at the custom ``TRACE`` level, below DEBUG.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def trace(self, msg: Any) -> None:
        self._logger.log(TRACE, "%s", msg)

    def debug(self, msg: Any) -> None:
        self._logger.debug("%s", msg)

    def error(self, msg: Any) -> None:
        self._logger.error("%s", msg)


class TaggedLogger:
    """Prefixes every message with ``[<tag>]`` before forwarding it.

    Args:
        logger: The wrapped logger.
        tag: Prefix tag, normally the job name.
    """

    def __init__(self, logger: CronLogger, tag: str) -> None:
        self._logger = logger
        self._tag = tag

    @property
    def tag(self) -> str:
        return self._tag

    def trace(self, msg: Any) -> None:
        self._logger.trace(f"[{self._tag}] {msg}")

    def debug(self, msg: Any) -> None:
        self._logger.debug(f"[{self._tag}] {msg}")

    def error(self, msg: Any) -> None:
        self._logger.error(f"[{self._tag}] {msg}")


def resolve_sink(log: CronLogger | logging.Logger | None) -> CronLogger:
    """Return a ``CronLogger`` for the ``log`` value of a job config."""
    if log is None:
        return LoggingSink(logging.getLogger(DEFAULT_LOGGER_NAME))
    if isinstance(log, logging.Logger):
        return LoggingSink(log)
    return log
