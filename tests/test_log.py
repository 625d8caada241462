"""Tests for job logging — TaggedLogger, LoggingSink and sink resolution."""

import logging

import pytest

from jobcron.log import (
    DEFAULT_LOGGER_NAME,
    TRACE,
    CronLogger,
    LoggingSink,
    TaggedLogger,
    resolve_sink,
)


# -- TaggedLogger --------------------------------------------------------------


def test_tagged_logger_prefixes_every_level(log) -> None:
    tagged = TaggedLogger(log, "nightly")
    tagged.trace("a")
    tagged.debug("b")
    tagged.error("c")

    assert log.logs == {
        "trace": ["[nightly] a"],
        "debug": ["[nightly] b"],
        "error": ["[nightly] c"],
    }


def test_tagged_logger_formats_non_string_messages(log) -> None:
    TaggedLogger(log, "job").debug(42)
    assert log.logs["debug"] == ["[job] 42"]


def test_tagged_logger_satisfies_protocol(log) -> None:
    assert isinstance(TaggedLogger(log, "job"), CronLogger)
    assert isinstance(log, CronLogger)


# -- LoggingSink ---------------------------------------------------------------


def test_trace_level_name() -> None:
    assert logging.getLevelName(TRACE) == "TRACE"
    assert TRACE < logging.DEBUG


def test_logging_sink_levels(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(TRACE, logger="jobcron.test")
    sink = LoggingSink(logging.getLogger("jobcron.test"))

    sink.trace("t")
    sink.debug("d")
    sink.error("e")

    assert [(r.levelname, r.getMessage()) for r in caplog.records] == [
        ("TRACE", "t"),
        ("DEBUG", "d"),
        ("ERROR", "e"),
    ]


def test_logging_sink_does_not_interpolate(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="jobcron.test")
    LoggingSink(logging.getLogger("jobcron.test")).debug("100% done %s")
    assert caplog.records[0].getMessage() == "100% done %s"


# -- resolve_sink --------------------------------------------------------------


def test_resolve_sink_default() -> None:
    sink = resolve_sink(None)
    assert isinstance(sink, LoggingSink)
    assert sink.logger.name == DEFAULT_LOGGER_NAME


def test_resolve_sink_wraps_stdlib_logger() -> None:
    logger = logging.getLogger("myapp.jobs")
    sink = resolve_sink(logger)
    assert isinstance(sink, LoggingSink)
    assert sink.logger is logger


def test_resolve_sink_passes_custom_logger_through(log) -> None:
    assert resolve_sink(log) is log
