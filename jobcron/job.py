"""Job — one named recurring task: its schedule, run state and execution guard."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from jobcron.log import CronLogger, TaggedLogger, resolve_sink
from jobcron.schedule import CronSchedule

if TYPE_CHECKING:
    from jobcron.scheduler import Scheduler


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class JobConfig:
    """Job configuration.

    Attributes:
        cron: Schedule in crontab syntax. A leading seconds field is allowed.
        on_tick: Called with the ``Job`` on every iteration; its result is
            awaited when it is awaitable.
        log: Logger for execution messages. Either a ``CronLogger`` or a
            standard library logger (None → the ``jobcron.jobs`` logger).
        on_error: Called synchronously with the exception when ``on_tick`` fails.
        dont_auto_run: If True the job is created stopped and only runs after
            ``start()``.
    """

    cron: str
    on_tick: Callable[[Job], Awaitable[Any]]
    log: CronLogger | logging.Logger | None = None
    on_error: Callable[[Exception], Any] | None = None
    dont_auto_run: bool = False


class Job:
    """A scheduled job owned by a ``Scheduler``.

    Args:
        owner: Scheduler the job is registered with.
        name: Unique job name, also used as the log tag.
        config: Job configuration.
        timezone: Timezone the cron fields are evaluated in.
        clock: Returns the current aware datetime.
    """

    def __init__(
        self,
        owner: Scheduler,
        name: str,
        config: JobConfig,
        *,
        timezone: str = "UTC",
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._owner = owner
        self._name = name
        self._config = config
        self._schedule = CronSchedule.parse(config.cron, timezone)
        self._clock = clock
        self._started = not config.dont_auto_run
        self._executing = False
        self._last_iteration_at = clock()
        self._next_run_at = self._schedule.next_occurrence_after(self._last_iteration_at)
        self._num_iterations = 0
        self._log = TaggedLogger(resolve_sink(config.log), name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def schedule(self) -> CronSchedule:
        return self._schedule

    @property
    def executing(self) -> bool:
        return self._executing

    @property
    def last_iteration_at(self) -> datetime:
        return self._last_iteration_at

    @property
    def next_run_at(self) -> datetime | None:
        """When the job next becomes due, measured from the last accepted run."""
        return self._next_run_at

    # -- Lifecycle -------------------------------------------------------------

    def start(self) -> None:
        """Start or restart the job."""
        self._started = True

    def stop(self) -> None:
        """Stop the job. A run already in progress is left to finish."""
        self._started = False

    def is_started(self) -> bool:
        return self._started

    def get_num_iterations(self) -> int:
        """Return the number of runs that actually invoked ``on_tick``."""
        return self._num_iterations

    def destroy(self) -> None:
        """Stop the job and remove it from its scheduler.

        A job that was already deleted leaves any newer job registered under
        the same name alone.
        """
        self.stop()
        if self._owner.get_job(self._name) is self:
            self._owner.delete_job(self._name)

    # -- Execution -------------------------------------------------------------

    def should_run(self, now: datetime) -> bool:
        """Return True if the next occurrence after the last run is at or before *now*.

        Measured from the last accepted run rather than the last scheduled
        time, so missed occurrences collapse into one run and a due job stays
        due until a run is accepted.
        """
        return self._next_run_at is not None and self._next_run_at <= now

    async def run(self) -> None:
        """Run one iteration unless the job is stopped or still busy.

        Everything up to the call to ``on_tick`` happens without yielding to
        the event loop, so concurrent calls can never both pass the guard.
        Errors from ``on_tick`` are logged and handed to ``on_error``; errors
        raised by ``on_error`` itself propagate.
        """
        if not self._started:
            self._log.debug("Job stopped, skipping run")
            return

        if self._executing:
            self._log.trace("Job still executing previous iteration, skipping run")
            return

        self._executing = True
        try:
            self._last_iteration_at = self._clock()
            self._next_run_at = self._schedule.next_occurrence_after(self._last_iteration_at)
            self._num_iterations += 1
            self._log.debug("Running job")

            result = self._config.on_tick(self)
            if inspect.isawaitable(result):
                await result

            self._log.debug("Finished running job")
        except Exception as exc:
            self._log.error(f"Error running job: {exc}")
            if self._config.on_error is not None:
                self._config.on_error(exc)
        finally:
            self._executing = False

    def __repr__(self) -> str:
        return (
            f"Job(name={self._name!r}, cron={self._schedule.expression!r}, "
            f"started={self._started})"
        )
