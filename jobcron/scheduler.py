"""Scheduler — job registry and the poll loop that triggers due jobs."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from jobcron.config import settings
from jobcron.errors import DuplicateJobError, UnknownJobError
from jobcron.job import Job, JobConfig, utcnow

logger = logging.getLogger(__name__)


class Scheduler:
    """Owns a set of named jobs and runs the loop that fires them.

    The poll loop starts with the first job created and stops on
    ``shutdown()``. Methods must be called from the thread running the event
    loop; ``create_job`` needs a running loop.

    Args:
        poll_interval: Seconds between due-checks (default from settings).
        timezone: IANA timezone for cron fields (default from settings).
        clock: Returns the current aware datetime (default: UTC wall clock).
    """

    def __init__(
        self,
        poll_interval: float | None = None,
        timezone: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._poll_interval = poll_interval or settings.poll_interval_seconds
        self._timezone = timezone or settings.scheduler_timezone
        self._clock = clock or utcnow
        self._jobs: dict[str, Job] = {}
        self._poll_task: asyncio.Task | None = None
        self._runs: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._poll_task is not None

    @property
    def timezone(self) -> str:
        return self._timezone

    # -- Job management --------------------------------------------------------

    def create_job(self, name: str, config: JobConfig) -> Job:
        """Create, register and return a new job.

        Raises:
            DuplicateJobError: A job named *name* already exists.
            InvalidScheduleError: ``config.cron`` is not a valid expression.
        """
        if name in self._jobs:
            raise DuplicateJobError(name)

        job = Job(self, name, config, timezone=self._timezone, clock=self._clock)
        if self._poll_task is None:
            self._start_polling()
        self._jobs[name] = job
        logger.info("Created job %s (%s)", name, config.cron)
        return job

    def get_job(self, name: str) -> Job | None:
        return self._jobs.get(name)

    def get_all_jobs(self) -> list[Job]:
        """Return all jobs in creation order."""
        return list(self._jobs.values())

    def delete_job(self, name: str) -> None:
        """Stop a job and forget it. A run in progress is left to finish.

        Raises:
            UnknownJobError: No job named *name* exists.
        """
        job = self._jobs.pop(name, None)
        if job is None:
            raise UnknownJobError(name)
        job.stop()
        logger.info("Deleted job %s", name)

    def delete_all_jobs(self) -> None:
        for job in self._jobs.values():
            job.stop()
        count = len(self._jobs)
        self._jobs.clear()
        if count:
            logger.info("Deleted %d job(s)", count)

    # -- Lifecycle -------------------------------------------------------------

    def shutdown(self) -> None:
        """Stop polling and delete every job. Safe to call more than once."""
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None
            logger.info("Scheduler poll loop stopped")
        self.delete_all_jobs()

    async def aclose(self) -> None:
        """Shut down and wait for the poll loop and in-flight runs to finish."""
        task = self._poll_task
        self.shutdown()
        pending = list(self._runs)
        if task is not None:
            pending.append(task)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # -- Internal --------------------------------------------------------------

    def _start_polling(self) -> None:
        loop = asyncio.get_running_loop()
        self._poll_task = loop.create_task(self._poll(), name="jobcron-poll")
        self._poll_task.add_done_callback(self._poll_finished)
        logger.info("Scheduler poll loop started (interval=%ss)", self._poll_interval)

    async def _poll(self) -> None:
        while True:
            try:
                self._tick(self._clock())
            except Exception:
                logger.exception("Poll tick failed")
            await asyncio.sleep(self._poll_interval)

    def _poll_finished(self, task: asyncio.Task) -> None:
        if self._poll_task is task:
            self._poll_task = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Scheduler poll loop died", exc_info=exc)

    def _tick(self, now: datetime) -> None:
        """Spawn a run for every due job without waiting on any of them."""
        for job in list(self._jobs.values()):
            if job.should_run(now):
                self._spawn(job)

    def _spawn(self, job: Job) -> None:
        task = asyncio.get_running_loop().create_task(
            job.run(), name=f"jobcron-run:{job.name}"
        )
        self._runs.add(task)
        task.add_done_callback(self._run_finished)

    def _run_finished(self, task: asyncio.Task) -> None:
        self._runs.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled error in %s", task.get_name(), exc_info=exc)
