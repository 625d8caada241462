"""In-process cron scheduler for asyncio applications."""

from jobcron.errors import (
    DuplicateJobError,
    InvalidScheduleError,
    JobCronError,
    UnknownJobError,
)
from jobcron.job import Job, JobConfig
from jobcron.log import CronLogger, LoggingSink, TaggedLogger
from jobcron.schedule import CronSchedule
from jobcron.scheduler import Scheduler

__version__ = "0.1.0"

__all__ = [
    "CronLogger",
    "CronSchedule",
    "DuplicateJobError",
    "InvalidScheduleError",
    "Job",
    "JobConfig",
    "JobCronError",
    "LoggingSink",
    "Scheduler",
    "TaggedLogger",
    "UnknownJobError",
]
