"""Exceptions raised by the scheduler API."""


class JobCronError(Exception):
    """Base class for all jobcron errors."""


class InvalidScheduleError(JobCronError, ValueError):
    """The cron expression could not be parsed."""

    def __init__(self, expression: str, reason: str) -> None:
        self.expression = expression
        self.reason = reason
        super().__init__(f"Invalid cron expression {expression!r}: {reason}")


class DuplicateJobError(JobCronError, ValueError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Job with name {name} already exists")


class UnknownJobError(JobCronError, LookupError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Job with name {name} does not exist")
