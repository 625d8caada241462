"""CronSchedule — crontab parsing and next-occurrence lookup on top of APScheduler."""

from __future__ import annotations

from datetime import datetime, timedelta

from apscheduler.triggers.cron import CronTrigger

from jobcron.errors import InvalidScheduleError

# Crontab numbering: 0 and 7 are both Sunday.
_WEEKDAYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

_MACROS = {
    "@yearly": "0 0 0 1 1 *",
    "@annually": "0 0 0 1 1 *",
    "@monthly": "0 0 0 1 * *",
    "@weekly": "0 0 0 * * 0",
    "@daily": "0 0 0 * * *",
    "@midnight": "0 0 0 * * *",
    "@hourly": "0 0 * * * *",
}


def _translate_day_of_week(field: str) -> str:
    """Rewrite numeric crontab weekdays as names.

    APScheduler counts Monday as 0, crontab counts Sunday as 0. Names mean the
    same thing to both, so every numeric or ``*/n`` part is expanded into an
    explicit list of names and everything else passes through.
    """
    parts: list[str] = []
    for part in field.lower().split(","):
        body, _, step = part.partition("/")
        if body == "*" and not step:
            parts.append(part)
            continue
        if step and not step.isdigit():
            raise ValueError(f"invalid day-of-week step in {part!r}")

        if body == "*":
            start, end = 0, 6
        elif body.isdigit():
            start = int(body)
            end = 6 if step else start
        elif "-" in body and all(bound.isdigit() for bound in body.split("-", 1)):
            low, high = body.split("-", 1)
            start, end = int(low), int(high)
        else:
            parts.append(part)
            continue

        interval = int(step) if step else 1
        if interval == 0 or start > 7 or end > 7 or start > end:
            raise ValueError(f"invalid day-of-week value {part!r}")
        days = sorted({day % 7 for day in range(start, end + 1, interval)})
        parts.extend(_WEEKDAYS[day] for day in days)
    return ",".join(parts)


class CronSchedule:
    """A parsed crontab expression.

    Accepts six fields (``second minute hour day month day_of_week``), the
    classic five fields (seconds fixed at 0) or one of the ``@hourly`` style
    macros.

    Args:
        expression: The original expression, kept for display.
        trigger: APScheduler trigger that evaluates it.
    """

    def __init__(self, expression: str, trigger: CronTrigger) -> None:
        self._expression = expression
        self._trigger = trigger

    @classmethod
    def parse(cls, expression: str, timezone: str = "UTC") -> CronSchedule:
        """Parse *expression*, raising ``InvalidScheduleError`` if it is malformed."""
        if not isinstance(expression, str):
            raise InvalidScheduleError(str(expression), "expression must be a string")

        normalized = _MACROS.get(expression.strip().lower(), expression)
        fields = normalized.split()
        if len(fields) == 5:
            fields.insert(0, "0")
        if len(fields) != 6:
            raise InvalidScheduleError(
                expression, f"expected 5 or 6 fields, got {len(fields)}"
            )

        second, minute, hour, day, month, day_of_week = fields
        try:
            trigger = CronTrigger(
                second=second,
                minute=minute,
                hour=hour,
                day=day,
                month=month,
                day_of_week=_translate_day_of_week(day_of_week),
                timezone=timezone,
            )
        except (ValueError, KeyError) as exc:
            # KeyError covers unknown timezone names (ZoneInfoNotFoundError)
            raise InvalidScheduleError(expression, str(exc)) from exc

        # Impossible dates such as Feb 30 would make every lookup scan to year 9999.
        if trigger.get_next_fire_time(None, datetime.now(trigger.timezone)) is None:
            raise InvalidScheduleError(expression, "never fires")
        return cls(expression, trigger)

    @property
    def expression(self) -> str:
        return self._expression

    @property
    def timezone(self):
        return self._trigger.timezone

    def next_occurrence_after(self, moment: datetime) -> datetime | None:
        """Return the first occurrence strictly after the second containing *moment*.

        Returns None when the expression can never fire again.
        """
        start = moment.replace(microsecond=0) + timedelta(seconds=1)
        return self._trigger.get_next_fire_time(None, start)

    def __repr__(self) -> str:
        return f"CronSchedule({self._expression!r})"
