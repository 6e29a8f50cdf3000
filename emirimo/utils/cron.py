"""Crontab expression handling for APScheduler triggers.

APScheduler numbers day-of-week from 0=Monday, while crontab uses 0 (or 7)
for Sunday. Numeric day-of-week values are rewritten to day names before
the trigger is built so "0 9 * * 1" still means Mondays at 09:00.
"""

from datetime import tzinfo
from typing import List, Union

from apscheduler.triggers.cron import CronTrigger

DAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat", "sun")


def _day_number(value: str) -> int:
    number = int(value)
    if not 0 <= number <= 7:
        raise ValueError(f"day-of-week value out of range: {value}")
    return number


def convert_day_of_week(field: str) -> str:
    """Rewrite a crontab day-of-week field using day names.

    Names, "*" and "?" are passed through; numeric values, ranges and
    steps are expanded to explicit day names.

    Raises:
        ValueError: If a numeric value is outside 0-7
    """
    parts: List[str] = []

    for part in field.split(","):
        base, _, step_text = part.partition("/")
        if step_text:
            step = int(step_text)
            if step <= 0:
                raise ValueError(f"Invalid step in day-of-week field: {part}")
        else:
            step = 1

        if base in ("*", "?") and step_text:
            start, end = 0, 6
        elif "-" in base and base.replace("-", "").isdigit():
            low, high = base.split("-", 1)
            start, end = _day_number(low), _day_number(high)
        elif base.isdigit():
            start = _day_number(base)
            end = 6 if step_text else start
        else:
            parts.append(part)
            continue

        if start > end:
            raise ValueError(f"Invalid day-of-week range: {part}")

        for number in range(start, end + 1, step):
            name = DAY_NAMES[number]
            if name not in parts:
                parts.append(name)

    return ",".join(parts)


def crontab_trigger(expression: str, timezone: Union[str, tzinfo]) -> CronTrigger:
    """Build a CronTrigger from a five-field crontab expression.

    Args:
        expression: "minute hour day month day_of_week" with crontab day numbering
        timezone: Timezone the schedule runs in

    Raises:
        ValueError: If the expression is malformed
    """
    fields = expression.split()
    if len(fields) != 5:
        raise ValueError(f"Wrong number of fields; got {len(fields)}, expected 5")

    minute, hour, day, month, day_of_week = fields
    return CronTrigger(
        minute=minute,
        hour=hour,
        day=day,
        month=month,
        day_of_week=convert_day_of_week(day_of_week),
        timezone=timezone,
    )
