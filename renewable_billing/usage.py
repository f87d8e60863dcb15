from __future__ import annotations

from datetime import date, datetime
from typing import Dict
from zoneinfo import ZoneInfo

from .models import Consumer, UsageUpdate

DEFAULT_TIMEZONE = "Europe/Brussels"

DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def record_usage(
    consumer: Consumer,
    *,
    now: datetime | None = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> UsageUpdate:
    """Fold the consumer's current appliance draw into its usage tables.

    The daily entry for today is replaced by the total draw, while the weekly
    and monthly entries accumulate it. The update counter grows by one.
    """

    moment = now if now is not None else datetime.now(ZoneInfo(timezone))
    total = consumer.total_draw()

    day = day_label(moment)
    week = week_label(moment)
    month = month_label(moment)

    consumer.daily_usage[day] = total
    _accumulate(consumer.weekly_usage, week, total)
    _accumulate(consumer.monthly_usage, month, total)
    consumer.usage_update_count += 1

    return UsageUpdate(
        total_kwh=total,
        update_count=consumer.usage_update_count,
        day_label=day,
        week_label=week,
        month_label=month,
    )


def day_label(moment: date) -> str:
    return DAY_NAMES[moment.weekday()]


def week_label(moment: date) -> str:
    return f"Week {week_of_year(moment)}"


def month_label(moment: date) -> str:
    return MONTH_NAMES[moment.month - 1]


def week_of_year(moment: date) -> int:
    """Week number with Monday-first weeks where week 1 holds 1 January."""

    jan_first = date(moment.year, 1, 1)
    day_of_year = moment.timetuple().tm_yday
    return (day_of_year - 1 + jan_first.weekday()) // 7 + 1


def _accumulate(table: Dict[str, float], label: str, value: float) -> None:
    table[label] = table.get(label, 0.0) + value
