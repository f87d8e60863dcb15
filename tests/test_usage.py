from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from renewable_billing.models import AccountType, Consumer
from renewable_billing.sources import EnergySource
from renewable_billing.usage import (
    day_label,
    month_label,
    record_usage,
    week_label,
    week_of_year,
)


def test_labels_for_a_known_day(wednesday: datetime) -> None:
    assert day_label(wednesday) == "Wednesday"
    assert week_label(wednesday) == "Week 3"
    assert month_label(wednesday) == "January"


@pytest.mark.parametrize(
    ("day", "week"),
    [
        (date(2024, 1, 1), 1),  # Monday
        (date(2024, 1, 7), 1),
        (date(2024, 1, 8), 2),
        (date(2023, 1, 1), 1),  # Sunday
        (date(2023, 1, 2), 2),
        (date(2022, 12, 31), 53),
        (date(2024, 12, 31), 53),
    ],
)
def test_week_numbers_start_on_monday(day: date, week: int) -> None:
    assert week_of_year(day) == week


def test_record_usage_single_update(jane: Consumer, wednesday: datetime) -> None:
    update = record_usage(jane, now=wednesday)

    assert update.total_kwh == pytest.approx(6.5)
    assert update.update_count == 1
    assert (update.day_label, update.week_label, update.month_label) == (
        "Wednesday",
        "Week 3",
        "January",
    )
    assert jane.daily_usage == {"Wednesday": pytest.approx(6.5)}
    assert jane.weekly_usage == {"Week 3": pytest.approx(6.5)}
    assert jane.monthly_usage == {"January": pytest.approx(6.5)}
    assert jane.usage_update_count == 1


def test_daily_overwrites_while_weekly_and_monthly_accumulate(
    jane: Consumer, wednesday: datetime
) -> None:
    record_usage(jane, now=wednesday)
    jane.remove_appliance("TV")
    update = record_usage(jane, now=wednesday + timedelta(hours=2))

    assert update.total_kwh == pytest.approx(5.0)
    assert jane.daily_usage["Wednesday"] == pytest.approx(5.0)
    assert jane.weekly_usage["Week 3"] == pytest.approx(11.5)
    assert jane.monthly_usage["January"] == pytest.approx(11.5)
    assert jane.usage_update_count == 2


def test_repeated_updates_in_one_week(jane: Consumer, wednesday: datetime) -> None:
    for offset in range(5):
        record_usage(jane, now=wednesday + timedelta(days=offset % 3))

    assert jane.weekly_usage == {"Week 3": pytest.approx(5 * 6.5)}
    assert set(jane.daily_usage) == {"Wednesday", "Thursday", "Friday"}
    assert all(value == pytest.approx(6.5) for value in jane.daily_usage.values())
    assert jane.usage_update_count == 5


def test_empty_appliance_registry_still_counts(wednesday: datetime) -> None:
    consumer = Consumer("Empty Home", AccountType.COMMERCIAL, EnergySource.WIND)

    update = record_usage(consumer, now=wednesday)

    assert update.total_kwh == 0
    assert consumer.daily_usage == {"Wednesday": 0}
    assert consumer.weekly_usage == {"Week 3": 0}
    assert consumer.monthly_usage == {"January": 0}
    assert consumer.usage_update_count == 1


def test_record_usage_defaults_to_current_time(jane: Consumer) -> None:
    update = record_usage(jane, timezone="UTC")
    assert update.day_label in jane.daily_usage
    assert update.update_count == 1
