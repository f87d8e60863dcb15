from __future__ import annotations

from datetime import datetime

from renewable_billing.models import AccountType, Consumer
from renewable_billing.presentation import (
    BAR_CHAR,
    render_account_summary,
    render_bar_chart,
    render_consumer_appliances,
    render_consumers,
    render_period_bill,
    render_table,
    render_usage_logs,
)
from renewable_billing.costs import bill_for_period
from renewable_billing.reporting import build_account_summary
from renewable_billing.sources import EnergySource
from renewable_billing.usage import record_usage


def test_render_table_pads_columns() -> None:
    text = render_table(("Name", "Value"), [("a", "1"), ("longer", "22")])
    assert text.splitlines() == [
        "+--------+-------+",
        "| Name   | Value |",
        "+--------+-------+",
        "| a      | 1     |",
        "| longer | 22    |",
        "+--------+-------+",
    ]


def test_appliance_table_uses_two_decimals(jane: Consumer) -> None:
    del jane.appliance_prices["TV"]
    text = render_consumer_appliances(jane)
    assert "| Fridge      | 5.00                    | 350.00    |" in text
    assert "| TV          | 1.50                    | 0.00      |" in text


def test_consumer_listing(jane: Consumer) -> None:
    other = Consumer("Acme Ltd", AccountType.COMMERCIAL, EnergySource.WIND)
    text = render_consumers([jane, other])
    assert "Jane Doe" in text
    assert "Commercial" in text


def test_bar_chart_scales_to_largest_value() -> None:
    lines = render_bar_chart("Weekly Usage", [("Week 1", 10.0), ("Week 2", 5.0)], width=30)
    rows = lines.splitlines()[1:]
    assert rows[0].count(BAR_CHAR) == 2 * rows[1].count(BAR_CHAR)
    assert rows[0].endswith(" 10")
    assert rows[1].endswith(" 5")


def test_bar_chart_handles_empty_and_zero_values() -> None:
    assert render_bar_chart("Daily Usage", []).endswith("(no data)")
    zero = render_bar_chart("Daily Usage", [("Monday", 0.0)])
    assert BAR_CHAR not in zero
    assert zero.splitlines()[1] == "Monday 0"


def test_period_bill_lines() -> None:
    text = render_period_bill("Monthly", bill_for_period({"January": 10.0}, EnergySource.SOLAR))
    assert text.splitlines() == [
        "--- Monthly Usage and Bill ---",
        "January: 10 kWh, Bill: P0.70",
        "Overall Total Bill for Monthly: P0.70",
    ]


def test_usage_logs_report(jane: Consumer, wednesday: datetime) -> None:
    update = record_usage(jane, now=wednesday)
    text = render_usage_logs(jane, update)
    assert "Usage logs updated: 6.5kWh consumed today." in text
    assert "Wednesday: 6.5 kWh" in text
    assert "Week 3: 6.5 kWh" in text
    assert text.endswith("Total Usage Updates: 1")


def test_account_summary_without_devices() -> None:
    consumer = Consumer("Acme Ltd", AccountType.COMMERCIAL, EnergySource.GEOTHERMAL)
    text = render_account_summary(build_account_summary(consumer))
    assert "Account Type: Commercial" in text
    assert "Geothermal Energy" in text
    assert text.endswith("No devices have been added for this account.")


def test_account_summary_with_usage(jane: Consumer, wednesday: datetime) -> None:
    record_usage(jane, now=wednesday)
    text = render_account_summary(build_account_summary(jane))
    assert "Usage Updates: 1 times" in text
    assert "Week 3: 6.5 kWh, Bill: P" in text
    assert "--- Weekly Usage and Bill ---" in text
    assert text.endswith("Total Carbon Emissions for the Month: 0.03 kg")
