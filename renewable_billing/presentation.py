from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .costs import PeriodBill
from .models import Consumer, UsageUpdate
from .reporting import AccountSummary, ApplianceRow, appliance_rows

APPLIANCE_HEADERS = ("Device Name", "Power Consumption (kWh)", "Price (P)")
CONSUMER_HEADERS = ("Full Name", "Account Type (Residential or Commercial)")
BAR_CHAR = "█"


def render_table(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    """Render a boxed text table."""

    body = [[str(cell) for cell in row] for row in rows]
    widths = [len(header) for header in headers]
    for row in body:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))

    border = "+" + "+".join("-" * (width + 2) for width in widths) + "+"
    lines = [border, _table_row(headers, widths), border]
    lines.extend(_table_row(row, widths) for row in body)
    lines.append(border)
    return "\n".join(lines)


def _table_row(cells: Sequence[str], widths: Sequence[int]) -> str:
    return "| " + " | ".join(cell.ljust(width) for cell, width in zip(cells, widths)) + " |"


def render_appliances(rows: Iterable[ApplianceRow]) -> str:
    return render_table(
        APPLIANCE_HEADERS,
        [(row.name, f"{row.consumption_kwh:.2f}", f"{row.price:.2f}") for row in rows],
    )


def render_consumer_appliances(consumer: Consumer) -> str:
    return render_appliances(appliance_rows(consumer))


def render_consumers(consumers: Iterable[Consumer]) -> str:
    return render_table(
        CONSUMER_HEADERS,
        [(consumer.full_name, consumer.account_type.value) for consumer in consumers],
    )


def render_bar_chart(title: str, pairs: Sequence[Tuple[str, float]], width: int = 60) -> str:
    """Horizontal bar chart of ``(label, value)`` pairs scaled to ``width``."""

    lines = [title.center(width)]
    if not pairs:
        lines.append("(no data)")
        return "\n".join(lines)

    label_width = max(len(label) for label, _ in pairs)
    value_texts = [_format_value(value) for _, value in pairs]
    bar_width = max(width - label_width - max(len(text) for text in value_texts) - 2, 1)
    peak = max(max(value for _, value in pairs), 0.0)
    for (label, value), text in zip(pairs, value_texts):
        length = round(bar_width * value / peak) if peak > 0 and value > 0 else 0
        parts = [label.rjust(label_width), BAR_CHAR * length, text]
        lines.append(" ".join(part for part in parts if part))
    return "\n".join(lines)


def render_usage_table(title: str, usage: Iterable[Tuple[str, float]]) -> str:
    lines = [f"{title}:"]
    lines.extend(f"{label}: {_format_value(value)} kWh" for label, value in usage)
    return "\n".join(lines)


def render_usage_logs(consumer: Consumer, update: UsageUpdate | None = None) -> str:
    sections: List[str] = []
    if update is not None:
        sections.append(
            f"Usage logs updated: {_format_value(update.total_kwh)}kWh consumed today.\n"
            f"Total updates: {update.update_count}"
        )
    sections.append("--- Usage Logs ---")
    for title, table in (
        ("Daily Usage", consumer.daily_usage),
        ("Weekly Usage", consumer.weekly_usage),
        ("Monthly Usage", consumer.monthly_usage),
    ):
        pairs = list(table.items())
        sections.append(render_usage_table(title, pairs))
        sections.append(render_bar_chart(title, pairs))
    sections.append(f"Total Usage Updates: {consumer.usage_update_count}")
    return "\n\n".join(sections)


def render_period_bill(period: str, bill: PeriodBill) -> str:
    lines = [f"--- {period} Usage and Bill ---"]
    for line in bill.lines:
        lines.append(f"{line.label}: {_format_value(line.usage_kwh)} kWh, Bill: P{line.cost:.2f}")
    lines.append(f"Overall Total Bill for {period}: P{bill.total_cost:.2f}")
    return "\n".join(lines)


def render_account_summary(summary: AccountSummary) -> str:
    sections = [
        f"--- Information Details for {summary.full_name} ---\n"
        f"Account Type: {summary.account_type.value}\n"
        f"Energy Source: {summary.source_description}\n\n"
        f"Usage Updates: {summary.usage_update_count} times"
    ]
    if not summary.appliances:
        sections.append("No devices have been added for this account.")
        return "\n\n".join(sections)

    sections.append(render_appliances(summary.appliances))
    for period, bill in summary.periods():
        sections.append(render_period_bill(period, bill))
        sections.append(render_bar_chart(f"{period} Usage", bill.pairs()))
    sections.append(
        f"Total Carbon Emissions for the Month: {summary.carbon_emissions_kg:.2f} kg"
    )
    return "\n\n".join(sections)


def _format_value(value: float) -> str:
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"
