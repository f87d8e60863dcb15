from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Tuple

from .models import Consumer
from .sources import EnergySource


@dataclass(frozen=True)
class BillLine:
    """Billed amount for one usage label."""

    label: str
    usage_kwh: float
    cost: float


@dataclass(frozen=True)
class PeriodBill:
    lines: Tuple[BillLine, ...]
    total_cost: float

    def pairs(self) -> List[Tuple[str, float]]:
        return [(line.label, line.usage_kwh) for line in self.lines]


def cost(source: EnergySource, consumption_kwh: float) -> float:
    return consumption_kwh * source.cost_per_kwh


def emissions(source: EnergySource, consumption_kwh: float) -> float:
    return consumption_kwh * source.carbon_per_kwh


def bill_for_period(usage: Mapping[str, float], source: EnergySource) -> PeriodBill:
    """Price every entry of a usage table, keeping the table's order."""

    lines: List[BillLine] = []
    for label, consumption_kwh in usage.items():
        lines.append(
            BillLine(
                label=label,
                usage_kwh=consumption_kwh,
                cost=cost(source, consumption_kwh),
            )
        )
    return PeriodBill(lines=tuple(lines), total_cost=total_cost(lines))


def total_cost(lines: Iterable[BillLine]) -> float:
    return sum(line.cost for line in lines)


def lifetime_emissions(consumer: Consumer) -> float:
    # Sums every recorded month, not only the current one.
    return emissions(consumer.energy_source, sum(consumer.monthly_usage.values()))
