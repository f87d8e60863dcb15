from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .costs import PeriodBill, bill_for_period, lifetime_emissions
from .models import AccountType, Consumer
from .sources import EnergySource, describe_energy_source


@dataclass(frozen=True)
class ApplianceRow:
    name: str
    consumption_kwh: float
    price: float


@dataclass(frozen=True)
class AccountSummary:
    full_name: str
    account_type: AccountType
    energy_source: EnergySource
    source_description: str
    usage_update_count: int
    appliances: Tuple[ApplianceRow, ...]
    daily: PeriodBill
    weekly: PeriodBill
    monthly: PeriodBill
    carbon_emissions_kg: float

    def periods(self) -> Tuple[Tuple[str, PeriodBill], ...]:
        return (("Daily", self.daily), ("Weekly", self.weekly), ("Monthly", self.monthly))


def appliance_rows(consumer: Consumer) -> Tuple[ApplianceRow, ...]:
    return tuple(
        ApplianceRow(
            name=name,
            consumption_kwh=consumption_kwh,
            price=consumer.appliance_price(name),
        )
        for name, consumption_kwh in consumer.appliances.items()
    )


def build_account_summary(consumer: Consumer) -> AccountSummary:
    """Collect appliances, per-period bills and lifetime emissions for a consumer."""

    source = consumer.energy_source
    return AccountSummary(
        full_name=consumer.full_name,
        account_type=consumer.account_type,
        energy_source=source,
        source_description=describe_energy_source(source),
        usage_update_count=consumer.usage_update_count,
        appliances=appliance_rows(consumer),
        daily=bill_for_period(consumer.daily_usage, source),
        weekly=bill_for_period(consumer.weekly_usage, source),
        monthly=bill_for_period(consumer.monthly_usage, source),
        carbon_emissions_kg=lifetime_emissions(consumer),
    )
