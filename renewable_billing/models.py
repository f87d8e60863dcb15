from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from .errors import ApplianceNotFound, InvalidNumericInput
from .sources import EnergySource


class AccountType(str, Enum):
    RESIDENTIAL = "Residential"
    COMMERCIAL = "Commercial"

    @classmethod
    def parse(cls, value: object) -> "AccountType":
        if isinstance(value, AccountType):
            return value
        text = str(value).strip().title()
        try:
            return cls(text)
        except ValueError as exc:
            raise ValueError(f"Unknown account type: {value!r}") from exc


@dataclass(frozen=True)
class UsageUpdate:
    """Outcome of a single usage aggregation."""

    total_kwh: float
    update_count: int
    day_label: str
    week_label: str
    month_label: str


@dataclass
class Consumer:
    """A registered consumer with its appliances and usage tables.

    ``appliances`` maps appliance name to power draw in kWh and
    ``appliance_prices`` maps the same names to a price. The three usage tables
    map a calendar label (weekday, ``"Week <n>"``, month name) to kWh.
    """

    full_name: str
    account_type: AccountType
    energy_source: EnergySource
    appliances: Dict[str, float] = field(default_factory=dict)
    appliance_prices: Dict[str, float] = field(default_factory=dict)
    daily_usage: Dict[str, float] = field(default_factory=dict)
    weekly_usage: Dict[str, float] = field(default_factory=dict)
    monthly_usage: Dict[str, float] = field(default_factory=dict)
    usage_update_count: int = 0

    def __post_init__(self) -> None:
        self.full_name = _require_name(self.full_name, "full name")
        self.account_type = AccountType.parse(self.account_type)
        if self.usage_update_count < 0:
            raise ValueError("usage_update_count cannot be negative")

    def matches(self, full_name: str) -> bool:
        return self.full_name.casefold() == full_name.strip().casefold()

    def total_draw(self) -> float:
        return sum(self.appliances.values())

    def appliance_price(self, name: str) -> float:
        return self.appliance_prices.get(name, 0.0)

    def add_appliance(self, name: str, consumption_kwh: float, price: float) -> None:
        name = _require_name(name, "appliance name")
        consumption_kwh = _non_negative("power consumption", consumption_kwh)
        price = _non_negative("price", price)
        self.appliances[name] = consumption_kwh
        self.appliance_prices[name] = price

    def remove_appliance(self, name: str) -> None:
        self._require_appliance(name)
        del self.appliances[name]
        self.appliance_prices.pop(name, None)

    def rename_appliance(self, old_name: str, new_name: str) -> None:
        self._require_appliance(old_name)
        new_name = _require_name(new_name, "appliance name")
        if new_name == old_name:
            return
        price = self.appliance_prices.pop(old_name, 0.0)
        self.appliances = {
            (new_name if name == old_name else name): draw
            for name, draw in self.appliances.items()
            if name != new_name
        }
        self.appliance_prices.pop(new_name, None)
        self.appliance_prices[new_name] = price

    def set_appliance_consumption(self, name: str, consumption_kwh: float) -> None:
        self._require_appliance(name)
        self.appliances[name] = _non_negative("power consumption", consumption_kwh)

    def set_appliance_price(self, name: str, price: float) -> None:
        self._require_appliance(name)
        self.appliance_prices[name] = _non_negative("price", price)

    def _require_appliance(self, name: str) -> None:
        if name not in self.appliances:
            raise ApplianceNotFound(self.full_name, name)


def _require_name(value: str, what: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValueError(f"{what.capitalize()} cannot be empty.")
    return text


def _non_negative(field_name: str, value: object) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidNumericInput(field_name, value) from exc
    if math.isnan(number) or math.isinf(number) or number < 0:
        raise InvalidNumericInput(field_name, value)
    return number
