from __future__ import annotations

from enum import Enum
from typing import Dict

from .errors import InvalidEnergySource


class EnergySource(Enum):
    """Fixed renewable tariffs: cost per kWh (P) and emissions per kWh (kg)."""

    SOLAR = ("Solar", 0.07, 0.005)
    WIND = ("Wind", 0.05, 0.002)
    GEOTHERMAL = ("Geothermal", 0.06, 0.003)

    def __init__(self, label: str, cost_per_kwh: float, carbon_per_kwh: float) -> None:
        self.label = label
        self.cost_per_kwh = cost_per_kwh
        self.carbon_per_kwh = carbon_per_kwh

    @property
    def stored_name(self) -> str:
        return f"{self.label}Energy"


MENU_CHOICES: Dict[str, EnergySource] = {
    "1": EnergySource.SOLAR,
    "2": EnergySource.WIND,
    "3": EnergySource.GEOTHERMAL,
}

_BY_NAME: Dict[str, EnergySource] = {}
for _source in EnergySource:
    _BY_NAME[_source.label.lower()] = _source
    _BY_NAME[_source.stored_name.lower()] = _source
del _source


def get_energy_source(name: object) -> EnergySource:
    """Look up a tariff by name, e.g. ``"Solar"`` or the stored ``"SolarEnergy"``."""

    if isinstance(name, EnergySource):
        return name
    if not isinstance(name, str):
        raise InvalidEnergySource(name)
    try:
        return _BY_NAME[name.strip().lower()]
    except KeyError:
        raise InvalidEnergySource(name) from None


def energy_source_from_choice(choice: str) -> EnergySource:
    try:
        return MENU_CHOICES[choice.strip()]
    except KeyError:
        raise InvalidEnergySource(choice) from None


def describe_energy_source(source: EnergySource) -> str:
    return (
        f"{source.label} Energy\n"
        f"Cost per kWh = P{source.cost_per_kwh:g}\n"
        f"Carbon emissions = {source.carbon_per_kwh:g} kg/kWh"
    )
