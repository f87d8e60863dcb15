from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class ParsingError:
    code: str
    message: str
    line: int | None = None


class BillingError(Exception):
    """Base class for every error raised by the billing package."""


class MalformedRecord(BillingError):
    def __init__(
        self,
        errors: Iterable[ParsingError],
        source: str | None = None,
    ) -> None:
        self.errors: List[ParsingError] = list(errors)
        self.source = source
        super().__init__(self._summary())

    def _summary(self) -> str:
        details = "; ".join(
            f"line {error.line}: {error.message}" if error.line else error.message
            for error in self.errors
        )
        prefix = f"Malformed record {self.source}" if self.source else "Malformed record"
        return f"{prefix}: {details}" if details else prefix

    def messages(self) -> list[dict[str, str | int]]:
        return [
            {
                "code": error.code,
                "message": error.message,
                "line": error.line or 0,
            }
            for error in self.errors
        ]


class InvalidEnergySource(MalformedRecord):
    """Raised for a tariff name outside the Solar/Wind/Geothermal catalog."""

    def __init__(
        self,
        value: object,
        line: int | None = None,
        source: str | None = None,
    ) -> None:
        self.value = value
        super().__init__(
            [
                ParsingError(
                    code="invalid_energy_source",
                    message=f"Invalid energy source: {value!r}",
                    line=line,
                )
            ],
            source=source,
        )


class InvalidNumericInput(BillingError, ValueError):
    def __init__(self, field: str, raw: object) -> None:
        self.field = field
        self.raw = raw
        super().__init__(f"Invalid value for {field}: {raw!r}. Please enter a non-negative number.")


class ConsumerNotFound(BillingError, LookupError):
    def __init__(self, full_name: str) -> None:
        self.full_name = full_name
        super().__init__(f"Consumer not found: {full_name!r}")


class ApplianceNotFound(BillingError, LookupError):
    def __init__(self, full_name: str, appliance: str) -> None:
        self.full_name = full_name
        self.appliance = appliance
        super().__init__(f"Appliance {appliance!r} not found for consumer {full_name!r}")
