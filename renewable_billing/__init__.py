"""Renewable energy billing: tariffs, consumers, usage aggregation, bills, and storage."""

from .codec import decode_compact, deserialize_consumer, encode_compact, serialize_consumer
from .costs import BillLine, PeriodBill, bill_for_period, cost, emissions, lifetime_emissions
from .errors import (
    ApplianceNotFound,
    BillingError,
    ConsumerNotFound,
    InvalidEnergySource,
    InvalidNumericInput,
    MalformedRecord,
    ParsingError,
)
from .models import AccountType, Consumer, UsageUpdate
from .registry import ConsumerRegistry
from .reporting import AccountSummary, build_account_summary
from .sources import EnergySource, describe_energy_source, get_energy_source
from .usage import record_usage

__all__ = [
    "AccountSummary",
    "AccountType",
    "ApplianceNotFound",
    "bill_for_period",
    "BillingError",
    "BillLine",
    "build_account_summary",
    "Consumer",
    "ConsumerNotFound",
    "ConsumerRegistry",
    "cost",
    "decode_compact",
    "describe_energy_source",
    "deserialize_consumer",
    "emissions",
    "encode_compact",
    "EnergySource",
    "get_energy_source",
    "InvalidEnergySource",
    "InvalidNumericInput",
    "lifetime_emissions",
    "MalformedRecord",
    "ParsingError",
    "PeriodBill",
    "record_usage",
    "serialize_consumer",
    "UsageUpdate",
]
