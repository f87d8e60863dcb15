from __future__ import annotations

from datetime import datetime

import pytest

from renewable_billing.codec import (
    decode_compact,
    deserialize_consumer,
    encode_compact,
    serialize_consumer,
)
from renewable_billing.errors import InvalidEnergySource, MalformedRecord
from renewable_billing.models import AccountType, Consumer
from renewable_billing.sources import EnergySource
from renewable_billing.usage import record_usage

JANE_RECORD = """\
Full Name: Jane Doe
Account Type: Residential
Energy Source: Solar
Device: Fridge
Consumption: 5.0
Price: 350.0
Device: TV
Consumption: 1.5
Price: 420.0
Daily Usage: Wednesday = 6.5
Weekly Usage: Week 3 = 6.5
Monthly Usage: January = 6.5
Usage Update Count: 1
"""


def test_serialize_writes_labeled_lines(jane: Consumer, wednesday: datetime) -> None:
    record_usage(jane, now=wednesday)
    assert serialize_consumer(jane) == JANE_RECORD


def test_labeled_round_trip(jane: Consumer, wednesday: datetime) -> None:
    record_usage(jane, now=wednesday)
    jane.weekly_usage["Week 4"] = 2.25

    assert deserialize_consumer(serialize_consumer(jane)) == jane


def test_empty_tables_round_trip() -> None:
    consumer = Consumer("Acme Ltd", AccountType.COMMERCIAL, EnergySource.GEOTHERMAL)

    text = serialize_consumer(consumer)

    assert "Daily Usage:\n" in text
    assert deserialize_consumer(text) == consumer


def test_reads_legacy_source_names_and_colons_in_values() -> None:
    text = JANE_RECORD.replace("Energy Source: Solar", "Energy Source: WindEnergy").replace(
        "Device: TV", "Device: TV: living room"
    )

    consumer = deserialize_consumer(text)

    assert consumer.energy_source is EnergySource.WIND
    assert consumer.appliances == {"Fridge": 5.0, "TV: living room": 1.5}


def test_missing_price_defaults_to_zero() -> None:
    text = JANE_RECORD.replace("Price: 420.0\n", "")

    consumer = deserialize_consumer(text)

    assert consumer.appliances["TV"] == 1.5
    assert consumer.appliance_prices["TV"] == 0.0


def test_unknown_source_is_rejected() -> None:
    text = JANE_RECORD.replace("Energy Source: Solar", "Energy Source: Coal")

    with pytest.raises(InvalidEnergySource) as info:
        deserialize_consumer(text, source="Jane_Doe.txt")

    assert info.value.value == "Coal"
    assert info.value.source == "Jane_Doe.txt"
    assert info.value.errors[0].line == 3


def test_malformed_record_lists_every_problem() -> None:
    text = """\
Account Type: Residential
Energy Source: Wind
Device: Heater
Consumption: lots
Weekly Usage: Week 1 = 2.0,broken
Usage Update Count: many
"""

    with pytest.raises(MalformedRecord) as info:
        deserialize_consumer(text, source="bad.txt")

    codes = [message["code"] for message in info.value.messages()]
    assert codes == ["invalid_number", "invalid_usage", "invalid_number", "missing_field"]
    assert info.value.source == "bad.txt"
    assert "bad.txt" in str(info.value)


def test_device_without_consumption_is_malformed() -> None:
    text = JANE_RECORD.replace("Consumption: 1.5\n", "")
    with pytest.raises(MalformedRecord):
        deserialize_consumer(text)


def test_compact_round_trip(jane: Consumer, wednesday: datetime) -> None:
    record_usage(jane, now=wednesday)

    line = encode_compact(jane)

    assert line == (
        "Jane Doe|Residential|Solar|Fridge:5.0;TV:1.5|Fridge:350.0;TV:420.0|1"
        "|Wednesday:6.5|Week 3:6.5|January:6.5"
    )
    assert decode_compact(line) == jane


def test_compact_six_field_form() -> None:
    consumer = decode_compact("John Roe|commercial|WindEnergy|Pump:2.5|Pump:99|4\n")

    assert consumer.full_name == "John Roe"
    assert consumer.account_type is AccountType.COMMERCIAL
    assert consumer.energy_source is EnergySource.WIND
    assert consumer.appliances == {"Pump": 2.5}
    assert consumer.appliance_prices == {"Pump": 99.0}
    assert consumer.usage_update_count == 4
    assert consumer.daily_usage == {}


def test_compact_rejects_unknown_source() -> None:
    with pytest.raises(InvalidEnergySource):
        decode_compact("John Roe|Residential|Hydro|||0")


def test_compact_rejects_wrong_field_count() -> None:
    with pytest.raises(MalformedRecord):
        decode_compact("John Roe|Residential|Solar")


def test_compact_escapes_separators_in_names(jane: Consumer, wednesday: datetime) -> None:
    jane.full_name = "Jane | Doe"
    jane.add_appliance("Lamp; desk", 1.0, 2.0)
    jane.add_appliance("Plug:garage\\2", 0.5, 9.0)
    record_usage(jane, now=wednesday)

    line = encode_compact(jane)

    assert line.startswith("Jane \\| Doe|")
    assert "Lamp\\; desk:1.0" in line
    assert decode_compact(line) == jane
