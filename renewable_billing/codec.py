"""Text codecs for consumer records.

The labeled-line format is the storage format, one record per file::

    Full Name: Jane Doe
    Account Type: Residential
    Energy Source: Solar
    Device: Fridge
    Consumption: 5.0
    Price: 120.0
    Daily Usage: Monday = 6.5
    Weekly Usage: Week 3 = 6.5
    Monthly Usage: January = 6.5
    Usage Update Count: 1

The compact codec packs the same record into a single ``|`` separated line.
"""

from __future__ import annotations

import re
from typing import Dict, List, Mapping, Tuple

from .errors import InvalidEnergySource, MalformedRecord, ParsingError
from .models import AccountType, Consumer
from .sources import EnergySource, get_energy_source

FULL_NAME = "Full Name"
ACCOUNT_TYPE = "Account Type"
ENERGY_SOURCE = "Energy Source"
DEVICE = "Device"
CONSUMPTION = "Consumption"
PRICE = "Price"
DAILY_USAGE = "Daily Usage"
WEEKLY_USAGE = "Weekly Usage"
MONTHLY_USAGE = "Monthly Usage"
USAGE_UPDATE_COUNT = "Usage Update Count"

USAGE_LABELS = (DAILY_USAGE, WEEKLY_USAGE, MONTHLY_USAGE)

FIELD_SEPARATOR = "|"
ENTRY_SEPARATOR = ";"
PAIR_SEPARATOR = ":"
ESCAPE = "\\"


def serialize_consumer(consumer: Consumer) -> str:
    lines = [
        f"{FULL_NAME}: {consumer.full_name}",
        f"{ACCOUNT_TYPE}: {consumer.account_type.value}",
        f"{ENERGY_SOURCE}: {consumer.energy_source.label}",
    ]
    for name, consumption_kwh in consumer.appliances.items():
        lines.append(f"{DEVICE}: {name}")
        lines.append(f"{CONSUMPTION}: {_format_number(consumption_kwh)}")
        lines.append(f"{PRICE}: {_format_number(consumer.appliance_price(name))}")
    lines.append(f"{DAILY_USAGE}: {_format_usage(consumer.daily_usage)}".rstrip())
    lines.append(f"{WEEKLY_USAGE}: {_format_usage(consumer.weekly_usage)}".rstrip())
    lines.append(f"{MONTHLY_USAGE}: {_format_usage(consumer.monthly_usage)}".rstrip())
    lines.append(f"{USAGE_UPDATE_COUNT}: {consumer.usage_update_count}")
    return "\n".join(lines) + "\n"


def deserialize_consumer(text: str, *, source: str | None = None) -> Consumer:
    """Parse a labeled-line record.

    Raises :class:`InvalidEnergySource` for an unknown tariff and
    :class:`MalformedRecord` listing every other problem found. A device
    block without a ``Price`` line gets a price of 0.
    """

    entries = _split_lines(text)
    errors: List[ParsingError] = []
    header: Dict[str, str] = {}
    energy_source: EnergySource | None = None
    appliances: Dict[str, float] = {}
    prices: Dict[str, float] = {}
    usage: Dict[str, Dict[str, float]] = {label: {} for label in USAGE_LABELS}
    update_count = 0

    index = 0
    while index < len(entries):
        line_no, key, value = entries[index]
        index += 1

        if key in (FULL_NAME, ACCOUNT_TYPE):
            header[key] = value
        elif key == ENERGY_SOURCE:
            try:
                energy_source = get_energy_source(value)
            except InvalidEnergySource:
                raise InvalidEnergySource(value, line=line_no, source=source) from None
        elif key == DEVICE:
            if not value:
                errors.append(ParsingError("empty_device", "Device name is empty.", line_no))
            consumption = None
            price = 0.0
            if index < len(entries) and entries[index][1] == CONSUMPTION:
                consumption = _parse_float(entries[index], errors)
                index += 1
            else:
                errors.append(
                    ParsingError(
                        "missing_consumption",
                        f"Device {value!r} has no consumption line.",
                        line_no,
                    )
                )
            if index < len(entries) and entries[index][1] == PRICE:
                parsed_price = _parse_float(entries[index], errors)
                price = parsed_price if parsed_price is not None else 0.0
                index += 1
            if value and consumption is not None:
                appliances[value] = consumption
                prices[value] = price
        elif key in USAGE_LABELS:
            usage[key] = _parse_usage(line_no, value, errors)
        elif key == USAGE_UPDATE_COUNT:
            try:
                update_count = int(value)
            except ValueError:
                errors.append(
                    ParsingError("invalid_number", f"Invalid update count {value!r}.", line_no)
                )
            else:
                if update_count < 0:
                    errors.append(
                        ParsingError("invalid_number", "Update count cannot be negative.", line_no)
                    )
        elif key in (CONSUMPTION, PRICE):
            errors.append(
                ParsingError("unexpected_line", f"{key} line outside a device block.", line_no)
            )
        else:
            errors.append(ParsingError("unknown_field", f"Unknown field {key!r}.", line_no))

    for required in (FULL_NAME, ACCOUNT_TYPE):
        if not header.get(required):
            errors.append(ParsingError("missing_field", f"Missing {required!r} line."))
    if energy_source is None:
        errors.append(ParsingError("missing_field", f"Missing {ENERGY_SOURCE!r} line."))

    account_type = None
    if header.get(ACCOUNT_TYPE):
        try:
            account_type = AccountType.parse(header[ACCOUNT_TYPE])
        except ValueError as exc:
            errors.append(ParsingError("invalid_account_type", str(exc)))

    if errors:
        raise MalformedRecord(errors, source=source)

    return Consumer(
        full_name=header[FULL_NAME],
        account_type=account_type,
        energy_source=energy_source,
        appliances=appliances,
        appliance_prices=prices,
        daily_usage=usage[DAILY_USAGE],
        weekly_usage=usage[WEEKLY_USAGE],
        monthly_usage=usage[MONTHLY_USAGE],
        usage_update_count=update_count,
    )


def encode_compact(consumer: Consumer) -> str:
    """Encode a consumer as a single ``|`` separated line.

    Separator and backslash characters inside names are escaped with a backslash.
    """

    fields = [
        _escape(consumer.full_name),
        consumer.account_type.value,
        consumer.energy_source.label,
        _join_entries(consumer.appliances),
        _join_entries({name: consumer.appliance_price(name) for name in consumer.appliances}),
        str(consumer.usage_update_count),
        _join_entries(consumer.daily_usage),
        _join_entries(consumer.weekly_usage),
        _join_entries(consumer.monthly_usage),
    ]
    return FIELD_SEPARATOR.join(fields)


def decode_compact(line: str) -> Consumer:
    """Decode a compact line with 6 fields (no usage tables) or 9 fields."""

    parts = _split_escaped(line.rstrip("\r\n"), FIELD_SEPARATOR)
    if len(parts) not in (6, 9):
        raise MalformedRecord(
            [ParsingError("field_count", f"Expected 6 or 9 fields, got {len(parts)}.")]
        )
    energy_source = get_energy_source(parts[2])
    errors: List[ParsingError] = []
    appliances = _split_entries(parts[3], errors)
    prices = _split_entries(parts[4], errors)
    try:
        update_count = int(parts[5])
    except ValueError:
        errors.append(ParsingError("invalid_number", f"Invalid update count {parts[5]!r}."))
        update_count = 0
    tables = [_split_entries(part, errors) for part in parts[6:9]] or [{}, {}, {}]
    try:
        account_type = AccountType.parse(parts[1])
    except ValueError as exc:
        errors.append(ParsingError("invalid_account_type", str(exc)))
    if errors:
        raise MalformedRecord(errors)

    try:
        return Consumer(
            full_name=_unescape(parts[0]),
            account_type=account_type,
            energy_source=energy_source,
            appliances=appliances,
            appliance_prices=prices,
            daily_usage=tables[0],
            weekly_usage=tables[1],
            monthly_usage=tables[2],
            usage_update_count=update_count,
        )
    except ValueError as exc:
        raise MalformedRecord([ParsingError("invalid_record", str(exc))]) from exc


def _split_lines(text: str) -> List[Tuple[int, str, str]]:
    entries: List[Tuple[int, str, str]] = []
    for line_no, raw in enumerate(text.splitlines(), start=1):
        if not raw.strip():
            continue
        key, sep, value = raw.partition(":")
        if not sep:
            entries.append((line_no, raw.strip(), ""))
            continue
        entries.append((line_no, key.strip(), value.strip()))
    return entries


def _parse_float(entry: Tuple[int, str, str], errors: List[ParsingError]) -> float | None:
    line_no, key, value = entry
    try:
        return float(value)
    except ValueError:
        errors.append(ParsingError("invalid_number", f"Invalid {key.lower()} {value!r}.", line_no))
        return None


def _parse_usage(line_no: int, value: str, errors: List[ParsingError]) -> Dict[str, float]:
    table: Dict[str, float] = {}
    if not value:
        return table
    for part in value.split(","):
        label, sep, amount = part.partition("=")
        label = label.strip()
        if not sep or not label:
            errors.append(ParsingError("invalid_usage", f"Invalid usage entry {part!r}.", line_no))
            continue
        try:
            table[label] = float(amount)
        except ValueError:
            errors.append(ParsingError("invalid_usage", f"Invalid usage value {amount!r}.", line_no))
    return table


def _format_usage(table: Mapping[str, float]) -> str:
    return ",".join(f"{label} = {_format_number(value)}" for label, value in table.items())


def _format_number(value: float) -> str:
    return repr(float(value))


def _join_entries(table: Mapping[str, float]) -> str:
    return ENTRY_SEPARATOR.join(
        f"{_escape(name)}{PAIR_SEPARATOR}{_format_number(value)}"
        for name, value in table.items()
    )


def _split_entries(field: str, errors: List[ParsingError]) -> Dict[str, float]:
    table: Dict[str, float] = {}
    for entry in filter(None, _split_escaped(field, ENTRY_SEPARATOR)):
        pair = _split_escaped(entry, PAIR_SEPARATOR)
        if len(pair) != 2 or not pair[0]:
            errors.append(ParsingError("invalid_entry", f"Invalid entry {entry!r}."))
            continue
        name, amount = pair
        try:
            table[_unescape(name)] = float(amount)
        except ValueError:
            errors.append(ParsingError("invalid_number", f"Invalid value in entry {entry!r}."))
    return table


def _escape(value: str) -> str:
    for char in (ESCAPE, FIELD_SEPARATOR, ENTRY_SEPARATOR, PAIR_SEPARATOR):
        value = value.replace(char, ESCAPE + char)
    return value


def _unescape(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value, flags=re.DOTALL)


def _split_escaped(text: str, separator: str) -> List[str]:
    """Split on ``separator`` except where it is escaped; parts stay escaped."""

    parts: List[str] = []
    current: List[str] = []
    chars = iter(text)
    for char in chars:
        if char == ESCAPE:
            current.append(char)
            current.append(next(chars, ""))
        elif char == separator:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts
