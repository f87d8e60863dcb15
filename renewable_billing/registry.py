from __future__ import annotations

import hashlib
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

from . import codec
from .errors import ConsumerNotFound, MalformedRecord, ParsingError
from .models import AccountType, Consumer, UsageUpdate
from .sources import EnergySource
from .usage import DEFAULT_TIMEZONE, record_usage

log = logging.getLogger(__name__)

RECORD_SUFFIX = ".txt"


def record_filename(full_name: str, occurrence: int = 1) -> str:
    """File name for a consumer record.

    The readable part keeps only safe characters; the digest of the exact name
    keeps names such as "Ana O'Neil" and "Ana O Neil" apart. Later consumers
    sharing an identical name get an occurrence suffix.
    """

    name = full_name.strip()
    safe_name = re.sub(r"[^A-Za-z0-9_.-]", "_", name)
    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:8]
    suffix = f"_{occurrence}" if occurrence > 1 else ""
    return f"{safe_name}_{digest}{suffix}{RECORD_SUFFIX}"


class ConsumerRegistry:
    """Ordered in-memory collection of consumers backed by one file per consumer.

    Every mutating method rewrites all records once it has been applied.
    """

    def __init__(self, data_dir: str | Path, *, timezone: str = DEFAULT_TIMEZONE) -> None:
        self.data_dir = Path(data_dir)
        self.timezone = timezone
        self._consumers: List[Consumer] = []

    def __iter__(self) -> Iterator[Consumer]:
        return iter(self._consumers)

    def __len__(self) -> int:
        return len(self._consumers)

    @property
    def consumers(self) -> Tuple[Consumer, ...]:
        return tuple(self._consumers)

    def path_for(self, consumer: Consumer) -> Path:
        occurrence = 1
        for other in self._consumers:
            if other is consumer:
                break
            if other.full_name == consumer.full_name:
                occurrence += 1
        return self.data_dir / record_filename(consumer.full_name, occurrence)

    def load(self) -> List[MalformedRecord]:
        """Replace the registry contents with the records found on disk.

        Records that cannot be read are logged and skipped; their errors are
        returned.
        """

        self._consumers.clear()
        failures: List[MalformedRecord] = []
        if not self.data_dir.is_dir():
            log.info("No consumer data directory at %s; starting empty", self.data_dir)
            return failures

        for path in sorted(self.data_dir.glob(f"*{RECORD_SUFFIX}")):
            try:
                text = path.read_text(encoding="utf-8")
                consumer = codec.deserialize_consumer(text, source=path.name)
            except MalformedRecord as exc:
                log.warning("Skipping consumer record %s: %s", path.name, exc)
                failures.append(exc)
                continue
            except (OSError, UnicodeDecodeError) as exc:
                log.warning("Could not read consumer record %s: %s", path.name, exc)
                failures.append(
                    MalformedRecord([ParsingError("unreadable", str(exc))], source=path.name)
                )
                continue
            self._consumers.append(consumer)

        log.info("%d consumer(s) loaded from %s", len(self._consumers), self.data_dir)
        return failures

    def save(self, consumer: Consumer) -> Path:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(consumer)
        path.write_text(codec.serialize_consumer(consumer), encoding="utf-8")
        return path

    def save_all(self) -> List[str]:
        """Write every consumer; returns the names whose record could not be written."""

        failed: List[str] = []
        written: Dict[Path, str] = {}
        for consumer in self._consumers:
            path = self.path_for(consumer)
            if path in written:
                log.error(
                    "Consumers %r and %r resolve to the same record %s; not saving %r",
                    written[path],
                    consumer.full_name,
                    path.name,
                    consumer.full_name,
                )
                failed.append(consumer.full_name)
                continue
            if path.name != record_filename(consumer.full_name):
                log.info("Duplicate consumer name %r stored as %s", consumer.full_name, path.name)
            written[path] = consumer.full_name
            try:
                self.save(consumer)
            except OSError as exc:
                log.error("Error saving data for %s: %s", consumer.full_name, exc)
                failed.append(consumer.full_name)
        log.info(
            "Saved %d of %d consumer(s) to %s",
            len(self._consumers) - len(failed),
            len(self._consumers),
            self.data_dir,
        )
        return failed

    def find(self, full_name: str) -> Consumer | None:
        for consumer in self._consumers:
            if consumer.matches(full_name):
                return consumer
        return None

    def get(self, full_name: str) -> Consumer:
        consumer = self.find(full_name)
        if consumer is None:
            raise ConsumerNotFound(full_name)
        return consumer

    def create_consumer(
        self,
        full_name: str,
        account_type: AccountType | str,
        energy_source: EnergySource,
    ) -> Consumer:
        consumer = Consumer(
            full_name=full_name,
            account_type=account_type,
            energy_source=energy_source,
        )
        if self.find(consumer.full_name) is not None:
            log.warning("Creating a second consumer named %r", consumer.full_name)
        self._consumers.append(consumer)
        log.info("Created consumer %r (%s)", consumer.full_name, consumer.account_type.value)
        self.save_all()
        return consumer

    def add_appliance(self, full_name: str, name: str, consumption_kwh: float, price: float) -> Consumer:
        consumer = self.get(full_name)
        consumer.add_appliance(name, consumption_kwh, price)
        self.save_all()
        return consumer

    def remove_appliance(self, full_name: str, name: str) -> Consumer:
        consumer = self.get(full_name)
        consumer.remove_appliance(name)
        self.save_all()
        return consumer

    def rename_appliance(self, full_name: str, old_name: str, new_name: str) -> Consumer:
        consumer = self.get(full_name)
        consumer.rename_appliance(old_name, new_name)
        self.save_all()
        return consumer

    def set_appliance_consumption(self, full_name: str, name: str, consumption_kwh: float) -> Consumer:
        consumer = self.get(full_name)
        consumer.set_appliance_consumption(name, consumption_kwh)
        self.save_all()
        return consumer

    def set_appliance_price(self, full_name: str, name: str, price: float) -> Consumer:
        consumer = self.get(full_name)
        consumer.set_appliance_price(name, price)
        self.save_all()
        return consumer

    def record_usage(self, full_name: str, *, now: datetime | None = None) -> UsageUpdate:
        consumer = self.get(full_name)
        update = record_usage(consumer, now=now, timezone=self.timezone)
        log.info(
            "Usage updated for %r: %s kWh, %d update(s)",
            consumer.full_name,
            update.total_kwh,
            update.update_count,
        )
        self.save_all()
        return update
