from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Sequence

from renewable_billing.config import Settings, parse_arguments
from renewable_billing.errors import (
    ApplianceNotFound,
    ConsumerNotFound,
    InvalidEnergySource,
    InvalidNumericInput,
)
from renewable_billing.logging_setup import init_logging
from renewable_billing.models import AccountType, Consumer
from renewable_billing.presentation import (
    render_account_summary,
    render_consumer_appliances,
    render_consumers,
    render_usage_logs,
)
from renewable_billing.registry import ConsumerRegistry
from renewable_billing.reporting import build_account_summary
from renewable_billing.sources import describe_energy_source, energy_source_from_choice

log = logging.getLogger(__name__)

MAIN_MENU = """
--- Main Menu ---
1. Admin Menu
2. User Menu
3. Exit"""

ADMIN_MENU = """
--- Admin Menu ---
1. Create New Consumer
2. Add Device to Consumer
3. View Devices of Consumer
4. Remove Device from Consumer
5. View All Consumers
6. Update and View Usage Logs
7. Search for Consumer and Update Devices
8. Back to Main Menu"""

USER_MENU = """
--- Customer Menu ---
1. View Account Information
2. Back to Main Menu"""

MODIFY_MENU = """
--- Update Devices ---
1. Change Device Power Consumption
2. Change Device Price
3. Rename Device
4. Back to Admin Menu"""

ACCOUNT_TYPE_MENU = """
Choose account type:
1. Residential
2. Commercial"""

ENERGY_SOURCE_MENU = """
Choose energy source:
1. Solar
2. Wind
3. Geothermal"""

ACCOUNT_TYPE_CHOICES = {"1": AccountType.RESIDENTIAL, "2": AccountType.COMMERCIAL}


@dataclass
class Shell:
    """Interactive menus over a consumer registry.

    ``input_fn`` must raise ``EOFError`` once input is exhausted, like
    :func:`input` does.
    """

    registry: ConsumerRegistry
    settings: Settings
    input_fn: Callable[[str], str] = input
    output_fn: Callable[[str], None] = print

    def run(self) -> None:
        try:
            self._main_menu()
        except EOFError:
            log.info("Input closed; saving and leaving")
            self.say("")
        self.say("Saving Data and Exiting...")
        failed = self.registry.save_all()
        if failed:
            self.say(f"Could not save data for: {', '.join(failed)}")
        else:
            self.say("All Data saved Successfully.")

    def ask(self, prompt: str) -> str:
        return self.input_fn(prompt).strip()

    def say(self, text: str) -> None:
        self.output_fn(text)

    def _main_menu(self) -> None:
        while True:
            self.say(MAIN_MENU)
            choice = self.ask("Enter your Choice: ")
            if choice == "1":
                self._admin_menu()
            elif choice == "2":
                self._user_menu()
            elif choice == "3":
                return
            else:
                self.say("Invalid choice. Please try again.")

    def _admin_menu(self) -> None:
        if self.ask("Enter admin password: ") != self.settings.admin_password:
            log.warning("Rejected admin password")
            self.say("Invalid Password. Access denied.")
            return

        actions = {
            "1": self._create_consumer,
            "2": self._add_devices,
            "3": self._view_devices,
            "4": self._remove_device,
            "5": self._view_all_consumers,
            "6": self._update_usage_logs,
            "7": self._search_and_modify,
        }
        while True:
            self.say(ADMIN_MENU)
            choice = self.ask("Enter your Choice: ")
            if choice == "8":
                self.say("Returning to Main Menu...")
                return
            action = actions.get(choice)
            if action is None:
                self.say("Invalid choice. Please try again.")
                continue
            action()

    def _user_menu(self) -> None:
        consumer = self._lookup_consumer("Enter your Full Name: ")
        if consumer is None:
            return
        while True:
            self.say(USER_MENU)
            choice = self.ask("Enter your Choice: ")
            if choice == "1":
                self.say(render_account_summary(build_account_summary(consumer)))
            elif choice == "2":
                self.say("Returning to Main Menu...")
                return
            else:
                self.say("Invalid choice. Please try again.")

    def _create_consumer(self) -> None:
        full_name = self._prompt_name("Enter Full Name: ", "Full name")
        account_type = self._prompt_account_type()
        while True:
            self.say(ENERGY_SOURCE_MENU)
            try:
                energy_source = energy_source_from_choice(self.ask("Enter your Choice: "))
            except InvalidEnergySource:
                self.say("Invalid energy source.")
                continue
            break
        self.registry.create_consumer(full_name, account_type, energy_source)
        self.say("Consumer created Successfully.")

    def _add_devices(self) -> None:
        consumer = self._lookup_consumer()
        if consumer is None:
            return
        while True:
            name = self._prompt_name("Enter Device Name: ", "Device name")
            consumption = self._prompt_number(
                "Enter Device Power Consumption(kWh): ", "power_consumption"
            )
            price = self._prompt_number("Enter Price for this Device: ", "device_price")
            self.registry.add_appliance(consumer.full_name, name, consumption, price)
            self.say("Device added Successfully.")
            if self.ask("Do you want to add another device? (y/n): ").lower() != "y":
                break
        self.say("Data saved Successfully.")

    def _view_devices(self) -> None:
        consumer = self._lookup_consumer()
        if consumer is None:
            return
        if not consumer.appliances:
            self.say(f"Consumer {consumer.full_name} has no Devices added.")
            return
        self.say(render_consumer_appliances(consumer))

    def _remove_device(self) -> None:
        consumer = self._lookup_consumer()
        if consumer is None:
            return
        name = self.ask("Enter the Device Name to Remove: ")
        try:
            self.registry.remove_appliance(consumer.full_name, name)
        except ApplianceNotFound:
            self.say("Device not Found.")
            return
        self.say("Device removed Successfully.")

    def _view_all_consumers(self) -> None:
        self.say(render_consumers(self.registry.consumers))

    def _update_usage_logs(self) -> None:
        consumer = self._lookup_consumer()
        if consumer is None:
            return
        update = self.registry.record_usage(consumer.full_name)
        self.say(render_usage_logs(consumer, update))

    def _search_and_modify(self) -> None:
        consumer = self._lookup_consumer()
        if consumer is None:
            return
        self.say(
            f"--- Consumer Found: {consumer.full_name} ---\n"
            f"Account Type: {consumer.account_type.value}\n"
            f"Energy Source: {describe_energy_source(consumer.energy_source)}\n\n"
            "Devices:"
        )
        self.say(render_consumer_appliances(consumer))

        while True:
            self.say(MODIFY_MENU)
            choice = self.ask("Enter your choice: ")
            if choice == "1":
                self._change_consumption(consumer)
            elif choice == "2":
                self._change_price(consumer)
            elif choice == "3":
                self._rename_device(consumer)
            elif choice == "4":
                return
            else:
                self.say("Invalid choice. Please try again.")

    def _change_consumption(self, consumer: Consumer) -> None:
        name = self.ask("Enter the Name of the Device to Update: ")
        if name not in consumer.appliances:
            self.say("Device not Found.")
            return
        value = self._prompt_number("Enter the New Power Consumption(kWh): ", "power_consumption")
        self.registry.set_appliance_consumption(consumer.full_name, name, value)
        self.say(f"Power Consumption for '{name}' updated to {value:g} kWh.")

    def _change_price(self, consumer: Consumer) -> None:
        name = self.ask("Enter the Name of the Device to Update: ")
        if name not in consumer.appliances:
            self.say("Device not Found.")
            return
        value = self._prompt_number("Enter the New Price(P): ", "device_price")
        self.registry.set_appliance_price(consumer.full_name, name, value)
        self.say(f"Price for '{name}' updated to P{value:.2f}.")

    def _rename_device(self, consumer: Consumer) -> None:
        name = self.ask("Enter the Name of the Device to Rename: ")
        if name not in consumer.appliances:
            self.say("Device not Found.")
            return
        new_name = self._prompt_name("Enter the New Device Name: ", "Device name")
        self.registry.rename_appliance(consumer.full_name, name, new_name)
        self.say(f"Device '{name}' renamed to '{new_name}'.")

    def _lookup_consumer(
        self, prompt: str = "Enter the Full Name of the Consumer: "
    ) -> Consumer | None:
        full_name = self.ask(prompt)
        try:
            return self.registry.get(full_name)
        except ConsumerNotFound:
            self.say("Consumer not Found.")
            return None

    def _prompt_name(self, prompt: str, what: str) -> str:
        while True:
            value = self.ask(prompt)
            if value:
                return value
            self.say(f"{what} cannot be empty. Please try again.")

    def _prompt_number(self, prompt: str, name: str) -> float:
        while True:
            try:
                return _parse_float_field(self.ask(prompt), name, minimum=0.0)
            except InvalidNumericInput as exc:
                self.say(str(exc))

    def _prompt_account_type(self) -> AccountType:
        while True:
            self.say(ACCOUNT_TYPE_MENU)
            choice = self.ask("Enter your Choice: ")
            if choice in ACCOUNT_TYPE_CHOICES:
                return ACCOUNT_TYPE_CHOICES[choice]
            self.say("Invalid account type.")


def _parse_float_field(
    raw: str, name: str, *, minimum: float | None = None, maximum: float | None = None
) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise InvalidNumericInput(name.replace("_", " "), raw) from exc
    if not math.isfinite(value):
        raise InvalidNumericInput(name.replace("_", " "), raw)
    _validate_range(name, raw, value, minimum, maximum)
    return value


def _validate_range(
    name: str, raw: str, value: float, minimum: float | None, maximum: float | None
) -> None:
    if minimum is not None and value < minimum:
        raise InvalidNumericInput(name.replace("_", " "), raw)
    if maximum is not None and value > maximum:
        raise InvalidNumericInput(name.replace("_", " "), raw)


def main(argv: Sequence[str] | None = None) -> int:
    settings = parse_arguments(argv)
    init_logging(settings.log_level, settings.log_file)

    registry = ConsumerRegistry(settings.data_dir, timezone=settings.timezone)
    failures = registry.load()
    for failure in failures:
        print(f"Error loading Data for File {failure.source}: {failure}")
    print(f"{len(registry)} Consumer Loaded Successfully.")

    Shell(registry, settings, input_fn=input, output_fn=print).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
