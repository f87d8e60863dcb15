"""Pytest configuration.

The console shell lives in the root-level ``app`` module, so the repository
root is added to ``sys.path`` for runs without an editable install.
"""

from __future__ import annotations

import os
import sys
from datetime import datetime

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from renewable_billing.models import AccountType, Consumer  # noqa: E402
from renewable_billing.sources import EnergySource  # noqa: E402

# Wednesday of week 3 in January 2024.
WEDNESDAY = datetime(2024, 1, 17, 9, 30)


@pytest.fixture
def jane() -> Consumer:
    consumer = Consumer(
        full_name="Jane Doe",
        account_type=AccountType.RESIDENTIAL,
        energy_source=EnergySource.SOLAR,
    )
    consumer.add_appliance("Fridge", 5.0, 350.0)
    consumer.add_appliance("TV", 1.5, 420.0)
    return consumer


@pytest.fixture
def wednesday() -> datetime:
    return WEDNESDAY
