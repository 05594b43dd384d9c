"""Pytest configuration and fixtures."""

import os
from datetime import date
from decimal import Decimal

import pytest

# Keep test runs independent of any local .env rate table.
os.environ.setdefault("MOONLIT_LOG_LEVEL", "DEBUG")
os.environ.pop("MOONLIT_EMPLOYEES_FILE", None)

from moonlit_ledger.config import get_settings  # noqa: E402
from moonlit_ledger.payroll import Employee  # noqa: E402
from moonlit_ledger.records import DateRecord, LedgerStore  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env changes in a test take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_record(
    record_date: date,
    duties: str = "",
    accountsam: str = "",
    accountspm: str = "",
    bills: str = "",
) -> DateRecord:
    """Build a record the way the host stores it."""
    record = DateRecord.with_defaults(record_date)
    record.roster = f'duties="{duties}"'
    record.expenses = (
        f'expensesam=""; expensespm=""; inouts=""; bills="{bills}"; '
        'pulloutsam=""; pulloutspm="";'
    )
    record.summary = (
        'totaldeposit="Sales AM: \\n"; absences=""; '
        f'accountsam="{accountsam}"; accountspm="{accountspm}"; coffeesales=""'
    )
    return record


@pytest.fixture
def week_store():
    """Three days of records with rosters, accounts and bills."""
    return LedgerStore(
        [
            make_record(
                date(2025, 3, 1),
                duties="Romelyn, Nina(OT:3), Anna(UT:2)",
                accountsam="Jeanny=10; Nina=80",
                bills="1. Meralco 2300\\nWater 410",
            ),
            make_record(
                date(2025, 3, 2),
                duties="Romelyn, Jeanny(HD)",
                accountsam="Jeanny=5",
            ),
            make_record(
                date(2025, 3, 3),
                duties="Nina, Romelyn(hd)",
                accountspm="Nina=100",
            ),
        ]
    )


@pytest.fixture
def employees():
    """Rate table for the staff on the week_store rosters."""
    return {
        "Romelyn": Employee(name="Romelyn", daily_rate_1=Decimal("400")),
        "Nina": Employee(
            name="Nina",
            daily_rate_1=Decimal("300"),
            daily_rate_2=Decimal("50"),
            cash_advances=Decimal("200"),
            previous_balance=Decimal("1000"),
        ),
        "Anna": Employee(name="Anna", daily_rate_1=Decimal("360")),
    }
