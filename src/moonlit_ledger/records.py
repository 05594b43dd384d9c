"""Per-date ledger records and the store that holds them.

Each calendar date owns exactly one DateRecord. The record keeps its fields
as composite-string cells in the layout the host spreadsheet persists, so a
record can be written back bit-for-bit.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import structlog

from moonlit_ledger.codec import decode, split_lines

logger = structlog.get_logger(__name__)

SHIFT_KEYS = (
    "duty",
    "sdsale",
    "tstdstk",
    "nssale",
    "nsstk",
    "sb",
    "coins",
    "oil",
    "plasticsb",
    "plasticloaf",
    "loaf",
    "#3",
    "#6",
    "tiny",
    "medium",
    "large",
)

TIME_SALES_KEYS = (
    "dutyam",
    "totalam",
    "8pm",
    "10pm",
    "2am",
    "6am",
    "dutypm",
    "totalpm",
    "8am",
    "10am",
    "1pm",
    "4pm",
    "6pm",
)

EXPENSES_KEYS = (
    "expensesam",
    "expensespm",
    "inouts",
    "bills",
    "pulloutsam",
    "pulloutspm",
)

SUMMARY_KEYS = (
    "totaldeposit",
    "absences",
    "accountsam",
    "accountspm",
    "coffeesales",
)

COFFEE_SALES_KEYS = (
    "Sales",
    "CupsEnd",
    "Coffee",
    "Choco",
    "Caramel",
    "Cappuccino",
    "3in1",
)

# Quoted keys and the cell that stores them.
QUOTED_KEY_CELLS: dict[str, str] = {
    **{key: "expenses" for key in EXPENSES_KEYS},
    **{key: "summary" for key in SUMMARY_KEYS},
    "duties": "roster",
}

DEFAULT_EXPENSES = (
    'expensesam=""; expensespm=""; inouts=""; bills=""; '
    'pulloutsam=""; pulloutspm="";'
)
DEFAULT_ROSTER = 'duties=""'
DEFAULT_SUMMARY = (
    'totaldeposit="Sales AM: \\nSales PM: \\nCoffee Sales: \\nNS:\\n\\n'
    "Total Sales:\\n\\nTotal Previous:\\nExpenses:\\nGrand Net Total:\\n"
    'Deposited (Y or N):"; absences=""; accountsam=""; accountspm=""; '
    'coffeesales="Sales: \\nCupsEnd: \\nCoffee: \\nChoco: \\nCaramel: \\n'
    'Cappuccino: \\n3in1:"'
)

INVALID_DATE_NOTICE = "Please enter valid dates for the start and end of the range."


class InvalidDateError(ValueError):
    """A calendar date was expected but something else was supplied."""

    def __init__(self, value: Any, message: str | None = None):
        super().__init__(message or f"Expected a calendar date, got {value!r}")
        self.value = value


class InvalidDateRangeError(InvalidDateError):
    """The start or end of a queried range is not a calendar date."""

    def __init__(self, start: Any, end: Any):
        super().__init__(
            (start, end), f"Expected calendar dates for range, got {start!r} to {end!r}"
        )
        self.start = start
        self.end = end


def coerce_date(value: Any) -> date:
    """Return ``value`` as a date, dropping any time component."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidDateError(value)


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar dates.

    Ordering is not checked; a reversed range simply contains nothing.
    """

    start: date
    end: date

    @classmethod
    def parse(cls, start: Any, end: Any) -> DateRange:
        """Build a range from raw values, raising InvalidDateRangeError."""
        try:
            return cls(start=coerce_date(start), end=coerce_date(end))
        except InvalidDateError as exc:
            raise InvalidDateRangeError(start, end) from exc

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


@dataclass
class DateRecord:
    """One ledger row: the composite-string cells stored for a date."""

    record_date: date
    shift_am: str = ""
    shift_pm: str = ""
    expenses: str = ""
    mineral: str = ""
    roster: str = ""
    time_sales: str = ""
    summary: str = ""

    @classmethod
    def with_defaults(cls, record_date: date) -> DateRecord:
        """Create a record holding the templates written for a new date."""
        return cls(
            record_date=record_date,
            expenses=DEFAULT_EXPENSES,
            roster=DEFAULT_ROSTER,
            summary=DEFAULT_SUMMARY,
        )

    def value(self, key: str) -> str:
        """Decode a quoted field from whichever cell stores it."""
        cell = QUOTED_KEY_CELLS.get(key)
        if cell is None:
            return ""
        return decode(getattr(self, cell), key)

    def lines(self, key: str) -> list[str]:
        """Decode a quoted multi-line field into its lines."""
        return split_lines(self.value(key))

    @property
    def duties(self) -> str:
        return self.value("duties")

    @property
    def deposit_summary(self) -> str:
        return self.value("totaldeposit")

    @property
    def absences(self) -> str:
        return self.value("absences")

    @property
    def accounts_am(self) -> list[str]:
        return self.lines("accountsam")

    @property
    def accounts_pm(self) -> list[str]:
        return self.lines("accountspm")

    @property
    def coffee_sales(self) -> str:
        return self.value("coffeesales")


class LedgerStore:
    """Ordered record store keyed by exact date.

    Records are created lazily and never deleted.
    """

    def __init__(self, records: Iterable[DateRecord] | None = None):
        self._records: list[DateRecord] = []
        self._by_date: dict[date, DateRecord] = {}
        for record in records or []:
            self._records.append(record)
            # First row for a date wins, like a top-down sheet lookup.
            self._by_date.setdefault(record.record_date, record)
        self._logger = logger.bind(component="ledger_store")

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[DateRecord]:
        return iter(self._records)

    def find(self, record_date: Any) -> DateRecord | None:
        return self._by_date.get(coerce_date(record_date))

    def find_or_create(self, record_date: Any) -> tuple[DateRecord, bool]:
        """Return the record for a date, creating it with defaults if absent.

        Returns:
            The record and whether it was created by this call.
        """
        key = coerce_date(record_date)
        existing = self._by_date.get(key)
        if existing is not None:
            self._logger.debug("ledger_record_found", date=key.isoformat())
            return existing, False

        record = DateRecord.with_defaults(key)
        self._records.append(record)
        self._by_date[key] = record
        self._logger.info("ledger_record_created", date=key.isoformat())
        return record, True


def records_between(records: Iterable[DateRecord], date_range: DateRange) -> list[DateRecord]:
    """Records whose date lies in the range, in their original order."""
    return [r for r in records if date_range.contains(r.record_date)]
