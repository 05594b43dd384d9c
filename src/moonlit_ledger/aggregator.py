"""Date-ranged views over ledger records: accounts receivable and bill logs."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

import structlog

from moonlit_ledger.codec import LINE_ESCAPE, format_number, parse_number
from moonlit_ledger.records import DateRange, DateRecord, records_between

logger = structlog.get_logger(__name__)

# (stored key, display label) for the per-shift account lists.
ACCOUNT_SECTIONS: tuple[tuple[str, str], ...] = (
    ("accountsam", "Account AM"),
    ("accountspm", "Account PM"),
)


def _padded_date(value: date) -> str:
    return value.strftime("%m/%d/%Y")


def _short_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def content_lines(raw: str) -> list[str]:
    """Unescape a stored multi-line value and keep its non-blank lines."""
    text = raw.replace(LINE_ESCAPE, "\n").strip()
    if not text:
        return []
    return [line for line in text.split("\n") if line.strip()]


def parse_account_entries(line: str) -> list[tuple[str, Decimal]]:
    """Extract ``Name=number`` entries from one line.

    A line may hold several entries separated by ``;``. Entries whose amount
    is not a number are dropped.
    """
    entries: list[tuple[str, Decimal]] = []
    for segment in line.split(";"):
        parts = segment.split("=")
        if len(parts) != 2:
            continue
        name = parts[0].strip()
        amount = parse_number(parts[1].strip())
        if not name or amount is None:
            continue
        entries.append((name, amount))
    return entries


@dataclass
class AccountsDay:
    """Account lines recorded on one date, grouped by shift."""

    record_date: date
    sections: list[tuple[str, list[str]]]

    def render(self) -> str:
        text = f"Date: {_short_date(self.record_date)}:\n"
        for label, lines in self.sections:
            text += f"  {label}:\n"
            if lines:
                for line in lines:
                    text += f"    {line}\n"
            else:
                text += "    None\n"
        # Trailing dot keeps the blank lines visible in the display cell.
        return f"{text}\n\n."


@dataclass
class AccountsReport:
    """Per-day account listings plus per-name totals over a date range."""

    date_range: DateRange
    days: list[AccountsDay] = field(default_factory=list)
    totals: dict[str, list[Decimal]] = field(default_factory=dict)

    @property
    def header(self) -> str:
        return (
            f"Moonlit Bakery Accounts from {_padded_date(self.date_range.start)} "
            f"to {_padded_date(self.date_range.end)}:"
        )

    def render_days(self) -> list[str]:
        return [day.render() for day in self.days]

    def total_for(self, name: str) -> Decimal:
        return sum(self.totals.get(name, []), Decimal("0"))

    def render_totals(self) -> str:
        text = "Total Accounts :\n\n"
        for name, amounts in self.totals.items():
            joined = "+".join(format_number(amount) for amount in amounts)
            text += f"{name}: {joined} = {format_number(self.total_for(name))}\n"
        return text.strip()


def aggregate_accounts(
    records: Iterable[DateRecord],
    date_range: DateRange,
    sections: Sequence[tuple[str, str]] = ACCOUNT_SECTIONS,
) -> AccountsReport:
    """Collect account lines per day and total them per name.

    Names are totalled in the order they are first seen.
    """
    report = AccountsReport(date_range=date_range)
    for record in records_between(records, date_range):
        day_sections: list[tuple[str, list[str]]] = []
        for key, label in sections:
            lines = content_lines(record.value(key))
            for line in lines:
                for name, amount in parse_account_entries(line):
                    report.totals.setdefault(name, []).append(amount)
            day_sections.append((label, lines))

        report.days.append(AccountsDay(record_date=record.record_date, sections=day_sections))

    logger.debug(
        "accounts_aggregated",
        days=len(report.days),
        names=len(report.totals),
    )
    return report


@dataclass
class BillsReport:
    """Non-empty bill logs per day over a date range."""

    date_range: DateRange
    days: list[tuple[date, str]] = field(default_factory=list)

    @property
    def header(self) -> str:
        return (
            f"Check Bills from {_padded_date(self.date_range.start)} "
            f"to {_padded_date(self.date_range.end)}"
        )

    def render_days(self) -> list[str]:
        return [f"Date {_padded_date(day)}:\n{bills}\n\n" for day, bills in self.days]


def aggregate_bills(
    records: Iterable[DateRecord],
    date_range: DateRange,
    key: str = "bills",
) -> BillsReport:
    """Collect one free-text field per day, omitting days where it is empty."""
    report = BillsReport(date_range=date_range)
    for record in records_between(records, date_range):
        text = record.value(key).replace(LINE_ESCAPE, "\n").strip()
        if text:
            report.days.append((record.record_date, text))
    return report
