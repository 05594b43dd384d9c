"""Duty-roster parsing and attendance accumulation.

A roster is a comma-separated list such as ``Romelyn, Nina(OT:3), Anna(UT:2),
Jeanny(HD)``. Each token becomes a fraction of a standard shift:

- ``Name(HD)``: half day, 0.5
- ``Name(OT:h)``: (shift + h) / shift
- ``Name(UT:h)``: h / shift
- ``Name``: full day, 1
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import Decimal

import structlog

from moonlit_ledger.config import get_settings
from moonlit_ledger.records import DateRange, DateRecord, records_between

logger = structlog.get_logger(__name__)

_HOURS = r"(\d+(?:\.\d+)?)"


@dataclass(frozen=True)
class RosterRule:
    """One token pattern and how it converts to an attendance fraction."""

    name: str
    pattern: re.Pattern[str]
    fraction: Callable[[Decimal | None, Decimal], Decimal]


# Evaluated in order, first match wins.
ROSTER_RULES: tuple[RosterRule, ...] = (
    RosterRule(
        name="half_day",
        pattern=re.compile(r"^(.+?)\s*\(\s*HD\s*\)$", re.IGNORECASE),
        fraction=lambda hours, shift: Decimal("0.5"),
    ),
    RosterRule(
        name="overtime",
        pattern=re.compile(rf"^(.+?)\s*\(\s*OT\s*:\s*{_HOURS}\s*\)$", re.IGNORECASE),
        fraction=lambda hours, shift: (shift + (hours or 0)) / shift,
    ),
    RosterRule(
        name="undertime",
        pattern=re.compile(rf"^(.+?)\s*\(\s*UT\s*:\s*{_HOURS}\s*\)$", re.IGNORECASE),
        fraction=lambda hours, shift: (hours or Decimal("0")) / shift,
    ),
    RosterRule(
        name="full_day",
        pattern=re.compile(r"^([^()]+)$"),
        fraction=lambda hours, shift: Decimal("1"),
    ),
)


@dataclass(frozen=True)
class RosterEntry:
    """A classified roster token."""

    name: str
    fraction: Decimal
    rule: str


def classify_token(token: str, shift_hours: Decimal | None = None) -> RosterEntry | None:
    """Classify one roster token, or return None when nothing matches."""
    text = token.strip()
    if not text:
        return None
    shift = shift_hours if shift_hours is not None else get_settings().shift_hours

    for rule in ROSTER_RULES:
        match = rule.pattern.match(text)
        if not match:
            continue
        name = match.group(1).strip()
        if not name:
            return None
        hours = Decimal(match.group(2)) if match.lastindex and match.lastindex >= 2 else None
        return RosterEntry(name=name, fraction=rule.fraction(hours, shift), rule=rule.name)

    logger.warning("roster_token_skipped", token=text)
    return None


def parse_roster_entries(
    roster_text: str, shift_hours: Decimal | None = None
) -> list[RosterEntry]:
    """Classify every token of one date's roster, skipping unparseable ones."""
    if not roster_text:
        return []
    entries: list[RosterEntry] = []
    for token in roster_text.split(","):
        entry = classify_token(token, shift_hours)
        if entry is not None:
            entries.append(entry)
    return entries


def parse_roster(roster_text: str, shift_hours: Decimal | None = None) -> dict[str, Decimal]:
    """Map each employee on a roster to their attendance fraction for the day."""
    attendance: dict[str, Decimal] = {}
    for entry in parse_roster_entries(roster_text, shift_hours):
        attendance[entry.name] = attendance.get(entry.name, Decimal("0")) + entry.fraction
    return attendance


def accumulate_attendance(
    records: Iterable[DateRecord],
    date_range: DateRange,
    shift_hours: Decimal | None = None,
) -> dict[str, Decimal]:
    """Sum attendance fractions per employee over every record in the range.

    Names keep the order in which they first appear.
    """
    totals: dict[str, Decimal] = {}
    for record in records_between(records, date_range):
        duties = record.duties.strip()
        if not duties:
            continue
        for name, fraction in parse_roster(duties, shift_hours).items():
            totals[name] = totals.get(name, Decimal("0")) + fraction
    return totals
