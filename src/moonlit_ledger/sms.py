"""Parser for the free-text shift reports staff send by SMS.

A report is loosely structured, for example::

    Cashier: Anna - 6pm
    SD= 1200
    Mantika= 16.4k 200
    plastic No3= 500+500
    Total: 1,358
    Pullouts =
    Pandesal 12
    Ensaymada 3

    Accounts =
    ...

Every label is optional. A message that matches nothing parses to an empty
report rather than an error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal

import structlog

from moonlit_ledger.codec import format_number
from moonlit_ledger.form import ListColumn, ReportForm, Shift

logger = structlog.get_logger(__name__)

_VALUE = r"\s*=\s*([^\n]+)"
# "SB=" and "Loaf=" only count on lines that do not mention plastic.
_NOT_PLASTIC = r"^(?![^\n]*plastic)[^\n]*?(?<![A-Za-z])"
_FULL_NUMBER_RE = re.compile(r"^[+-]?(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?$")


@dataclass(frozen=True)
class TaggedValue:
    """A parsed field value, either numeric or literal text.

    Literal values are kept exactly as typed, so "500+500" or "16.4k 200"
    are never turned into numbers.
    """

    raw: str
    literal: bool = False

    @property
    def number(self) -> Decimal | None:
        if self.literal or not _FULL_NUMBER_RE.match(self.raw):
            return None
        return Decimal(self.raw.replace(",", ""))

    def cell_text(self) -> str:
        number = self.number
        return format_number(number) if number is not None else self.raw


@dataclass(frozen=True)
class FieldRule:
    """Label pattern for one shift field and whether it is stored as text."""

    key: str
    pattern: re.Pattern[str]
    literal: bool = False


def _rule(key: str, label: str, literal: bool = False) -> FieldRule:
    pattern = re.compile(label + _VALUE, re.IGNORECASE | re.MULTILINE)
    return FieldRule(key=key, pattern=pattern, literal=literal)


SMS_FIELD_RULES: tuple[FieldRule, ...] = (
    _rule("sdsale", r"(?<![A-Za-z])SD"),
    _rule("tstdstk", r"Toasted"),
    _rule("nssale", r"NSSale"),
    _rule("nsstk", r"NSStocks"),
    _rule("sb", _NOT_PLASTIC + r"SB"),
    _rule("coins", r"Coins"),
    _rule("oil", r"Mantika", literal=True),
    _rule("plasticsb", r"Plastic\s*SB"),
    _rule("plasticloaf", r"Plastic\s*Loaf"),
    _rule("loaf", _NOT_PLASTIC + r"Loaf(?:\s*bread)?", literal=True),
    _rule("#3", r"plastic[_\s-]*No3", literal=True),
    _rule("#6", r"plastic[_\s-]*No6", literal=True),
    _rule("tiny", r"plastic[_\s-]*Tiny", literal=True),
    _rule("medium", r"Plastic\s*Medium"),
    _rule("large", r"Plastic\s*Large"),
)

_CASHIER_PATTERNS = (
    # "Cashier: Anna - 6pm" keeps only the name.
    re.compile(r"Cashier\s*:\s*([^\n-]+?)\s*-\s*.*$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"Cashier\s*:\s*([^\n]+)$", re.IGNORECASE | re.MULTILINE),
)
_TOTAL_RE = re.compile(r"^Total\s*:\s*([\d,]+)", re.IGNORECASE | re.MULTILINE)
_MINERAL_RE = re.compile(r"Mineral\s*=\s*([0-9]+)\s*x", re.IGNORECASE)
_PULLOUTS_RE = re.compile(
    r"Pullouts\s*=\s*\n(.*?)"
    r"(?:\n\s*\n|Accounts\s*=|Workers\s*=|Expensis|Expenses|^-End-|\Z)",
    re.IGNORECASE | re.DOTALL | re.MULTILINE,
)

# Clock slot that receives a shift's closing total.
CLOSING_SLOTS = {Shift.AM: "6am", Shift.PM: "6pm"}
DUTY_SLOTS = {Shift.AM: "dutyam", Shift.PM: "dutypm"}
PULLOUT_COLUMNS = {Shift.AM: ListColumn.PULLOUTS_AM, Shift.PM: ListColumn.PULLOUTS_PM}


@dataclass
class SmsReport:
    """Fields extracted from one shift's message."""

    shift: Shift
    cashier: str | None = None
    total: int | None = None
    fields: dict[str, TaggedValue] = field(default_factory=dict)
    mineral: int | None = None
    pullouts: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return (
            self.cashier is None
            and self.total is None
            and not self.fields
            and self.mineral is None
            and not self.pullouts
        )


def parse_sms(raw: str, shift: Shift) -> SmsReport:
    """Extract every recognizable field from a shift message."""
    text = str(raw or "").replace("\r", "").strip()
    report = SmsReport(shift=shift)

    for pattern in _CASHIER_PATTERNS:
        match = pattern.search(text)
        if match:
            report.cashier = match.group(1).strip()
            break

    total_match = _TOTAL_RE.search(text)
    if total_match:
        digits = total_match.group(1).replace(",", "")
        if digits:
            report.total = int(digits)

    for rule in SMS_FIELD_RULES:
        match = rule.pattern.search(text)
        if match:
            report.fields[rule.key] = TaggedValue(raw=match.group(1).strip(), literal=rule.literal)

    # Mineral water is only counted at the end of the PM shift.
    if shift == Shift.PM:
        mineral_match = _MINERAL_RE.search(text)
        if mineral_match:
            report.mineral = int(mineral_match.group(1))

    pullouts_match = _PULLOUTS_RE.search(text)
    if pullouts_match:
        report.pullouts = [
            line.strip() for line in pullouts_match.group(1).split("\n") if line.strip()
        ]

    logger.info(
        "sms_report_parsed",
        shift=shift.value,
        fields=len(report.fields),
        pullouts=len(report.pullouts),
        empty=report.is_empty,
    )
    return report


def apply_sms_report(form: ReportForm, report: SmsReport) -> None:
    """Write a parsed report into the form's cells for its shift.

    The shift's pullouts column is always replaced, even by an empty list.
    """
    shift_cells = form.shifts[report.shift]
    if report.cashier is not None:
        shift_cells["duty"] = report.cashier
        form.time_sales[DUTY_SLOTS[report.shift]] = report.cashier
    if report.total is not None:
        form.time_sales[CLOSING_SLOTS[report.shift]] = str(report.total)

    for key, value in report.fields.items():
        shift_cells[key] = value.cell_text()

    if report.mineral is not None:
        form.mineral = str(report.mineral)

    form.columns[PULLOUT_COLUMNS[report.shift]] = list(report.pullouts)
