"""The daily report form and its mapping onto ledger records.

The form is the working area staff fill in for one date: shift counts,
clock-slot sales, list columns (expenses, in/outs, bills, pullouts,
accounts), the deposit rollup and the paste-in input cells. Packing writes
the form into a DateRecord's composite cells; unpacking reads them back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from moonlit_ledger.blocks import append_numbered_block
from moonlit_ledger.codec import (
    FieldKind,
    encode,
    join_lines,
    parse_number,
    parse_pairs,
    split_label,
    split_lines,
)
from moonlit_ledger.config import get_settings
from moonlit_ledger.deposit import (
    blank_deposit_rows,
    encode_deposit_summary,
    parse_deposit_summary,
)
from moonlit_ledger.records import (
    COFFEE_SALES_KEYS,
    SHIFT_KEYS,
    TIME_SALES_KEYS,
    DateRecord,
)

logger = structlog.get_logger(__name__)


class Shift(str, Enum):
    """Half of a business day."""

    AM = "AM"
    PM = "PM"


class ListColumn(str, Enum):
    """Multi-line columns of the form, named by their stored key."""

    EXPENSES_AM = "expensesam"
    EXPENSES_PM = "expensespm"
    INOUTS = "inouts"
    BILLS = "bills"
    PULLOUTS_AM = "pulloutsam"
    PULLOUTS_PM = "pulloutspm"
    ACCOUNTS_AM = "accountsam"
    ACCOUNTS_PM = "accountspm"


class InputCell(str, Enum):
    """Paste-in cells that are consumed and cleared when processed."""

    SMS_AM = "sms_am"
    SMS_PM = "sms_pm"
    INOUTS = "inouts"
    BILLS = "bills"
    EXPENSES_AM = "expenses_am"
    EXPENSES_PM = "expenses_pm"


# Stored in the record's expenses cell, in this order.
EXPENSE_COLUMNS = (
    ListColumn.EXPENSES_AM,
    ListColumn.EXPENSES_PM,
    ListColumn.INOUTS,
    ListColumn.BILLS,
    ListColumn.PULLOUTS_AM,
    ListColumn.PULLOUTS_PM,
)

BLOCK_TARGETS: dict[InputCell, ListColumn] = {
    InputCell.INOUTS: ListColumn.INOUTS,
    InputCell.BILLS: ListColumn.BILLS,
    InputCell.EXPENSES_AM: ListColumn.EXPENSES_AM,
    InputCell.EXPENSES_PM: ListColumn.EXPENSES_PM,
}

# An empty target column continues numbering from its partner.
PAIRED_COLUMNS: dict[ListColumn, ListColumn] = {
    ListColumn.EXPENSES_PM: ListColumn.EXPENSES_AM,
}

SMS_INPUTS: dict[Shift, InputCell] = {
    Shift.AM: InputCell.SMS_AM,
    Shift.PM: InputCell.SMS_PM,
}


def _blank(keys: tuple[str, ...]) -> dict[str, str]:
    return {key: "" for key in keys}


@dataclass
class ReportForm:
    """Everything entered for one date before it is saved to the ledger."""

    report_date: Any = None
    shifts: dict[Shift, dict[str, str]] = field(
        default_factory=lambda: {shift: _blank(SHIFT_KEYS) for shift in Shift}
    )
    mineral: str = ""
    duties: str = ""
    absences: str = ""
    time_sales: dict[str, str] = field(default_factory=lambda: _blank(TIME_SALES_KEYS))
    coffee_sales: dict[str, str] = field(default_factory=lambda: _blank(COFFEE_SALES_KEYS))
    deposit: dict[str, str] = field(default_factory=blank_deposit_rows)
    columns: dict[ListColumn, list[str]] = field(
        default_factory=lambda: {column: [] for column in ListColumn}
    )
    inputs: dict[InputCell, str] = field(
        default_factory=lambda: {cell: "" for cell in InputCell}
    )

    def column(self, column: ListColumn) -> list[str]:
        return self.columns.setdefault(column, [])


def clear_form(form: ReportForm) -> None:
    """Blank every output area. Input cells, the date and deposit labels stay."""
    for shift in Shift:
        form.shifts[shift] = _blank(SHIFT_KEYS)
    form.mineral = ""
    form.duties = ""
    form.absences = ""
    form.time_sales = _blank(TIME_SALES_KEYS)
    form.coffee_sales = _blank(COFFEE_SALES_KEYS)
    form.deposit = {label: "" for label in form.deposit} or blank_deposit_rows()
    form.columns = {column: [] for column in ListColumn}


def _encode_mineral(raw: str, unit_price: Any) -> str:
    count = parse_number(raw)
    if count is None:
        return encode({"mineral": raw, "x15": "?"}, FieldKind.BARE)
    return encode({"mineral": count, "x15": count * unit_price}, FieldKind.BARE)


def _encode_coffee_sales(values: dict[str, str]) -> str:
    return join_lines(f"{key}: {values.get(key, '')}" for key in COFFEE_SALES_KEYS)


def pack_record(form: ReportForm, record: DateRecord, row_limit: int | None = None) -> None:
    """Overwrite every composite cell of ``record`` from the form."""
    settings = get_settings()
    limit = row_limit if row_limit is not None else settings.column_row_limit

    def gathered(column: ListColumn) -> str:
        return join_lines(form.column(column)[:limit])

    record.shift_am = encode(
        {key: form.shifts[Shift.AM].get(key, "") for key in SHIFT_KEYS}, FieldKind.BARE
    )
    record.shift_pm = encode(
        {key: form.shifts[Shift.PM].get(key, "") for key in SHIFT_KEYS}, FieldKind.BARE
    )
    record.expenses = encode({column.value: gathered(column) for column in EXPENSE_COLUMNS})
    record.mineral = _encode_mineral(form.mineral, settings.mineral_unit_price)
    record.roster = encode({"duties": form.duties}, terminate=False)
    record.time_sales = encode(
        {key: form.time_sales.get(key, "") for key in TIME_SALES_KEYS}, FieldKind.BARE
    )
    record.summary = encode(
        {
            "totaldeposit": encode_deposit_summary(form.deposit),
            "absences": form.absences,
            "accountsam": gathered(ListColumn.ACCOUNTS_AM),
            "accountspm": gathered(ListColumn.ACCOUNTS_PM),
            "coffeesales": _encode_coffee_sales(form.coffee_sales),
        },
        terminate=False,
    )
    logger.debug("record_packed", date=record.record_date.isoformat())


def unpack_record(record: DateRecord, form: ReportForm) -> None:
    """Fill the form from a record's cells.

    Fields missing from the record leave the form's current value alone.
    """
    for shift, cell in ((Shift.AM, record.shift_am), (Shift.PM, record.shift_pm)):
        pairs = parse_pairs(cell)
        form.shifts[shift] = {key: pairs.get(key, "") for key in SHIFT_KEYS}

    form.mineral = parse_pairs(record.mineral).get("mineral", "")
    form.duties = record.duties

    time_sales = parse_pairs(record.time_sales)
    for key in TIME_SALES_KEYS:
        if key in time_sales:
            form.time_sales[key] = time_sales[key]

    for column in EXPENSE_COLUMNS:
        form.columns[column] = split_lines(record.value(column.value))

    deposit = parse_deposit_summary(record.deposit_summary)
    if deposit:
        form.deposit = deposit

    form.absences = record.absences

    coffee: dict[str, str] = {}
    for line in split_lines(record.coffee_sales):
        split = split_label(line)
        if split is not None:
            coffee[split[0]] = split[1]
    form.coffee_sales = {key: coffee.get(key, "") for key in COFFEE_SALES_KEYS}

    form.columns[ListColumn.ACCOUNTS_AM] = record.accounts_am
    form.columns[ListColumn.ACCOUNTS_PM] = record.accounts_pm
    logger.debug("record_unpacked", date=record.record_date.isoformat())


def append_input_block(form: ReportForm, cell: InputCell) -> bool:
    """Move a pasted block from an input cell into its numbered column.

    The whole target column is kept; the block goes after its last row.

    Returns:
        True when a block was appended. Blank input is a no-op.
    """
    target = BLOCK_TARGETS.get(cell)
    if target is None:
        raise ValueError(f"{cell.value} is not a numbered-block input")

    text = form.inputs.get(cell, "")
    if not text.strip():
        return False

    paired = PAIRED_COLUMNS.get(target)
    form.columns[target] = append_numbered_block(
        form.column(target),
        text,
        paired_column=form.column(paired) if paired is not None else None,
    )
    form.inputs[cell] = ""
    return True
