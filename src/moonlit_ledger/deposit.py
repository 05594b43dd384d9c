"""Deposit summary: the sales/expenses rollup kept with each date."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

import structlog

from moonlit_ledger.codec import LINE_ESCAPE, parse_number, split_label

logger = structlog.get_logger(__name__)

SALES_LABELS = ("Sales AM", "Sales PM", "Coffee Sales", "NS")
TOTAL_SALES_LABEL = "Total Sales"
PREVIOUS_LABEL = "Total Previous"
EXPENSES_LABEL = "Expenses"
GRAND_TOTAL_LABEL = "Grand Net Total"
DEPOSITED_LABEL = "Deposited (Y or N)"

DEPOSIT_LABELS = (
    *SALES_LABELS,
    TOTAL_SALES_LABEL,
    PREVIOUS_LABEL,
    EXPENSES_LABEL,
    GRAND_TOTAL_LABEL,
    DEPOSITED_LABEL,
)


def blank_deposit_rows() -> dict[str, str]:
    return {label: "" for label in DEPOSIT_LABELS}


def encode_deposit_summary(rows: Mapping[str, str]) -> str:
    """Pack deposit rows as ``Label: value`` lines.

    Every row, the last included, ends with the line escape; the result is
    then stripped of surrounding whitespace only, so the final escape stays.
    """
    text = ""
    for label, value in rows.items():
        escaped = str(value or "").replace("\r", "").replace("\n", LINE_ESCAPE)
        text += f"{label}: {escaped}{LINE_ESCAPE}"
    return text.strip()


def parse_deposit_summary(text: str) -> dict[str, str]:
    """Unpack a deposit summary into label/value rows.

    The ``Expenses`` value may span several lines; everything up to the
    ``Grand Net Total`` line belongs to it and keeps its line escapes.
    Lines without a colon are dropped.
    """
    merged: list[str] = []
    expenses: str | None = None
    for line in text.split(LINE_ESCAPE) if text else []:
        if line.startswith(EXPENSES_LABEL):
            if expenses is not None:
                merged.append(expenses)
            expenses = line
        elif expenses is not None and not line.startswith(GRAND_TOTAL_LABEL):
            expenses += f"{LINE_ESCAPE}{line}"
        else:
            if expenses is not None:
                merged.append(expenses)
                expenses = None
            merged.append(line)
    if expenses is not None:
        merged.append(expenses)

    rows: dict[str, str] = {}
    for line in merged:
        split = split_label(line)
        if split is not None:
            label, value = split
            rows[label] = value
    return rows


def sum_expense_lines(value: str) -> Decimal:
    """Total the ``Name=amount`` lines of an expenses value."""
    total = Decimal("0")
    text = value.replace(LINE_ESCAPE, "\n").strip()
    for line in text.split("\n"):
        parts = line.split("=")
        if len(parts) != 2:
            continue
        amount = parse_number(parts[1].strip())
        if amount is not None:
            total += amount
    return total


@dataclass(frozen=True)
class DepositResult:
    """Outcome of a deposit calculation."""

    total_sales: Decimal
    previous: Decimal
    expenses: Decimal

    @property
    def grand_net_total(self) -> Decimal:
        return self.total_sales + self.previous - self.expenses


def calculate_deposit(rows: Mapping[str, str]) -> DepositResult:
    """Compute total sales and the amount to deposit from deposit rows."""
    total_sales = Decimal("0")
    for label in SALES_LABELS:
        total_sales += parse_number(rows.get(label, "")) or Decimal("0")
    previous = parse_number(rows.get(PREVIOUS_LABEL, "")) or Decimal("0")
    expenses = sum_expense_lines(rows.get(EXPENSES_LABEL, ""))

    result = DepositResult(total_sales=total_sales, previous=previous, expenses=expenses)
    logger.debug(
        "deposit_calculated",
        total_sales=str(result.total_sales),
        expenses=str(result.expenses),
        grand_net_total=str(result.grand_net_total),
    )
    return result
