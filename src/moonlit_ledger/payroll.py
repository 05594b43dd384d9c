"""Salary computation from accumulated attendance and the employee rate table."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any

import structlog

from moonlit_ledger.codec import format_number, parse_number
from moonlit_ledger.config import get_settings, load_employee_table
from moonlit_ledger.config.employees_loader import RATE_TABLE_FIELDS

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")

# Deduction fields in the order they are listed on a payslip.
DEDUCTIONS: tuple[tuple[str, str], ...] = (
    ("cash_advances", "Cash Advances"),
    ("accounts", "Accounts"),
    ("charges", "Charges"),
    ("sss", "SSS"),
    ("philhealth", "Philhealth"),
)


def _amount(value: Any) -> Decimal:
    number = parse_number(value)
    return number if number is not None else ZERO


@dataclass(frozen=True)
class Employee:
    """Rates, allowances and deductions for one employee, keyed by name.

    Two people sharing a display name cannot be told apart.
    """

    name: str
    daily_rate_1: Decimal = ZERO
    daily_rate_2: Decimal = ZERO
    extra_per_day: Decimal = ZERO
    solo_days: Decimal = ZERO
    bakery_allowance: Decimal = ZERO
    cash_advances: Decimal = ZERO
    accounts: Decimal = ZERO
    charges: Decimal = ZERO
    sss: Decimal = ZERO
    philhealth: Decimal = ZERO
    previous_balance: Decimal = ZERO

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> Employee | None:
        """Build from a rate-table row: name followed by the amount columns.

        Blank or non-numeric amounts count as zero. Rows without a name give None.
        """
        if not row:
            return None
        name = str(row[0] if row[0] is not None else "").strip()
        if not name:
            return None
        values = list(row[1:]) + [None] * len(RATE_TABLE_FIELDS)
        amounts = {key: _amount(values[i]) for i, key in enumerate(RATE_TABLE_FIELDS)}
        return cls(name=name, **amounts)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Employee:
        amounts = {key: _amount(data.get(key)) for key in RATE_TABLE_FIELDS}
        return cls(name=str(data["name"]).strip(), **amounts)


@dataclass(frozen=True)
class PayLine:
    """A labelled deduction on a salary breakdown."""

    label: str
    amount: Decimal


@dataclass
class SalaryBreakdown:
    """Itemized salary for one employee over a payroll period."""

    employee: Employee
    attendance: Decimal
    solo_rate: Decimal
    total_rate_1: Decimal
    total_rate_2: Decimal
    additional: Decimal = ZERO
    solo_pay: Decimal = ZERO
    bakery_allowance: Decimal = ZERO
    deductions: list[PayLine] = field(default_factory=list)
    current_balance: Decimal | None = None

    @property
    def base_pay(self) -> Decimal:
        return self.total_rate_1 + self.total_rate_2

    @property
    def gross_pay(self) -> Decimal:
        return self.base_pay + self.additional + self.solo_pay + self.bakery_allowance

    @property
    def total_deductions(self) -> Decimal:
        return sum((line.amount for line in self.deductions), ZERO)

    @property
    def net_salary(self) -> Decimal:
        return self.gross_pay - self.total_deductions

    def render(self) -> str:
        """Render the breakdown the way it is posted for staff."""
        emp = self.employee
        att = format_number(self.attendance)
        text = (
            f"{emp.name}: {att} days: "
            f"{att} x (daily rate 1) {format_number(emp.daily_rate_1)} + "
            f"{att} x (daily rate 2) {format_number(emp.daily_rate_2)}= "
            f"{format_number(self.total_rate_1)} + {format_number(self.total_rate_2)} = "
            f"{format_number(self.base_pay)}"
        )
        if self.additional != 0:
            text += (
                f" + (Additional) {format_number(emp.extra_per_day)} x {att}"
                f"(={format_number(self.additional)})"
            )
        if self.solo_pay != 0:
            text += (
                f" + (Solo Days) {format_number(self.solo_rate)} x "
                f"{format_number(emp.solo_days)}(={format_number(self.solo_pay)})"
            )
        if self.bakery_allowance != 0:
            text += f" + Bakery Allowance {format_number(self.bakery_allowance)}"
        for line in self.deductions:
            text += f" - {line.label} {format_number(line.amount)}"
        text += f" = Net Salary {format_number(self.net_salary)}"

        if self.current_balance is not None:
            text += (
                f"\nPrevious Balance {format_number(emp.previous_balance)}"
                f" - Cash Advances {format_number(emp.cash_advances)}"
                f" = Current Balance {format_number(self.current_balance)}"
            )
        return text


def compute_salary(
    employee: Employee,
    attendance: Decimal,
    solo_rate: Decimal | None = None,
) -> SalaryBreakdown:
    """Compute one employee's net salary for the given attendance in days."""
    rate = solo_rate if solo_rate is not None else get_settings().solo_bakery_rate

    breakdown = SalaryBreakdown(
        employee=employee,
        attendance=attendance,
        solo_rate=rate,
        total_rate_1=attendance * employee.daily_rate_1,
        total_rate_2=attendance * employee.daily_rate_2,
        additional=employee.extra_per_day * attendance,
        solo_pay=employee.solo_days * rate if employee.solo_days > 0 else ZERO,
        bakery_allowance=employee.bakery_allowance,
    )

    for key, label in DEDUCTIONS:
        amount = getattr(employee, key)
        if amount > 0:
            breakdown.deductions.append(PayLine(label=label, amount=amount))

    if employee.previous_balance > 0:
        # Only cash advances draw down the carried balance.
        breakdown.current_balance = employee.previous_balance - employee.cash_advances

    return breakdown


def index_employees(employees: Iterable[Employee]) -> dict[str, Employee]:
    """Key employees by trimmed name; a later duplicate replaces an earlier one."""
    return {employee.name.strip(): employee for employee in employees}


def load_employees(path: Path | None = None) -> dict[str, Employee]:
    """Load the rate table from YAML, defaulting to the configured file."""
    source = path or get_settings().employees_file
    if source is None:
        return {}
    table = load_employee_table(Path(source))
    logger.info("employee_table_loaded", path=str(source), employees=len(table))
    return index_employees(Employee.from_mapping(entry) for entry in table)


def build_payroll(
    attendance: Mapping[str, Decimal],
    employees: Mapping[str, Employee],
    precision: int | None = None,
    solo_rate: Decimal | None = None,
) -> list[SalaryBreakdown]:
    """Compute salaries for everyone with attendance, in attendance order.

    Attendance is rounded before use. Names missing from the rate table are
    skipped.
    """
    places = precision if precision is not None else get_settings().attendance_precision
    quantum = Decimal(1).scaleb(-places)

    results: list[SalaryBreakdown] = []
    for name, days in attendance.items():
        employee = employees.get(name.strip())
        if employee is None:
            logger.debug("payroll_employee_missing", employee=name)
            continue
        results.append(compute_salary(employee, days.quantize(quantum), solo_rate))
    return results
