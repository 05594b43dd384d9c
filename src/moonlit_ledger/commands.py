"""Command entry points for the ledger.

The host decides which command to run (a checkbox toggled, a paste made)
and calls :meth:`LedgerService.execute`. Each command runs to completion
against the store and form it was given; results carry the text the host
should write back.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

import structlog

from moonlit_ledger.aggregator import aggregate_accounts, aggregate_bills
from moonlit_ledger.codec import format_number
from moonlit_ledger.deposit import GRAND_TOTAL_LABEL, TOTAL_SALES_LABEL, calculate_deposit
from moonlit_ledger.form import (
    SMS_INPUTS,
    InputCell,
    ReportForm,
    Shift,
    append_input_block,
    clear_form,
    pack_record,
    unpack_record,
)
from moonlit_ledger.payroll import Employee, build_payroll, load_employees
from moonlit_ledger.records import (
    INVALID_DATE_NOTICE,
    DateRange,
    InvalidDateError,
    LedgerStore,
    coerce_date,
)
from moonlit_ledger.roster import accumulate_attendance
from moonlit_ledger.sms import apply_sms_report, parse_sms

logger = structlog.get_logger(__name__)


class Command(str, Enum):
    """Operations the host can trigger."""

    UPDATE_LEDGER = "update_ledger"
    RETRIEVE_LEDGER = "retrieve_ledger"
    CLEAR_INPUTS = "clear_inputs"
    COMPUTE_PAYROLL = "compute_payroll"
    COMPUTE_ACCOUNTS = "compute_accounts"
    COMPUTE_BILLS = "compute_bills"
    PASTE_SMS = "paste_sms"
    APPEND_BLOCK = "append_block"
    CALCULATE_DEPOSIT = "calculate_deposit"


class CommandError(Exception):
    """A command could not be dispatched."""

    def __init__(self, command: str, message: str):
        super().__init__(f"Command '{command}' failed: {message}")
        self.command = command


@dataclass
class CommandResult:
    """Outcome of a command: status text plus values to write back."""

    command: Command
    success: bool = True
    status: str = ""
    outputs: dict[str, Any] = field(default_factory=dict)
    notice: str | None = None


def _padded(value: date) -> str:
    return value.strftime("%m/%d/%Y")


class LedgerService:
    """Runs commands against one record store and report form."""

    def __init__(
        self,
        store: LedgerStore,
        form: ReportForm | None = None,
        employees: Mapping[str, Employee] | None = None,
    ):
        self.store = store
        self.form = form or ReportForm()
        self.employees = dict(employees) if employees is not None else load_employees()
        self._handlers: dict[Command, Any] = {
            Command.UPDATE_LEDGER: self.update_ledger,
            Command.RETRIEVE_LEDGER: self.retrieve_ledger,
            Command.CLEAR_INPUTS: self.clear_inputs,
            Command.COMPUTE_PAYROLL: self.compute_payroll,
            Command.COMPUTE_ACCOUNTS: self.compute_accounts,
            Command.COMPUTE_BILLS: self.compute_bills,
            Command.PASTE_SMS: self.paste_sms,
            Command.APPEND_BLOCK: self.append_block,
            Command.CALCULATE_DEPOSIT: self.calculate_deposit,
        }

    def execute(self, command: Command | str, **kwargs: Any) -> CommandResult:
        """Run a command by name.

        An invalid date aborts the command before anything is written and
        comes back as a failed result with a notice for the user.
        """
        try:
            resolved = Command(command)
        except ValueError as exc:
            raise CommandError(str(command), "unknown command") from exc

        handler = self._handlers[resolved]
        with structlog.contextvars.bound_contextvars(command=resolved.value):
            logger.info("executing_command", args=kwargs)
            try:
                result = handler(**kwargs)
            except InvalidDateError as exc:
                logger.warning("command_invalid_date", value=repr(exc.value))
                return CommandResult(
                    command=resolved, success=False, notice=INVALID_DATE_NOTICE
                )
            logger.info("command_executed", status=result.status)
            return result

    # === Ledger record handlers ===

    def update_ledger(self) -> CommandResult:
        """Save the form into the record for its date."""
        record, created = self.store.find_or_create(self.form.report_date)
        pack_record(self.form, record)
        return CommandResult(
            command=Command.UPDATE_LEDGER,
            status="updated",
            outputs={"date": record.record_date, "created": created},
        )

    def retrieve_ledger(self) -> CommandResult:
        """Reload the form from the record for its date, creating it if needed."""
        record_date = coerce_date(self.form.report_date)
        clear_form(self.form)
        record, created = self.store.find_or_create(record_date)
        unpack_record(record, self.form)
        return CommandResult(
            command=Command.RETRIEVE_LEDGER,
            status="created" if created else "retrieved",
            outputs={"date": record.record_date, "created": created},
        )

    def clear_inputs(self) -> CommandResult:
        clear_form(self.form)
        return CommandResult(command=Command.CLEAR_INPUTS, status="cleared")

    # === Form input handlers ===

    def paste_sms(self, shift: Shift | str, text: str | None = None) -> CommandResult:
        """Parse the SMS pasted for a shift into the form, then clear the paste."""
        resolved = Shift(shift)
        cell = SMS_INPUTS[resolved]
        if text is not None:
            self.form.inputs[cell] = text

        raw = self.form.inputs.get(cell, "")
        outputs: dict[str, Any] = {}
        if raw.strip():
            report = parse_sms(raw, resolved)
            apply_sms_report(self.form, report)
            outputs["report"] = report
        self.form.inputs[cell] = ""
        return CommandResult(
            command=Command.PASTE_SMS,
            status="parsed" if outputs else "empty",
            outputs=outputs,
        )

    def append_block(self, cell: InputCell | str, text: str | None = None) -> CommandResult:
        """Append a pasted block to its numbered column."""
        resolved = InputCell(cell)
        if text is not None:
            self.form.inputs[resolved] = text
        appended = append_input_block(self.form, resolved)
        return CommandResult(
            command=Command.APPEND_BLOCK,
            status="appended" if appended else "empty",
        )

    def calculate_deposit(self) -> CommandResult:
        """Fill in total sales and grand net total on the deposit rows."""
        result = calculate_deposit(self.form.deposit)
        self.form.deposit[TOTAL_SALES_LABEL] = format_number(result.total_sales)
        self.form.deposit[GRAND_TOTAL_LABEL] = format_number(result.grand_net_total)
        return CommandResult(
            command=Command.CALCULATE_DEPOSIT,
            status="calculated",
            outputs={"result": result},
        )

    # === Display handlers ===

    def compute_payroll(self, start: Any, end: Any) -> CommandResult:
        """Salary breakdowns for everyone on duty within the range."""
        date_range = DateRange.parse(start, end)
        attendance = accumulate_attendance(self.store, date_range)
        breakdowns = build_payroll(attendance, self.employees)
        return CommandResult(
            command=Command.COMPUTE_PAYROLL,
            status="computed",
            outputs={
                "header": (
                    f"Attendance from {_padded(date_range.start)} "
                    f"to {_padded(date_range.end)}"
                ),
                "attendance": attendance,
                "breakdowns": breakdowns,
                "lines": [breakdown.render() for breakdown in breakdowns],
            },
        )

    def compute_accounts(self, start: Any, end: Any) -> CommandResult:
        """Per-day account listings and per-name totals within the range."""
        report = aggregate_accounts(self.store, DateRange.parse(start, end))
        return CommandResult(
            command=Command.COMPUTE_ACCOUNTS,
            status="computed",
            outputs={
                "header": report.header,
                "days": report.render_days(),
                "totals": report.render_totals(),
                "report": report,
            },
        )

    def compute_bills(self, start: Any, end: Any) -> CommandResult:
        """Bill logs for each day in the range that has any."""
        report = aggregate_bills(self.store, DateRange.parse(start, end))
        return CommandResult(
            command=Command.COMPUTE_BILLS,
            status="computed",
            outputs={
                "header": report.header,
                "days": report.render_days(),
                "report": report,
            },
        )
