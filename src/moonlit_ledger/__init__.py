"""Moonlit ledger - daily bakery reports, ledger records and payroll."""

__version__ = "0.1.0"

from moonlit_ledger.aggregator import (
    AccountsReport,
    BillsReport,
    aggregate_accounts,
    aggregate_bills,
)
from moonlit_ledger.blocks import append_numbered_block, scan_column
from moonlit_ledger.codec import FieldKind, decode, encode, join_lines, split_lines
from moonlit_ledger.commands import Command, CommandError, CommandResult, LedgerService
from moonlit_ledger.config import configure_logging, get_settings
from moonlit_ledger.form import InputCell, ListColumn, ReportForm, Shift
from moonlit_ledger.payroll import Employee, SalaryBreakdown, build_payroll, compute_salary
from moonlit_ledger.records import (
    DateRange,
    DateRecord,
    InvalidDateError,
    InvalidDateRangeError,
    LedgerStore,
)
from moonlit_ledger.roster import accumulate_attendance, parse_roster
from moonlit_ledger.sms import SmsReport, TaggedValue, parse_sms

__all__ = [
    # Version
    "__version__",
    # Codec
    "FieldKind",
    "encode",
    "decode",
    "join_lines",
    "split_lines",
    # Records
    "DateRecord",
    "DateRange",
    "LedgerStore",
    "InvalidDateError",
    "InvalidDateRangeError",
    # Form & parsing
    "ReportForm",
    "Shift",
    "ListColumn",
    "InputCell",
    "SmsReport",
    "TaggedValue",
    "parse_sms",
    "append_numbered_block",
    "scan_column",
    # Payroll
    "Employee",
    "SalaryBreakdown",
    "parse_roster",
    "accumulate_attendance",
    "compute_salary",
    "build_payroll",
    # Reports
    "AccountsReport",
    "BillsReport",
    "aggregate_accounts",
    "aggregate_bills",
    # Commands
    "Command",
    "CommandError",
    "CommandResult",
    "LedgerService",
    # Config
    "get_settings",
    "configure_logging",
]
