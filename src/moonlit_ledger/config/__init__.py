"""Configuration module for the Moonlit ledger."""

from moonlit_ledger.config.employees_loader import load_employee_table
from moonlit_ledger.config.logging import configure_logging, get_logger
from moonlit_ledger.config.settings import FlatSettings, get_settings

__all__ = [
    "FlatSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "load_employee_table",
]
