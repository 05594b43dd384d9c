"""Utilities for loading the employee rate table from YAML files."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

# Column order of the rate table as kept on the employee sheet.
RATE_TABLE_FIELDS = (
    "daily_rate_1",
    "daily_rate_2",
    "extra_per_day",
    "solo_days",
    "bakery_allowance",
    "cash_advances",
    "accounts",
    "charges",
    "sss",
    "philhealth",
    "previous_balance",
)


def _coerce_amount(path: Path, name: str, key: str, value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, bool):
        raise ValueError(f"{path.name}: {name}.{key} must be a number, got {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(
            f"{path.name}: {name}.{key} must be a number, got {value!r}"
        ) from exc


def load_employee_table(path: Path) -> list[dict[str, Any]]:
    """Load the employee rate table from a YAML file.

    The file holds an ``employees`` list; each entry needs a ``name`` and may
    carry any of the rate table fields. Missing amounts default to zero.

    Returns:
        One normalized mapping per employee, amounts as Decimal.
    """
    raw = path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path.name}: top level must be a mapping")

    entries = data.get("employees") or []
    if not isinstance(entries, list):
        raise ValueError(f"{path.name}: employees must be a list")

    table: list[dict[str, Any]] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"{path.name}: employee #{index + 1} must be a mapping")

        name = str(entry.get("name") or "").strip()
        if not name:
            raise ValueError(f"{path.name}: employee #{index + 1} has no name")

        normalized: dict[str, Any] = {"name": name}
        for key in RATE_TABLE_FIELDS:
            normalized[key] = _coerce_amount(path, name, key, entry.get(key))
        table.append(normalized)

    return table
