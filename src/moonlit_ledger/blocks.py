"""Append-only numbered blocks inside a single list column.

A column holds blocks like::

    1. Flour 2 sacks
    Sugar 1 sack

    2. Gas 450

Each new block gets the next number after the highest one already present,
its first line fused with the header, and exactly one blank row before it.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

# "12." or "12. text" at the start of a row.
_HEADER_RE = re.compile(r"^\s*(\d+)\.(?:\s|$)")
# A row holding nothing but a number.
_BARE_NUMBER_RE = re.compile(r"^\s*(\d+)\s*$")


@dataclass(frozen=True)
class ColumnScan:
    """Result of scanning a column for its content and numbering."""

    last_non_empty: int
    last_number: int

    @property
    def is_empty(self) -> bool:
        return self.last_non_empty < 0


def _cell_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def scan_column(column: Sequence[Any]) -> ColumnScan:
    """Find the last non-empty row and the highest block number in a column.

    Every row is read, so numbering past any earlier content is never reused.
    """
    last_non_empty = -1
    last_number = 0
    for index, raw in enumerate(column):
        text = _cell_text(raw)
        if text:
            last_non_empty = index
        match = _HEADER_RE.match(text) or _BARE_NUMBER_RE.match(text)
        if match:
            last_number = max(last_number, int(match.group(1)))
    return ColumnScan(last_non_empty=last_non_empty, last_number=last_number)


def block_lines(text: str) -> list[str]:
    """Split pasted text into trimmed rows, dropping leading and trailing blanks."""
    lines = [line.strip() for line in str(text or "").replace("\r", "").split("\n")]
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return lines


def append_numbered_block(
    column: Sequence[Any],
    text: str,
    paired_column: Sequence[Any] | None = None,
) -> list[str]:
    """Return the column with ``text`` appended as the next numbered block.

    Args:
        column: Current rows of the target column.
        text: Pasted block text; blank input leaves the column unchanged.
        paired_column: Column whose numbering is continued when the target
            column is still empty (PM expenses continue from AM expenses).

    Returns:
        The new column rows. Existing rows are kept up to the last non-empty
        one; only trailing blanks are replaced.
    """
    existing = [_cell_text(value) for value in column]
    lines = block_lines(text)
    if not lines:
        return existing

    scan = scan_column(existing)
    base = scan.last_number
    if paired_column is not None and scan.is_empty:
        base = max(base, scan_column(paired_column).last_number)
    next_number = max(1, base + 1)

    rows = existing[: scan.last_non_empty + 1]
    if not scan.is_empty:
        rows.append("")
    rows.append(f"{next_number}. {lines[0]}")
    rows.extend(lines[1:])

    logger.debug(
        "numbered_block_appended",
        number=next_number,
        block_rows=len(lines),
        continued=paired_column is not None and scan.is_empty and base > 0,
    )
    return rows
