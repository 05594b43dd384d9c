"""Composite-string codec for ledger cells.

A ledger cell packs several named fields into one line of text, either as
bare pairs (``key=value; key2=value2;``) or quoted pairs
(``key="value"; key2="value2"``). Multi-line values are stored with the
two-character escape ``\\n`` in place of real line breaks because the cell
store only round-trips single-line strings.

Quoted values cannot contain a literal double quote; a value that does will
be cut short on decode.
"""

import re
from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

# Literal backslash + "n", not a newline character.
LINE_ESCAPE = "\\n"

_LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


class FieldKind(str, Enum):
    """How a field value is written inside a composite string."""

    QUOTED = "quoted"
    BARE = "bare"


def parse_number(value: Any) -> Decimal | None:
    """Parse the leading number of a value, ignoring anything after it.

    ``"10abc"`` gives 10, ``" 2.5 "`` gives 2.5 and ``"abc"`` gives None.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    match = _LEADING_NUMBER_RE.match(str(value))
    if not match:
        return None
    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        return None


def format_number(value: Decimal | int | float) -> str:
    """Render a number without exponent or trailing zeros (1500.0 -> 1500)."""
    number = value if isinstance(value, Decimal) else Decimal(str(value))
    if number == number.to_integral_value():
        return str(number.quantize(Decimal(1)))
    return format(number.normalize(), "f")


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return format_number(value)
    return str(value)


def encode(
    fields: Mapping[str, Any],
    kind: FieldKind = FieldKind.QUOTED,
    terminate: bool = True,
) -> str:
    """Encode fields into a composite string, in mapping order.

    Args:
        fields: Field name to value. None is written as an empty value.
        kind: Quoted (``key="value"``) or bare (``key=value``) pairs.
        terminate: Whether the final pair keeps its trailing ``;``.

    Returns:
        The packed cell text.
    """
    if kind == FieldKind.QUOTED:
        pairs = [f'{name}="{_stringify(value)}"' for name, value in fields.items()]
    else:
        pairs = [f"{name}={_stringify(value)}" for name, value in fields.items()]
    text = "; ".join(pairs)
    if terminate and pairs:
        text += ";"
    return text


def decode(text: Any, key: str) -> str:
    """Return the first quoted value stored under ``key``, or ``""``."""
    if not isinstance(text, str):
        return ""
    # Key must start the text or follow a separator, so "a" never matches "ba".
    match = re.search(r"(?<![^\s;])" + re.escape(key) + r'="([^"]*)"', text)
    if match:
        return match.group(1)
    return ""


def parse_pairs(text: Any) -> dict[str, str]:
    """Parse bare ``key=value;`` pairs into a mapping.

    Segments without an ``=`` after a non-empty key are ignored. Later
    duplicates win.
    """
    result: dict[str, str] = {}
    if not text or not isinstance(text, str):
        return result
    for pair in text.split(";"):
        trimmed = pair.strip()
        eq_index = trimmed.find("=")
        if eq_index > 0:
            result[trimmed[:eq_index].strip()] = trimmed[eq_index + 1 :].strip()
    return result


def _trim_trailing_blanks(lines: list[str]) -> list[str]:
    while lines and lines[-1].strip() == "":
        lines.pop()
    return lines


def join_lines(lines: Iterable[Any]) -> str:
    """Escape a sequence of lines into one cell value.

    Inner blank lines are kept, trailing blank lines are dropped. Real line
    breaks inside a line are escaped as well.
    """
    collected = [_stringify(line).replace("\r", "") for line in lines]
    collected = _trim_trailing_blanks(collected)
    return LINE_ESCAPE.join(line.replace("\n", LINE_ESCAPE) for line in collected)


def split_lines(value: Any) -> list[str]:
    """Split an escaped cell value back into lines, dropping trailing blanks."""
    if not isinstance(value, str) or value == "":
        return []
    return _trim_trailing_blanks(value.split(LINE_ESCAPE))


def split_label(line: str) -> tuple[str, str] | None:
    """Split ``Label: value`` on the first colon, both sides trimmed."""
    colon_index = line.find(":")
    if colon_index == -1:
        return None
    return line[:colon_index].strip(), line[colon_index + 1 :].strip()
