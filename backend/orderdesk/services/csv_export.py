"""
OrderDesk Backend - CSV Serialization
=====================================

What:  Renders query rows as CSV text with formula-injection-safe cells.

Cell rules:
    1. Text form of the value (None → "").
    2. If the text starts with "=", "-", "+" or "@", prefix "'" so spreadsheet
       applications do not evaluate it as a formula.
    3. Wrap in double quotes, doubling embedded double quotes.

Document rules:
    - Header line: keys of the first row, in order, joined by "," (unquoted).
    - Every row is rendered against the header keys.
    - Lines joined by "\n"; no trailing newline.

Rows are assumed to share the first row's field set; a row with a missing
key renders that cell empty.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Iterable, List, Mapping, Sequence

FORMULA_PREFIXES = ("=", "-", "+", "@")
NEUTRALIZER = "'"


def render_value(value: Any) -> str:
    """
    Text form of one database value.

    Matches the JSON rendering a REST client would have received: booleans
    lowercase, temporal values ISO 8601, decimals and UUIDs via str().
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def sanitize_cell(value: Any) -> str:
    text = render_value(value)
    if text.startswith(FORMULA_PREFIXES):
        text = NEUTRALIZER + text
    return '"' + text.replace('"', '""') + '"'


def build_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    if not rows:
        return ""
    header: List[str] = list(rows[0].keys())
    lines = [",".join(header)]
    lines.extend(_render_row(row, header) for row in rows)
    return "\n".join(lines)


def _render_row(row: Mapping[str, Any], header: Iterable[str]) -> str:
    return ",".join(sanitize_cell(row.get(key)) for key in header)


def export_filename(customer_id: str, generated_at: datetime) -> str:
    """orders_<customerId>_<YYYY-MM-DD>.csv, dated in UTC."""
    if generated_at.tzinfo is not None:
        generated_at = generated_at.astimezone(timezone.utc)
    return f"orders_{customer_id}_{generated_at.date().isoformat()}.csv"
