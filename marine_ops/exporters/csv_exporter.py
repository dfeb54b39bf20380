"""
CSV rendering for flattened export rows.

The output follows RFC 4180 quoting: a field is quoted only when it
contains a comma, a double quote, or a newline, and embedded quotes are
doubled.  ``None`` renders as an empty field.  Rows are separated by
``\\n`` with no trailing separator, and an empty row list renders as an
empty string (not a header-only file).
"""

from __future__ import annotations

import datetime
import re
from collections.abc import Mapping, Sequence
from typing import Any

_NEEDS_QUOTING = (",", '"', "\n")


def format_value(value: Any) -> str:
    """Render one scalar as CSV text (before escaping)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return str(value)


def escape_field(text: str) -> str:
    """Quote ``text`` if it contains a comma, a double quote, or a newline."""
    if any(ch in text for ch in _NEEDS_QUOTING):
        return '"' + text.replace('"', '""') + '"'
    return text


def generate_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    """Serialise rows to CSV text.

    The keys of the first row are the header, in insertion order; every row
    is rendered in that order and missing keys render as empty fields.

    Args:
        rows: Flattened export rows.

    Returns:
        CSV text, or ``""`` when ``rows`` is empty.
    """
    if not rows:
        return ""

    headers = list(rows[0].keys())
    lines = [",".join(escape_field(h) for h in headers)]
    for row in rows:
        lines.append(
            ",".join(escape_field(format_value(row.get(h))) for h in headers)
        )
    return "\n".join(lines)


def sanitize_scope(name: str | None, fallback: str) -> str:
    """Replace every non-alphanumeric character with ``_``.

    Returns ``fallback`` when ``name`` is empty or missing.
    """
    if not name:
        return fallback
    return re.sub(r"[^a-zA-Z0-9]", "_", name)


def make_export_filename(
    scope: str,
    today: datetime.date,
    include_financial: bool | None = None,
) -> str:
    """Build ``vessel_data_<scope>_<yyyy-mm-dd>[_full|_operational].csv``.

    Args:
        scope: ``all_vessels``, a sanitised vessel name, or ``<N>_vessels``.
        today: Export date.
        include_financial: ``True`` appends ``_full``, ``False`` appends
            ``_operational``, ``None`` appends nothing.
    """
    suffix = ""
    if include_financial is not None:
        suffix = "_full" if include_financial else "_operational"
    return f"vessel_data_{scope}_{today.isoformat()}{suffix}.csv"
