"""
app/services/export_service.py

Tabular export of report results.

Every report is already flat (one scalar per column), so export is a
straight column-ordered projection:

    to_dataframe      pandas DataFrame, columns in report order
    to_csv            delimited text (header row + one line per report row)
    to_json_records   list of JSON-safe dicts

The DataFrame uses object dtype so Decimal values stay exact and integer
columns holding NULLs are not coerced to float. Decimals are written
as their string form; dates are written in ISO-8601.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any

import pandas as pd

from reports.base import ReportResult


def _json_safe(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def to_dataframe(result: ReportResult) -> pd.DataFrame:
    """Return *result* as a DataFrame with the report's columns in order."""
    return pd.DataFrame(
        [row.to_dict() for row in result.rows],
        columns=list(result.columns),
        dtype=object,
    )


def to_csv(result: ReportResult, sep: str = ",") -> str:
    """Render *result* as delimited text; NULLs become empty fields."""
    frame = to_dataframe(result).map(_json_safe)
    return frame.to_csv(index=False, sep=sep)


def to_json_records(result: ReportResult) -> list[dict[str, Any]]:
    """Return *result* rows as JSON-serialisable dicts."""
    return [
        {column: _json_safe(row[column]) for column in result.columns}
        for row in result.rows
    ]


def to_json(result: ReportResult) -> str:
    payload = {
        "report": result.name,
        "title": result.title,
        "generated_at": result.generated_at.isoformat(),
        "columns": list(result.columns),
        "rows": to_json_records(result),
        "diagnostics": result.diagnostics,
    }
    return json.dumps(payload, sort_keys=False)
