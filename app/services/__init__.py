"""
app/services package marker.
"""

from app.services.export_service import to_csv, to_dataframe, to_json, to_json_records

__all__ = [
    "to_dataframe",
    "to_csv",
    "to_json",
    "to_json_records",
]
