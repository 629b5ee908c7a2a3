"""Recording sessions and CSV export."""

from .session import RecordingSession
from .csv_export import ExportPrecision, serialize_records, parse_export, header_only

__all__ = [
    'RecordingSession',
    'ExportPrecision',
    'serialize_records',
    'parse_export',
    'header_only'
]
