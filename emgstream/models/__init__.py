"""Data models for the EmgStream application."""

from .samples import Sample, RMSEntry
from .session import RecordingState, CaptureRecord, ExportRow, SessionInfo
from .events import SessionEvent

__all__ = [
    "Sample",
    "RMSEntry",
    "RecordingState",
    "CaptureRecord",
    "ExportRow",
    "SessionInfo",
    "SessionEvent",
]
