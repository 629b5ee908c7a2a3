"""Recording session data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .samples import Sample


class RecordingState(Enum):
    """Lifecycle state of a recording session."""
    IDLE = "idle"
    RECORDING = "recording"
    STOPPED = "stopped"


@dataclass(frozen=True)
class CaptureRecord:
    """A sample captured during a recording, with the RMS value at capture time."""
    elapsed: float  # Seconds since the recording started
    sample: Sample
    rms: float


@dataclass(frozen=True)
class ExportRow:
    """One data row read back from an export payload."""
    timestamp: float
    raw: float
    rms: float


@dataclass
class SessionInfo:
    """Information about a saved recording session."""
    session_id: str
    start_time: datetime
    duration_seconds: float
    export_file: str
    file_size_bytes: int
    record_count: int
