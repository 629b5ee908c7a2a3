"""Sample-related data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Sample:
    """A single raw sensor reading."""
    value: float
    sequence: int
    timestamp: float  # Monotonic clock reading at ingest


@dataclass(frozen=True)
class RMSEntry:
    """Root-mean-square value of one completed window."""
    rms: float
    sequence: int  # Sequence number of the sample that completed the window
