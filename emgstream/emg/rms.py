"""Sliding-window RMS computation over incoming samples."""

import logging
import threading
from collections import deque
from typing import List, Optional, Sequence

import numpy as np

from ..models.samples import RMSEntry, Sample

logger = logging.getLogger(__name__)


def compute_rms(values: Sequence[float]) -> float:
    """Return sqrt(mean(value^2)) of the given values.

    Raises:
        ValueError: If values is empty
    """
    data = np.asarray(values, dtype=np.float64)
    if data.size == 0:
        raise ValueError("Cannot compute RMS of an empty window")
    return float(np.sqrt(np.mean(np.square(data))))


class RMSWindower:
    """Maintains a sliding window of recent samples and a bounded RMS history."""

    def __init__(self, window_size: int = 50, history_capacity: int = 200):
        """Initialize windower.

        Args:
            window_size: Number of most recent samples the RMS is computed over
            history_capacity: Maximum number of RMS entries kept
        """
        if window_size <= 0:
            raise ValueError(f"window_size must be positive, got {window_size}")
        if history_capacity <= 0:
            raise ValueError(f"history_capacity must be positive, got {history_capacity}")

        self.window_size = window_size
        self.history_capacity = history_capacity

        self.window = deque(maxlen=window_size)
        self.history_entries = deque(maxlen=history_capacity)
        self.last_sequence: Optional[int] = None
        self.lock = threading.Lock()

        logger.info(f"RMSWindower initialized: window={window_size}, "
                    f"history={history_capacity}")

    def update(self, buffer_tail: Sequence[Sample]) -> Optional[RMSEntry]:
        """Consume new samples from the buffer tail and emit an RMS entry.

        Samples already consumed (by sequence number) are skipped, so the
        caller may pass an overlapping tail on every call.

        Returns:
            The new RMS entry, or None if nothing new was consumed
        """
        new_samples = [s for s in buffer_tail
                       if self.last_sequence is None or s.sequence > self.last_sequence]
        if not new_samples:
            return None

        with self.lock:
            for sample in new_samples:
                self.window.append(sample.value)
            self.last_sequence = new_samples[-1].sequence

            entry = RMSEntry(rms=compute_rms(self.window), sequence=self.last_sequence)
            self.history_entries.append(entry)

        return entry

    def history(self) -> List[RMSEntry]:
        """Return a copy of the RMS history, oldest first."""
        with self.lock:
            return list(self.history_entries)

    def rms_values(self) -> List[float]:
        """Return the RMS history as plain floats."""
        return [entry.rms for entry in self.history()]

    def current_rms(self) -> float:
        """Most recent RMS value, or 0.0 before any sample arrived."""
        with self.lock:
            return self.history_entries[-1].rms if self.history_entries else 0.0

    def reset(self) -> None:
        """Drop the window and history."""
        with self.lock:
            self.window.clear()
            self.history_entries.clear()
            self.last_sequence = None
            logger.debug("RMS windower reset")
