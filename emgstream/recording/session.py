"""Recording session state machine."""

import time
import logging
import threading
from typing import Callable, List, Optional, Tuple

from ..models.samples import Sample
from ..models.session import CaptureRecord, RecordingState

logger = logging.getLogger(__name__)


class RecordingSession:
    """Captures (sample, rms) pairs between ``start`` and ``stop``.

    States move IDLE -> RECORDING -> STOPPED -> RECORDING ... Every transition
    and every capture runs under one lock, so the records returned by ``stop``
    are exactly those captured before it.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """Initialize an idle session.

        Args:
            clock: Monotonic clock, must be the one samples are stamped with
        """
        self.clock = clock
        self.state = RecordingState.IDLE
        self.started_at: Optional[float] = None
        self.stopped_at: Optional[float] = None
        self._records: List[CaptureRecord] = []
        self._last_records: Tuple[CaptureRecord, ...] = ()
        self.lock = threading.Lock()

    @property
    def is_recording(self) -> bool:
        return self.state is RecordingState.RECORDING

    def start(self) -> bool:
        """Start a new recording.

        Returns:
            True if a recording was started, False if one was already running
        """
        with self.lock:
            if self.state is RecordingState.RECORDING:
                logger.debug("start() while recording ignored")
                return False

            self._records = []
            self.started_at = self.clock()
            self.stopped_at = None
            self.state = RecordingState.RECORDING

        logger.info("Recording started")
        return True

    def capture(self, sample: Sample, rms: float) -> bool:
        """Append a record if recording.

        Returns:
            True if the record was captured
        """
        with self.lock:
            if self.state is not RecordingState.RECORDING:
                return False
            elapsed = max(0.0, sample.timestamp - self.started_at)
            self._records.append(CaptureRecord(elapsed=elapsed, sample=sample, rms=rms))
        return True

    def stop(self) -> Tuple[CaptureRecord, ...]:
        """Stop recording and return the finalized records.

        Stopping while not recording changes nothing and returns an empty tuple.
        """
        with self.lock:
            if self.state is not RecordingState.RECORDING:
                logger.debug(f"stop() in state {self.state.value} ignored")
                return ()

            self._last_records = tuple(self._records)
            self._records = []
            self.stopped_at = self.clock()
            self.state = RecordingState.STOPPED
            records = self._last_records

        logger.info(f"Recording stopped with {len(records)} records")
        return records

    def records(self) -> Tuple[CaptureRecord, ...]:
        """Records of the running recording, or of the last stopped one."""
        with self.lock:
            if self.state is RecordingState.RECORDING:
                return tuple(self._records)
            return self._last_records

    @property
    def last_records(self) -> Tuple[CaptureRecord, ...]:
        """Finalized records of the most recently stopped recording."""
        with self.lock:
            return self._last_records

    def duration_seconds(self) -> float:
        """Elapsed time of the running recording, or length of the last one."""
        with self.lock:
            if self.started_at is None:
                return 0.0
            end = self.stopped_at if self.stopped_at is not None else self.clock()
            return end - self.started_at
