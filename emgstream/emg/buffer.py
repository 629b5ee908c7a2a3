"""Bounded ring buffer of raw EMG samples."""

import math
import time
import logging
import threading
from collections import deque
from typing import Callable, List, Optional

from ..exceptions import InvalidSampleError
from ..models.samples import Sample

logger = logging.getLogger(__name__)

REJECT = "reject"
CLAMP = "clamp"


class SampleBuffer:
    """Fixed-capacity sample store that evicts its oldest samples on overflow.

    A single writer appends; any number of readers take copies through
    ``snapshot``. The lock only covers the append/evict step and the copy.
    """

    def __init__(self,
                 capacity: int,
                 value_min: Optional[float] = None,
                 value_max: Optional[float] = None,
                 invalid_policy: str = REJECT,
                 clock: Callable[[], float] = time.monotonic):
        """Initialize sample buffer.

        Args:
            capacity: Maximum number of samples kept
            value_min: Lowest accepted value, None for unbounded
            value_max: Highest accepted value, None for unbounded
            invalid_policy: "reject" drops out-of-range values, "clamp" pins
                           them to the range. Non-finite values are always rejected.
            clock: Monotonic clock used to timestamp samples
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        if invalid_policy not in (REJECT, CLAMP):
            raise ValueError(f"Unknown invalid sample policy: {invalid_policy}")
        if value_min is not None and value_max is not None and value_min > value_max:
            raise ValueError(f"value_min {value_min} is greater than value_max {value_max}")

        self.capacity = capacity
        self.value_min = value_min
        self.value_max = value_max
        self.invalid_policy = invalid_policy
        self.clock = clock

        self.buffer = deque(maxlen=capacity)
        self.lock = threading.Lock()
        self.next_sequence = 0
        self.evicted_count = 0

        logger.info(f"SampleBuffer initialized: capacity={capacity}, "
                    f"range=({value_min}, {value_max}), policy={invalid_policy}")

    def _validate(self, value: float) -> float:
        """Apply the invalid sample policy and return the value to store."""
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise InvalidSampleError(value, "not a number")

        if not math.isfinite(value):
            raise InvalidSampleError(value, "non-finite")

        below = self.value_min is not None and value < self.value_min
        above = self.value_max is not None and value > self.value_max
        if not (below or above):
            return value

        if self.invalid_policy == CLAMP:
            return self.value_min if below else self.value_max

        raise InvalidSampleError(
            value, f"outside sensor range [{self.value_min}, {self.value_max}]")

    def append(self, value: float) -> Sample:
        """Append a raw value and return the stored sample.

        Raises:
            InvalidSampleError: If the value is rejected; the buffer is unchanged.
        """
        value = self._validate(value)
        timestamp = self.clock()

        with self.lock:
            sample = Sample(value=value, sequence=self.next_sequence, timestamp=timestamp)
            self.next_sequence += 1
            if len(self.buffer) == self.capacity:
                self.evicted_count += 1
            # deque(maxlen) drops the head on overflow
            self.buffer.append(sample)

        return sample

    def snapshot(self, last_n: Optional[int] = None) -> List[Sample]:
        """Return a copy of the buffered samples, oldest first.

        Args:
            last_n: Only return the newest ``last_n`` samples
        """
        with self.lock:
            samples = list(self.buffer)

        if last_n is None:
            return samples
        if last_n <= 0:
            return []
        return samples[-last_n:]

    def values(self, last_n: Optional[int] = None) -> List[float]:
        """Return buffered raw values, oldest first."""
        return [sample.value for sample in self.snapshot(last_n)]

    def __len__(self) -> int:
        with self.lock:
            return len(self.buffer)

    def get_buffer_stats(self) -> dict:
        """Get buffer statistics."""
        with self.lock:
            oldest = self.buffer[0] if self.buffer else None
            newest = self.buffer[-1] if self.buffer else None

            return {
                "sample_count": len(self.buffer),
                "capacity": self.capacity,
                "total_appended": self.next_sequence,
                "evicted_count": self.evicted_count,
                "oldest_sequence": oldest.sequence if oldest else None,
                "newest_sequence": newest.sequence if newest else None,
                "span_seconds": (newest.timestamp - oldest.timestamp) if oldest else 0.0,
            }

    def clear(self) -> None:
        """Clear the buffer. Sequence numbering continues."""
        with self.lock:
            self.buffer.clear()
            logger.debug("Sample buffer cleared")
