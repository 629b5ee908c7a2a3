"""Exception types raised by the EmgStream core."""


class EmgStreamError(Exception):
    """Base class for all EmgStream errors."""


class InvalidSampleError(EmgStreamError, ValueError):
    """Raised when an ingested value is non-finite or outside the sensor range."""

    def __init__(self, value: float, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid sample {value!r}: {reason}")


class EmptyExportError(EmgStreamError):
    """Raised by strict serialization when a session captured no records."""
