"""Services layer for EmgStream application logic."""

from .stream_service import EmgStreamService

__all__ = [
    "EmgStreamService"
]
