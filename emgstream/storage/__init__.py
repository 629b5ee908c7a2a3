"""On-disk storage of exported recordings."""

from .file_manager import FileManager

__all__ = ["FileManager"]
