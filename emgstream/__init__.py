"""EmgStream - live EMG sample buffering, RMS windowing and recording export."""

__version__ = "0.1.0"
