"""EMG sample buffering, RMS windowing and sample publishing."""

from .buffer import SampleBuffer
from .rms import RMSWindower, compute_rms
from .sample_pub import SamplePublisher

__all__ = [
    'SampleBuffer',
    'RMSWindower',
    'compute_rms',
    'SamplePublisher'
]
