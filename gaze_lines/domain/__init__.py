"""Domain models for reading sessions and derived detector events."""

from .dataset import (
    GazeSample,
    LastKnown,
    LineExtremum,
    ReadingContext,
    Recording,
    SampleType,
)
from .events import (
    LineDetectionResult,
    LineSegment,
    RejectionReason,
    SpikeDetectionResult,
    SpikeInterval,
    SweepRejection,
    ValidatedSweep,
)

__all__ = [
    "GazeSample",
    "LastKnown",
    "LineExtremum",
    "ReadingContext",
    "Recording",
    "SampleType",
    "LineDetectionResult",
    "LineSegment",
    "RejectionReason",
    "SpikeDetectionResult",
    "SpikeInterval",
    "SweepRejection",
    "ValidatedSweep",
]
