"""Derived events produced by the spike and line detectors."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

import numpy as np


@dataclass
class SpikeInterval:
    """Contiguous (possibly merged) run of samples above the robust threshold.

    ``start_index`` and ``end_index`` are inclusive indices into the series
    handed to the detector.
    """

    start_index: int
    end_index: int
    start_ms: float
    end_ms: float
    peak_abs_value: float

    @property
    def duration_ms(self) -> float:
        return self.end_ms - self.start_ms

    @property
    def sample_count(self) -> int:
        return self.end_index - self.start_index + 1


@dataclass
class SpikeDetectionResult:
    """Threshold, merged intervals and per-sample flags of one detector run."""

    threshold: float
    intervals: List[SpikeInterval]
    mask: np.ndarray


@dataclass
class ValidatedSweep:
    """A spike interval accepted as a genuine return sweep.

    ``line_number`` is the running line counter after acceptance (the first
    accepted sweep moves the reader to line 2).
    """

    interval: SpikeInterval
    line_number: int
    displacement_px: float

    @property
    def start_index(self) -> int:
        return self.interval.start_index

    @property
    def end_index(self) -> int:
        return self.interval.end_index

    @property
    def start_ms(self) -> float:
        return self.interval.start_ms

    @property
    def end_ms(self) -> float:
        return self.interval.end_ms


class RejectionReason(str, Enum):
    """Why a sweep candidate was dropped."""

    DISPLACEMENT = "displacement"
    TEMPORAL_GAP = "temporal_gap"
    LINE_CONTEXT = "line_context"


@dataclass
class SweepRejection:
    interval: SpikeInterval
    reason: RejectionReason
    detail: str = ""


@dataclass
class LineSegment:
    """Contiguous samples assigned to one reading line (inclusive indices)."""

    line_index: int
    start_index: int
    end_index: int
    start_ms: float
    end_ms: float

    @property
    def sample_count(self) -> int:
        return self.end_index - self.start_index + 1


@dataclass
class LineDetectionResult:
    """Outcome of a line detection run over one session."""

    threshold: float = float("nan")
    candidates: List[SpikeInterval] = field(default_factory=list)
    sweeps: List[ValidatedSweep] = field(default_factory=list)
    segments: List[LineSegment] = field(default_factory=list)
    rejections: List[SweepRejection] = field(default_factory=list)
    sufficient_data: bool = True

    @property
    def line_count(self) -> int:
        """Number of lines read: accepted sweeps + 1, or 0 without data."""
        if not self.sufficient_data:
            return 0
        return len(self.sweeps) + 1

    @classmethod
    def insufficient(cls) -> "LineDetectionResult":
        return cls(sufficient_data=False)
