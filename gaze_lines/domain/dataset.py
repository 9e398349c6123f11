"""Data structures representing recorded reading sessions.

The classes in this module carry only data and minimal helpers; the
preprocessing and processing modules implement the behaviour. A
``GazeSample`` is created once per tracker frame (or CSV row) and mutated in
place as each pipeline stage adds its derived fields.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from .events import LineDetectionResult

T = TypeVar("T")


class SampleType(str, Enum):
    """Eye movement classification of a single sample."""

    FIXATION = "Fixation"
    SACCADE = "Saccade"
    UNKNOWN = "Unknown"


class LineExtremum(str, Enum):
    """Markers placed on the first and last sample of a detected line."""

    LINE_START = "LineStart"
    POS_MAX = "PosMax"


@dataclass
class LastKnown(Generic[T]):
    """Carry-forward holder for sticky context values.

    ``update`` with a value stores it; ``update`` with ``None`` leaves the
    previous value in place. ``value`` is ``None`` until something was seen.
    """

    value: Optional[T] = None

    def update(self, candidate: Optional[T]) -> Optional[T]:
        if candidate is not None:
            self.value = candidate
        return self.value

    def clear(self) -> None:
        self.value = None


@dataclass
class ReadingContext:
    """Reading-context update pushed by the text collaborator."""

    line_index: Optional[int] = None
    target_y: Optional[float] = None
    char_index: Optional[int] = None


@dataclass
class GazeSample:
    """Single gaze observation, relative to the first sample of its session."""

    t: float
    x: Optional[float]
    y: Optional[float]

    # Gap-filled positions. Raw x / y are never overwritten.
    fx: Optional[float] = None
    fy: Optional[float] = None

    # Smoothed positions and velocity (px/ms)
    gx: Optional[float] = None
    gy: Optional[float] = None
    vx: Optional[float] = None
    vy: Optional[float] = None

    # Content-side context (carried forward at ingestion)
    line_index: Optional[int] = None
    char_index: Optional[int] = None
    target_y: Optional[float] = None

    sdk_state: Optional[int] = None
    type: SampleType = SampleType.UNKNOWN

    # Line detector output
    detected_line_index: Optional[int] = None
    is_return_sweep: bool = False
    extrema: Optional[LineExtremum] = None

    def has_raw_position(self) -> bool:
        return _finite(self.x) and _finite(self.y)

    def has_filled_position(self) -> bool:
        return _finite(self.fx) and _finite(self.fy)

    def has_smoothed_position(self) -> bool:
        return _finite(self.gx) and _finite(self.gy)

    def clear_detection(self) -> None:
        self.detected_line_index = None
        self.is_return_sweep = False
        self.extrema = None


@dataclass
class Recording:
    """One reading session (paragraph) comprised of samples in arrival order."""

    id: str
    samples: List[GazeSample] = field(default_factory=list)
    source_path: Optional[str] = None
    # Set by the line detection stage
    line_detection: Optional[LineDetectionResult] = None

    @property
    def start_ms(self) -> float:
        return self.samples[0].t if self.samples else 0.0

    @property
    def end_ms(self) -> float:
        return self.samples[-1].t if self.samples else 0.0

    def __len__(self) -> int:
        return len(self.samples)


def _finite(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)
