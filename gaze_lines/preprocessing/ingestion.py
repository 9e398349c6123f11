# gaze_lines/preprocessing/ingestion.py
"""Sample ingestion: turns raw tracker frames into canonical GazeSamples."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..domain.dataset import GazeSample, LastKnown, ReadingContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawFrame:
    """Canonical raw frame: absolute timestamp (ms) and screen position."""

    timestamp: float
    x: Optional[float]
    y: Optional[float]
    sdk_state: Optional[int] = None


def to_optional_float(value: Any) -> Optional[float]:
    """
    Parse a coordinate robustly.

    - None, NaN, +/-inf, "" and "null" -> None
    - numeric strings (also with decimal comma) -> float
    - numbers -> float
    """
    if value is None:
        return None
    if isinstance(value, str):
        cleaned = value.strip().replace(",", ".")
        if cleaned == "" or cleaned.lower() in ("null", "nan", "none", "undefined"):
            return None
        try:
            value = float(cleaned)
        except ValueError:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def to_optional_int(value: Any) -> Optional[int]:
    number = to_optional_float(value)
    if number is None:
        return None
    return int(number)


def normalize_frame(frame: Any) -> RawFrame:
    """
    Adapter from the tracking SDK frame to a RawFrame.

    The SDK delivers either a mapping or an object exposing ``timestamp``,
    ``x``, ``y`` and optionally ``eyemovementState``. This is the only place
    that knows about the SDK shape.
    """
    if isinstance(frame, Mapping):
        timestamp = frame["timestamp"]
        x = frame.get("x")
        y = frame.get("y")
        state = frame.get("eyemovementState")
    else:
        timestamp = frame.timestamp
        x = getattr(frame, "x", None)
        y = getattr(frame, "y", None)
        state = getattr(frame, "eyemovementState", None)

    ts = to_optional_float(timestamp)
    return RawFrame(
        timestamp=ts if ts is not None else math.nan,
        x=to_optional_float(x),
        y=to_optional_float(y),
        sdk_state=to_optional_int(state),
    )


class SampleIngestor:
    """Creates GazeSamples with session-relative timestamps.

    Holds the first raw timestamp of the session and the sticky reading
    context. Line index, char index and target y supplied with a sample (or
    through ``set_context``) become the last known value; samples without
    them inherit the last known value.
    """

    def __init__(self) -> None:
        self.first_timestamp: Optional[float] = None
        self._last_t: Optional[float] = None
        self._line_index: LastKnown[int] = LastKnown()
        self._char_index: LastKnown[int] = LastKnown()
        self._target_y: LastKnown[float] = LastKnown()

    @property
    def line_index(self) -> Optional[int]:
        return self._line_index.value

    def set_context(self, context: ReadingContext) -> None:
        self._line_index.update(context.line_index)
        self._char_index.update(context.char_index)
        self._target_y.update(context.target_y)

    def ingest(
        self,
        timestamp: float,
        x: Optional[float],
        y: Optional[float],
        line_index: Optional[int] = None,
        char_index: Optional[int] = None,
        target_y: Optional[float] = None,
        sdk_state: Optional[int] = None,
    ) -> Optional[GazeSample]:
        """Return the normalized sample, or None for a frame without a usable timestamp."""
        if timestamp is None or not math.isfinite(timestamp):
            logger.warning("Dropping frame without a finite timestamp: %r", timestamp)
            return None

        if self.first_timestamp is None:
            self.first_timestamp = timestamp
        t = timestamp - self.first_timestamp

        if self._last_t is not None and t < self._last_t:
            logger.warning("Non-monotonic timestamp: t=%.3f after t=%.3f", t, self._last_t)
        self._last_t = t

        return GazeSample(
            t=t,
            x=to_optional_float(x),
            y=to_optional_float(y),
            line_index=self._line_index.update(line_index),
            char_index=self._char_index.update(char_index),
            target_y=self._target_y.update(target_y),
            sdk_state=sdk_state,
        )

    def ingest_frame(self, frame: RawFrame) -> Optional[GazeSample]:
        return self.ingest(frame.timestamp, frame.x, frame.y, sdk_state=frame.sdk_state)

    def reset(self) -> None:
        self.first_timestamp = None
        self._last_t = None
        self._line_index.clear()
        self._char_index.clear()
        self._target_y.clear()
