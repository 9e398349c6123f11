"""Live (per-frame) session processor.

The processor owns the sample buffer of one reading session. Each appended
sample triggers gap fill-in, smoothing and velocity only over the tail the
new sample can influence:

  - gap fill-in from just after the previous valid sample (a pending gap
    gets resolved once a valid sample arrives), otherwise the new sample only
  - smoothing from ``kernel radius`` samples before that point
  - velocity and sample type from the first re-smoothed sample

so the buffer always equals what the batch pipeline produces for the same
input sequence.
"""
from __future__ import annotations

import logging
import math
from os import PathLike
from typing import Any, Iterable, List, Optional, Tuple, Union

import pandas as pd

from .config import GazeLineConfig
from .domain.dataset import GazeSample, ReadingContext
from .domain.events import LineDetectionResult
from .io.io import samples_to_dataframe, write_gaze_csv
from .preprocessing.gap_fill import copy_raw_positions, interpolate_gaps, is_missing, previous_valid_index
from .preprocessing.ingestion import SampleIngestor, normalize_frame
from .preprocessing.noise_reduction import get_smoothing_strategy
from .preprocessing.velocity import classify_sample_types, compute_velocity
from .processing.line_detector import detect_lines
from .processing.realtime import detect_realtime_return_sweep

logger = logging.getLogger(__name__)


class StreamingGazeProcessor:
    """Exclusive owner of one session's state.

    Lifecycle: create -> process_frame / process_sample ... -> reset.
    Not thread-safe; one processor per session.
    """

    def __init__(self, config: Optional[GazeLineConfig] = None) -> None:
        self.config = config or GazeLineConfig()
        self._strategy = get_smoothing_strategy(self.config.preprocess)
        self._ingestor = SampleIngestor()
        self._samples: List[GazeSample] = []
        self.last_detection: Optional[LineDetectionResult] = None

    @property
    def samples(self) -> List[GazeSample]:
        return self._samples

    def __len__(self) -> int:
        return len(self._samples)

    def set_context(
        self,
        line_index: Optional[int] = None,
        target_y: Optional[float] = None,
        char_index: Optional[int] = None,
    ) -> None:
        """Update the sticky reading context; omitted fields keep their value."""
        self._ingestor.set_context(
            ReadingContext(line_index=line_index, target_y=target_y, char_index=char_index)
        )

    def process_frame(self, frame: Any) -> Optional[GazeSample]:
        """Append one SDK frame (mapping or object). Returns the stored sample."""
        sample = self._ingestor.ingest_frame(normalize_frame(frame))
        return self._append(sample)

    def process_frames(self, frames: Iterable[Any]) -> List[GazeSample]:
        for frame in frames:
            self.process_frame(frame)
        return self._samples

    def process_sample(
        self,
        timestamp: float,
        x: Optional[float],
        y: Optional[float],
        line_index: Optional[int] = None,
        char_index: Optional[int] = None,
        target_y: Optional[float] = None,
        sdk_state: Optional[int] = None,
    ) -> Optional[GazeSample]:
        """Append one sample given as plain values. Returns the stored sample."""
        sample = self._ingestor.ingest(
            timestamp,
            x,
            y,
            line_index=line_index,
            char_index=char_index,
            target_y=target_y,
            sdk_state=sdk_state,
        )
        return self._append(sample)

    def _append(self, sample: Optional[GazeSample]) -> Optional[GazeSample]:
        if sample is None:
            return None
        self._samples.append(sample)
        self._update_tail()
        return sample

    def _update_tail(self) -> None:
        samples = self._samples
        cfg = self.config.preprocess
        newest = len(samples) - 1

        if not cfg.gap_fill_enabled:
            fill_start = newest
            copy_raw_positions(samples, fill_start)
        else:
            fill_start = newest
            if not is_missing(samples[newest], cfg.treat_origin_as_missing):
                prev_valid = previous_valid_index(samples, newest - 1, cfg.treat_origin_as_missing)
                fill_start = 0 if prev_valid is None else prev_valid + 1
            interpolate_gaps(samples, fill_start, treat_origin_as_missing=cfg.treat_origin_as_missing)

        smooth_start = max(0, fill_start - self._strategy.radius)
        self._strategy.smooth(samples, smooth_start)
        compute_velocity(samples, smooth_start)
        classify_sample_types(samples, cfg, smooth_start)

    def detect_lines(self, start_ms: float = 0.0, end_ms: float = math.inf) -> LineDetectionResult:
        """Run line detection over the buffered session (or a time range of it)."""
        self.last_detection = detect_lines(self._samples, self.config.line_detector, start_ms, end_ms)
        return self.last_detection

    def detect_realtime_return_sweep(self, lookback_ms: Optional[float] = None) -> bool:
        return detect_realtime_return_sweep(self._samples, self.config.realtime, lookback_ms)

    def char_index_time_range(self) -> Tuple[float, float]:
        """First and last ``t`` carrying a char index; (0, inf) when none does."""
        times = [s.t for s in self._samples if s.char_index is not None]
        if not times:
            return 0.0, math.inf
        return times[0], times[-1]

    def to_dataframe(self) -> pd.DataFrame:
        return samples_to_dataframe(self._samples)

    def export_csv(
        self,
        path: Union[str, PathLike],
        start_ms: float = 0.0,
        end_ms: float = math.inf,
    ) -> LineDetectionResult:
        """Run line detection, then write the samples inside [start_ms, end_ms] in the interchange format."""
        result = self.detect_lines(start_ms, end_ms)
        rows = [s for s in self._samples if start_ms <= s.t <= end_ms]
        write_gaze_csv(rows, path)
        logger.info("Exported %s of %s samples to %s", len(rows), len(self._samples), path)
        return result

    def reset(self) -> None:
        """Drop the buffer, the session anchor and the reading context."""
        self._ingestor.reset()
        self._samples = []
        self.last_detection = None
