# gaze_lines/processing/line_detector.py
"""
Return-sweep validation and per-line segmentation.

Pipeline over the preprocessed samples of one session:

    1. restrict to the requested time range
    2. leftward-only horizontal velocity (positive vx -> 0)
    3. MAD spike detection -> candidate intervals
    4. displacement check -> candidates
    5. temporal gate, then line-context gate -> validated sweeps
    6. label the samples between sweeps with line indices

Reading produces a steady stream of small rightward velocities; zeroing them
keeps the robust statistics at "silence" so the large leftward return
sweeps stand out.
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from ..config import LineDetectorConfig
from ..domain.dataset import GazeSample, LineExtremum
from ..domain.events import (
    LineDetectionResult,
    LineSegment,
    RejectionReason,
    SpikeInterval,
    SweepRejection,
    ValidatedSweep,
)
from .spike_detector import SpikeDetector

logger = logging.getLogger(__name__)


def negative_velocity_series(samples: Sequence[GazeSample]) -> np.ndarray:
    """vx where it is negative, 0 elsewhere (including missing velocity)."""
    vx = np.array([s.vx if s.vx is not None else 0.0 for s in samples], dtype=float)
    return np.where(vx < 0, vx, 0.0)


def sweep_displacement(samples: Sequence[GazeSample], interval: SpikeInterval) -> float:
    """Net leftward travel ``gx[start] - gx[end]``; NaN without smoothed x."""
    start_x = samples[interval.start_index].gx
    end_x = samples[interval.end_index].gx
    if start_x is None or end_x is None:
        return float("nan")
    return start_x - end_x


def select_candidates(
    samples: Sequence[GazeSample],
    intervals: Sequence[SpikeInterval],
    min_displacement_px: float,
) -> tuple[List[SpikeInterval], List[SweepRejection]]:
    """Keep intervals travelling at least ``min_displacement_px`` leftward, sorted by start."""
    candidates: List[SpikeInterval] = []
    rejections: List[SweepRejection] = []
    for interval in intervals:
        displacement = sweep_displacement(samples, interval)
        if not displacement >= min_displacement_px:
            rejections.append(
                SweepRejection(
                    interval,
                    RejectionReason.DISPLACEMENT,
                    f"displacement={displacement:.1f}px < {min_displacement_px}px",
                )
            )
            logger.debug(
                "[Reject Sweep] Displacement %.1fpx < %.1fpx at t=%.1f",
                displacement, min_displacement_px, interval.start_ms,
            )
            continue
        candidates.append(interval)
    candidates.sort(key=lambda it: it.start_ms)
    return candidates, rejections


def observed_min_line_duration(
    samples: Sequence[GazeSample],
    min_observed_line_ms: float = 50.0,
) -> Optional[float]:
    """
    Shortest time spent on one content line, measured between line index
    changes. Durations at or below ``min_observed_line_ms`` are ignored.
    None when no line change was seen.
    """
    shortest = math.inf
    current_line: Optional[int] = None
    line_start = 0.0
    for sample in samples:
        if sample.line_index is None:
            continue
        if sample.line_index != current_line:
            if current_line is not None:
                duration = sample.t - line_start
                if min_observed_line_ms < duration < shortest:
                    shortest = duration
            current_line = sample.line_index
            line_start = sample.t
    return None if math.isinf(shortest) else shortest


def min_line_duration(samples: Sequence[GazeSample], config: LineDetectorConfig) -> float:
    """Temporal gate threshold (ms) for this run."""
    if not config.adaptive_min_line_duration:
        return config.min_line_duration_ms
    observed = observed_min_line_duration(samples, config.min_observed_line_ms)
    if observed is None:
        observed = config.min_line_duration_ms
    threshold = observed * config.adaptive_duration_factor
    logger.debug("Adaptive line duration: shortest line=%.1fms -> gate=%.1fms", observed, threshold)
    return threshold


def _line_context_at(samples: Sequence[GazeSample], idx: int) -> Optional[int]:
    """Line index at ``idx``, searching backwards when the sample has none."""
    for k in range(idx, -1, -1):
        if samples[k].line_index is not None:
            return samples[k].line_index
    return None


def validate_sweeps(
    samples: Sequence[GazeSample],
    candidates: Sequence[SpikeInterval],
    config: LineDetectorConfig,
    min_duration_ms: Optional[float] = None,
) -> tuple[List[ValidatedSweep], List[SweepRejection]]:
    """
    Accept candidates in order through the temporal and line-context gates.

    Carried state is ``(line_counter, last_sweep_end_ms)``, starting at
    ``(1, -inf)``. The temporal gate only applies once a sweep was accepted.
    The context gate rejects a sweep that would move the reader past the
    number of lines the text has shown so far; without context it passes.
    """
    if min_duration_ms is None:
        min_duration_ms = min_line_duration(samples, config)

    sweeps: List[ValidatedSweep] = []
    rejections: List[SweepRejection] = []
    line_counter = 1
    last_sweep_end = -math.inf

    for interval in candidates:
        sweep_t = samples[interval.start_index].t

        elapsed = sweep_t - last_sweep_end
        if sweeps and elapsed < min_duration_ms:
            logger.debug(
                "[Reject Sweep] Rapid fire: dt=%.1fms < %.1fms at t=%.1f",
                elapsed, min_duration_ms, sweep_t,
            )
            rejections.append(
                SweepRejection(interval, RejectionReason.TEMPORAL_GAP, f"dt={elapsed:.1f}ms")
            )
            continue

        if config.use_line_context:
            line_index = _line_context_at(samples, interval.start_index)
            if line_index is not None:
                visible_lines = line_index + 1
                target_line = line_counter + 1
                if target_line > visible_lines:
                    logger.debug(
                        "[Reject Sweep] Premature: target line %s > visible lines %s at t=%.1f",
                        target_line, visible_lines, sweep_t,
                    )
                    rejections.append(
                        SweepRejection(
                            interval,
                            RejectionReason.LINE_CONTEXT,
                            f"target={target_line} visible={visible_lines}",
                        )
                    )
                    continue

        line_counter += 1
        last_sweep_end = interval.end_ms
        sweeps.append(
            ValidatedSweep(
                interval=interval,
                line_number=line_counter,
                displacement_px=sweep_displacement(samples, interval),
            )
        )

    return sweeps, rejections


def _mark_segment(
    samples: Sequence[GazeSample],
    start: int,
    stop: int,
    line_index: int,
) -> LineSegment:
    for sample in samples[start:stop]:
        sample.detected_line_index = line_index
    samples[start].extrema = LineExtremum.LINE_START
    samples[stop - 1].extrema = LineExtremum.POS_MAX
    return LineSegment(
        line_index=line_index,
        start_index=start,
        end_index=stop - 1,
        start_ms=samples[start].t,
        end_ms=samples[stop - 1].t,
    )


def apply_segments(
    samples: Sequence[GazeSample],
    sweeps: Sequence[ValidatedSweep],
    config: LineDetectorConfig,
) -> List[LineSegment]:
    """
    Write line labels onto ``samples`` (the detection slice).

    Sweep samples are flagged as return sweeps. The samples before, between
    and after sweeps get ``first_line_index + sweeps_before``. Segments with
    ``min_segment_samples`` samples or fewer keep no label, but the line
    number still advances past them.
    """
    segments: List[LineSegment] = []
    line_index = config.first_line_index
    segment_start = 0

    for sweep in sweeps:
        segment_stop = sweep.start_index
        if segment_stop - segment_start > config.min_segment_samples:
            segments.append(_mark_segment(samples, segment_start, segment_stop, line_index))
        line_index += 1
        for sample in samples[sweep.start_index:sweep.end_index + 1]:
            sample.is_return_sweep = True
        segment_start = sweep.end_index + 1

    if len(samples) - segment_start > config.min_segment_samples:
        segments.append(_mark_segment(samples, segment_start, len(samples), line_index))

    return segments


def _time_range_slice(samples: Sequence[GazeSample], start_ms: float, end_ms: float) -> tuple[int, int]:
    """Inclusive index bounds of the samples inside [start_ms, end_ms], or (-1, -1)."""
    first = last = -1
    for idx, sample in enumerate(samples):
        if sample.t >= start_ms and first == -1:
            first = idx
        if sample.t <= end_ms:
            last = idx
    return first, last


def _shift(interval: SpikeInterval, offset: int) -> SpikeInterval:
    return SpikeInterval(
        start_index=interval.start_index + offset,
        end_index=interval.end_index + offset,
        start_ms=interval.start_ms,
        end_ms=interval.end_ms,
        peak_abs_value=interval.peak_abs_value,
    )


def detect_lines(
    samples: List[GazeSample],
    config: Optional[LineDetectorConfig] = None,
    start_ms: float = 0.0,
    end_ms: float = math.inf,
) -> LineDetectionResult:
    """
    Detect return sweeps and label reading lines in place.

    Samples must already carry smoothed positions and velocities. Detection
    output of every sample is cleared first; only samples inside the time
    range are labelled. Index spans in the result refer to ``samples``.
    """
    config = config or LineDetectorConfig()
    for sample in samples:
        sample.clear_detection()

    if len(samples) < config.min_samples:
        logger.info("Line detection skipped: %s samples < %s", len(samples), config.min_samples)
        return LineDetectionResult.insufficient()

    first, last = _time_range_slice(samples, start_ms, end_ms)
    if first == -1 or last == -1 or last <= first:
        logger.warning("No samples in range %.1f~%.1fms", start_ms, end_ms)
        return LineDetectionResult.insufficient()

    window = samples[first:last + 1]
    if len(window) < config.min_samples:
        logger.info("Line detection skipped: %s samples in range < %s", len(window), config.min_samples)
        return LineDetectionResult.insufficient()

    ts = [s.t for s in window]
    spikes = SpikeDetector(config.spike).detect(ts, negative_velocity_series(window))

    candidates, rejections = select_candidates(window, spikes.intervals, config.min_displacement_px)
    sweeps, gate_rejections = validate_sweeps(window, candidates, config)
    rejections.extend(gate_rejections)

    segments = apply_segments(window, sweeps, config)

    result = LineDetectionResult(
        threshold=spikes.threshold,
        candidates=[_shift(c, first) for c in candidates],
        sweeps=[
            ValidatedSweep(_shift(s.interval, first), s.line_number, s.displacement_px)
            for s in sweeps
        ],
        segments=[
            LineSegment(
                seg.line_index,
                seg.start_index + first,
                seg.end_index + first,
                seg.start_ms,
                seg.end_ms,
            )
            for seg in segments
        ],
        rejections=[
            SweepRejection(_shift(r.interval, first), r.reason, r.detail) for r in rejections
        ],
    )
    logger.info(
        "Line detection: threshold=%.4f, %s candidates, %s sweeps, %s lines (range %.1f~%.1fms)",
        result.threshold, len(candidates), len(sweeps), result.line_count, start_ms, end_ms,
    )
    return result
