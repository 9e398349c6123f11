# gaze_lines/processing/spike_detector.py
"""
Robust (MAD based) spike detector for a 1-D time series.

Flags samples whose absolute value exceeds ``median + k * scale`` where the
scale is the normal-consistent median absolute deviation. Consecutive
flagged samples form runs, runs are optionally grown by one sample on each
side, and runs separated by a short time gap are merged into one interval.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..config import ComputationalConstants, SpikeDetectorConfig, ValidationMessages
from ..domain.events import SpikeDetectionResult, SpikeInterval

logger = logging.getLogger(__name__)


def median(values: Sequence[float]) -> float:
    """Median of the finite values, NaN when there are none."""
    arr = np.asarray(values, dtype=float)
    finite = arr[np.isfinite(arr)]
    if finite.size == 0:
        return float("nan")
    return float(np.median(finite))


def mad(values: Sequence[float], med: Optional[float] = None) -> float:
    """Median absolute deviation of the finite values around ``med``."""
    arr = np.asarray(values, dtype=float)
    finite = arr[np.isfinite(arr)]
    if med is None:
        med = median(finite)
    return median(np.abs(finite - med))


def robust_scale(
    abs_values: np.ndarray,
    med: float,
    mad_scale: float = ComputationalConstants.MAD_NORMAL_CONSISTENCY,
    min_scale: float = ComputationalConstants.MIN_ROBUST_SCALE,
) -> float:
    """
    ``mad_scale * MAD``; for a degenerate MAD (constant or mostly constant
    signal) the sample standard deviation, and 1.0 if that is degenerate too.
    """
    scale = mad_scale * mad(abs_values, med)
    if np.isfinite(scale) and scale >= min_scale:
        return float(scale)

    finite = abs_values[np.isfinite(abs_values)]
    std = float(np.std(finite, ddof=1)) if finite.size > 1 else 0.0
    return std if std > min_scale else 1.0


def _runs(mask: np.ndarray) -> List[List[int]]:
    """Maximal runs of True as inclusive [start, end] index pairs."""
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    breaks = np.flatnonzero(np.diff(idx) != 1)
    starts = np.concatenate(([idx[0]], idx[breaks + 1]))
    ends = np.concatenate((idx[breaks], [idx[-1]]))
    return [[int(a), int(b)] for a, b in zip(starts, ends)]


def detect_spikes(
    ts_ms: Sequence[float],
    values: Sequence[float],
    k: float = ComputationalConstants.DEFAULT_SPIKE_K,
    gap_ms: float = ComputationalConstants.DEFAULT_SPIKE_GAP_MS,
    expand_one_sample: bool = True,
    mad_scale: float = ComputationalConstants.MAD_NORMAL_CONSISTENCY,
    min_scale: float = ComputationalConstants.MIN_ROBUST_SCALE,
) -> SpikeDetectionResult:
    """
    Detect spikes in ``values`` sampled at ``ts_ms``.

    Args:
        ts_ms: Sample times in ms, same length as ``values``.
        values: Signal; non-finite entries are ignored by the statistics and
            never flagged.
        k: Threshold multiplier on the robust scale.
        gap_ms: Runs whose start follows the previous run's end by at most
            this many ms are merged.
        expand_one_sample: Grow each run by one sample on both sides.

    Returns:
        SpikeDetectionResult with the threshold, the merged intervals (index
        spans refer to the input series) and the per-sample threshold mask.
    """
    ts = np.asarray(ts_ms, dtype=float)
    vals = np.asarray(values, dtype=float)
    if ts.shape != vals.shape:
        raise ValueError(ValidationMessages.LENGTH_MISMATCH.format(n_ts=ts.size, n_values=vals.size))

    n = vals.size
    if n == 0:
        return SpikeDetectionResult(threshold=float("nan"), intervals=[], mask=np.zeros(0, dtype=bool))

    abs_vals = np.abs(vals)
    med = median(abs_vals)
    scale = robust_scale(abs_vals, med, mad_scale, min_scale)
    threshold = med + k * scale

    finite = np.isfinite(abs_vals)
    mask = np.zeros(n, dtype=bool)
    mask[finite] = abs_vals[finite] > threshold

    runs = _runs(mask)
    if expand_one_sample:
        runs = [[max(0, a - 1), min(n - 1, b + 1)] for a, b in runs]

    merged: List[List[int]] = []
    for a, b in runs:
        if merged and ts[a] - ts[merged[-1][1]] <= gap_ms:
            merged[-1][1] = b
        else:
            merged.append([a, b])

    intervals = []
    for a, b in merged:
        window = abs_vals[a:b + 1]
        window = window[np.isfinite(window)]
        peak = float(window.max()) if window.size else 0.0
        intervals.append(
            SpikeInterval(
                start_index=a,
                end_index=b,
                start_ms=float(ts[a]),
                end_ms=float(ts[b]),
                peak_abs_value=peak,
            )
        )

    logger.debug(
        "Spike detection: median=%.4f scale=%.4f threshold=%.4f, %s flagged samples, %s intervals",
        med, scale, threshold, int(mask.sum()), len(intervals),
    )
    return SpikeDetectionResult(threshold=float(threshold), intervals=intervals, mask=mask)


class SpikeDetector:
    """Configured spike detector.

    >>> detector = SpikeDetector(SpikeDetectorConfig(k=2.0))
    >>> result = detector.detect(ts_ms, velocities)
    """

    def __init__(self, config: Optional[SpikeDetectorConfig] = None) -> None:
        self.config = config or SpikeDetectorConfig()

    def detect(self, ts_ms: Sequence[float], values: Sequence[float]) -> SpikeDetectionResult:
        cfg = self.config
        return detect_spikes(
            ts_ms,
            values,
            k=cfg.k,
            gap_ms=cfg.gap_ms,
            expand_one_sample=cfg.expand_one_sample,
            mad_scale=cfg.mad_scale,
            min_scale=cfg.min_scale,
        )
