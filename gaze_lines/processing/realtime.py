# gaze_lines/processing/realtime.py
"""Per-frame return-sweep check for the live processor.

Two triggers, evaluated over the samples of the last ``lookback_ms``:

  - Adaptive: the newest velocity is much faster leftward than the reader's
    mean rightward (reading) velocity. A strong leftward acceleration relaxes
    the trigger, since the movement is caught in its early phase. The
    previous sample must also move leftward so single-frame glitches do not
    fire.
  - MAD fallback: any leftward velocity in the window beyond
    ``median - mad_k * MAD`` of the window's leftward velocities, with the
    threshold clamped to [max_speed, min_speed].
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..config import RealtimeSweepConfig
from ..domain.dataset import GazeSample

logger = logging.getLogger(__name__)


def _lookback_window(samples: Sequence[GazeSample], lookback_ms: float) -> List[GazeSample]:
    cutoff = samples[-1].t - lookback_ms
    window: List[GazeSample] = []
    for sample in reversed(samples):
        if sample.t < cutoff:
            break
        window.append(sample)
    return window


def mean_reading_velocity(window: Sequence[GazeSample], default: float) -> float:
    """Mean of the positive vx values, ``default`` when there are none."""
    positive = [s.vx for s in window if s.vx is not None and s.vx > 0]
    return float(np.mean(positive)) if positive else default


def adaptive_trigger_threshold(
    latest: GazeSample,
    previous: Optional[GazeSample],
    read_velocity: float,
    config: RealtimeSweepConfig,
) -> float:
    threshold = min(config.max_trigger_velocity, -read_velocity * config.read_velocity_multiplier)
    if previous is not None and previous.vx is not None and latest.vx is not None:
        acceleration = latest.vx - previous.vx
        if acceleration < -read_velocity * config.surge_factor:
            threshold *= config.surge_relax
    return threshold


def mad_fallback_threshold(window: Sequence[GazeSample], config: RealtimeSweepConfig) -> Optional[float]:
    """Clamped MAD threshold over leftward velocities; None with too few of them."""
    negatives = np.array([s.vx for s in window if s.vx is not None and s.vx < 0], dtype=float)
    if negatives.size < config.min_samples:
        return None
    med = float(np.median(negatives))
    spread = float(np.median(np.abs(negatives - med)))
    threshold = med - config.mad_k * spread
    # closer to zero than min_speed -> min_speed; beyond max_speed -> max_speed
    threshold = min(threshold, config.min_speed)
    threshold = max(threshold, config.max_speed)
    return threshold


def detect_realtime_return_sweep(
    samples: Sequence[GazeSample],
    config: Optional[RealtimeSweepConfig] = None,
    lookback_ms: Optional[float] = None,
) -> bool:
    """True when the recent samples look like a return sweep in progress."""
    config = config or RealtimeSweepConfig()
    if len(samples) < config.min_samples:
        return False
    lookback_ms = config.lookback_ms if lookback_ms is None else lookback_ms

    window = _lookback_window(samples, lookback_ms)
    latest = samples[-1]
    previous = samples[-2]

    read_velocity = mean_reading_velocity(window, config.default_read_velocity)
    threshold = adaptive_trigger_threshold(latest, previous, read_velocity, config)
    if latest.vx is not None and latest.vx < threshold and (previous.vx or 0.0) < 0:
        logger.debug(
            "[RS] Trigger: vx=%.2f < %.2f (reading velocity %.2f)",
            latest.vx, threshold, read_velocity,
        )
        return True

    mad_threshold = mad_fallback_threshold(window, config)
    if mad_threshold is None:
        return False
    for sample in window:
        if sample.vx is not None and sample.vx < mad_threshold:
            logger.debug("[RS] MAD hit: vx=%.2f < %.2f at t=%.1f", sample.vx, mad_threshold, sample.t)
            return True
    return False
