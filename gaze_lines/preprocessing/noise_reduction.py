# gaze_lines/preprocessing/noise_reduction.py
"""Noise reduction: applies spatial smoothing to gap-filled gaze positions."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..config import PreprocessConfig, ValidationMessages
from ..domain.dataset import GazeSample
from ..strategies.smoothing_strategy import (
    GaussianSmoothing,
    NoSmoothing,
    SmoothingStrategy,
)

logger = logging.getLogger(__name__)


def get_smoothing_strategy(cfg: PreprocessConfig) -> SmoothingStrategy:
    """Factory for smoothing strategies."""
    mode = cfg.smoothing_mode
    if mode == "gaussian":
        return GaussianSmoothing(cfg.smoothing_sigma)
    elif mode == "none":
        return NoSmoothing()
    else:
        raise ValueError(ValidationMessages.UNKNOWN_SMOOTHING_MODE.format(mode=mode))


def smooth_gaze(
    samples: List[GazeSample],
    cfg: PreprocessConfig,
    start: int = 0,
    stop: Optional[int] = None,
    strategy: Optional[SmoothingStrategy] = None,
) -> SmoothingStrategy:
    """
    Smooth ``fx`` / ``fy`` into ``gx`` / ``gy`` for ``samples[start:stop]``.

    Returns the strategy used so callers can reuse it (its radius tells the
    streaming processor how far back an appended sample reaches).
    """
    strategy = strategy or get_smoothing_strategy(cfg)
    strategy.smooth(samples, start, stop)
    return strategy
