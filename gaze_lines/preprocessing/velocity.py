# gaze_lines/preprocessing/velocity.py
"""Velocity derivation (px/ms) from smoothed positions, plus sample typing."""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from ..config import PreprocessConfig, SdkEyeMovementState
from ..domain.dataset import GazeSample, SampleType

logger = logging.getLogger(__name__)


def compute_velocity(
    samples: List[GazeSample],
    start: int = 0,
    stop: Optional[int] = None,
) -> int:
    """
    Backward difference of the smoothed position over elapsed time.

        vx[i] = (gx[i] - gx[i-1]) / (t[i] - t[i-1])

    The first sample, non-positive time steps and samples without a smoothed
    position on either side get 0. Returns the number of non-positive time
    steps seen in the range.
    """
    stop = len(samples) if stop is None else min(stop, len(samples))
    bad_steps = 0

    for idx in range(max(0, start), stop):
        sample = samples[idx]
        if idx == 0:
            sample.vx = sample.vy = 0.0
            continue

        prev = samples[idx - 1]
        dt = sample.t - prev.t
        if dt <= 0:
            bad_steps += 1
            sample.vx = sample.vy = 0.0
        elif sample.has_smoothed_position() and prev.has_smoothed_position():
            sample.vx = (sample.gx - prev.gx) / dt
            sample.vy = (sample.gy - prev.gy) / dt
        else:
            sample.vx = sample.vy = 0.0

    if bad_steps:
        logger.debug("Velocity: %s non-positive time steps set to zero velocity", bad_steps)
    return bad_steps


def classify_sample(sample: GazeSample, fixation_velocity_threshold: float) -> SampleType:
    """
    SDK state wins when present (0 fixation, 2 saccade, anything else
    unknown); otherwise the velocity magnitude decides.
    """
    if sample.sdk_state is not None:
        if sample.sdk_state == SdkEyeMovementState.FIXATION:
            return SampleType.FIXATION
        if sample.sdk_state == SdkEyeMovementState.SACCADE:
            return SampleType.SACCADE
        return SampleType.UNKNOWN

    speed = math.hypot(sample.vx or 0.0, sample.vy or 0.0)
    return SampleType.FIXATION if speed < fixation_velocity_threshold else SampleType.SACCADE


def classify_sample_types(
    samples: List[GazeSample],
    cfg: PreprocessConfig,
    start: int = 0,
    stop: Optional[int] = None,
) -> None:
    stop = len(samples) if stop is None else min(stop, len(samples))
    for sample in samples[max(0, start):stop]:
        sample.type = classify_sample(sample, cfg.fixation_velocity_threshold)
