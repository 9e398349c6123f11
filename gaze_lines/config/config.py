# gaze_lines/config/config.py
"""
Configuration classes for the gaze line detection pipeline.

This module defines every tunable parameter for:
  - Preprocessing (gap fill-in, Gaussian smoothing, velocity, sample typing)
  - The generic MAD spike detector
  - Return-sweep validation and line segmentation
  - The real-time return-sweep check used by the live processor

Example:
    >>> from gaze_lines.config import (
    ...     GazeLineConfig, LineDetectorConfig, SpikeDetectorConfig
    ... )
    >>>
    >>> # Default configuration (offline reprocessing parameters)
    >>> cfg = GazeLineConfig()
    >>>
    >>> # More sensitive detector, as used by the live game build
    >>> cfg = GazeLineConfig(
    ...     line_detector=LineDetectorConfig(
    ...         spike=SpikeDetectorConfig(k=1.5),
    ...         adaptive_min_line_duration=True,
    ...     )
    ... )
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from .constants import ComputationalConstants


@dataclass
class PreprocessConfig:
    """
    Configuration for interpolation, smoothing and velocity derivation.
    """

    # Gap fill-in: replace missing positions by linear interpolation between
    # the nearest valid neighbours (constant extrapolation at the edges).
    gap_fill_enabled: bool = True

    # The tracker reports (0, 0) when it loses the eyes. Treat it as missing.
    treat_origin_as_missing: bool = True

    # Spatial smoothing
    # - "gaussian": truncated Gaussian kernel, radius ceil(3 * sigma)
    # - "none":     smoothed position equals the gap-filled position
    smoothing_mode: Literal["gaussian", "none"] = "gaussian"
    smoothing_sigma: float = ComputationalConstants.DEFAULT_SMOOTHING_SIGMA

    # Velocity magnitude (px/ms) below which a sample without SDK state is a
    # fixation.
    fixation_velocity_threshold: float = ComputationalConstants.DEFAULT_FIXATION_VELOCITY

    def __post_init__(self) -> None:
        if self.smoothing_sigma <= 0:
            raise ValueError(f"smoothing_sigma must be > 0, got {self.smoothing_sigma}")


@dataclass
class SpikeDetectorConfig:
    """
    Configuration for the MAD based spike detector.
    """

    # Threshold = median + k * robust scale
    k: float = ComputationalConstants.DEFAULT_SPIKE_K

    # Flagged runs whose time gap is <= gap_ms are merged into one interval.
    gap_ms: float = ComputationalConstants.DEFAULT_SPIKE_GAP_MS

    # Grow every run by one sample on each side (clamped to the series).
    expand_one_sample: bool = True

    # MAD -> standard deviation of a normal distribution
    mad_scale: float = ComputationalConstants.MAD_NORMAL_CONSISTENCY

    # Below this the MAD scale is considered degenerate and the standard
    # deviation is used instead.
    min_scale: float = ComputationalConstants.MIN_ROBUST_SCALE

    def __post_init__(self) -> None:
        if self.k < 0:
            raise ValueError(f"k must be >= 0, got {self.k}")
        if self.gap_ms < 0:
            raise ValueError(f"gap_ms must be >= 0, got {self.gap_ms}")


def _line_spike_config() -> SpikeDetectorConfig:
    return SpikeDetectorConfig(k=ComputationalConstants.DEFAULT_LINE_K)


@dataclass
class LineDetectorConfig:
    """
    Configuration for return-sweep validation and line segmentation.
    """

    # Spike detection on the leftward-only horizontal velocity.
    # k=2.0 is the offline reprocessing value; the live build used 1.5.
    spike: SpikeDetectorConfig = field(default_factory=_line_spike_config)

    # Fewer samples than this -> "no lines detected".
    min_samples: int = ComputationalConstants.DEFAULT_MIN_DETECTION_SAMPLES

    # Net leftward travel of the smoothed x (start - end) a candidate needs.
    min_displacement_px: float = ComputationalConstants.DEFAULT_MIN_SWEEP_DISPLACEMENT_PX

    # Temporal gate: minimum time between the end of the last accepted sweep
    # and the start of the next one.
    min_line_duration_ms: float = ComputationalConstants.DEFAULT_MIN_LINE_DURATION_MS

    # Derive the temporal gate from the shortest content line duration observed
    # in the line index context (factor * shortest line). Falls back to
    # min_line_duration_ms when fewer than two lines were shown.
    adaptive_min_line_duration: bool = False
    adaptive_duration_factor: float = 0.5
    # Content line durations at or below this are glitches and ignored.
    min_observed_line_ms: float = 50.0

    # Context gate: a sweep may not advance past the visible line count.
    use_line_context: bool = True

    # Segments with this many samples or fewer are not emitted.
    min_segment_samples: int = ComputationalConstants.DEFAULT_MIN_SEGMENT_SAMPLES

    # Value of detected_line_index for the first segment.
    first_line_index: int = 0

    def __post_init__(self) -> None:
        if self.min_samples < 2:
            raise ValueError(f"min_samples must be >= 2, got {self.min_samples}")
        if self.min_segment_samples < 0:
            raise ValueError(f"min_segment_samples must be >= 0, got {self.min_segment_samples}")


@dataclass
class RealtimeSweepConfig:
    """
    Configuration for the per-frame return-sweep check of the live processor.
    """

    lookback_ms: float = 600.0
    min_samples: int = 5

    # Adaptive trigger: fire when vx < min(max_trigger, -multiplier * mean
    # reading velocity). Reading velocity defaults to default_read_velocity
    # when no rightward movement was seen in the lookback.
    read_velocity_multiplier: float = 5.0
    max_trigger_velocity: float = -1.0
    default_read_velocity: float = 0.3

    # Surge: leftward acceleration beyond surge_factor * reading velocity
    # relaxes the trigger to surge_relax * trigger.
    surge_factor: float = 2.0
    surge_relax: float = 0.6

    # MAD fallback over the negative velocities of the lookback window.
    mad_k: float = 0.8
    min_speed: float = -0.05
    max_speed: float = -2.0


@dataclass
class GazeLineConfig:
    """
    Aggregate configuration consumed by the engine and the streaming processor.
    """

    preprocess: PreprocessConfig = field(default_factory=PreprocessConfig)
    line_detector: LineDetectorConfig = field(default_factory=LineDetectorConfig)
    realtime: RealtimeSweepConfig = field(default_factory=RealtimeSweepConfig)
