# gaze_lines/config/constants.py
"""Computational constants and interchange format definitions."""

from __future__ import annotations


class ComputationalConstants:
    """Computational constants and defaults."""

    # Gaussian smoothing sigma (samples); kernel radius is ceil(3 * sigma)
    DEFAULT_SMOOTHING_SIGMA: float = 3.0

    # Velocity magnitude (px/ms) separating fixations from saccades
    DEFAULT_FIXATION_VELOCITY: float = 0.5

    # Scale factor turning a MAD into a normal-consistent standard deviation
    MAD_NORMAL_CONSISTENCY: float = 1.4826

    # Robust scale below this is treated as degenerate
    MIN_ROBUST_SCALE: float = 1e-12

    # Generic spike detector defaults
    DEFAULT_SPIKE_K: float = 6.0
    DEFAULT_SPIKE_GAP_MS: float = 120.0

    # Line detector defaults
    DEFAULT_LINE_K: float = 2.0
    DEFAULT_MIN_DETECTION_SAMPLES: int = 10
    DEFAULT_MIN_SWEEP_DISPLACEMENT_PX: float = 100.0
    DEFAULT_MIN_LINE_DURATION_MS: float = 300.0
    DEFAULT_MIN_SEGMENT_SAMPLES: int = 5


class SdkEyeMovementState:
    """Eye movement state codes reported by the tracking SDK."""

    FIXATION: int = 0
    SACCADE: int = 2


class CsvFormat:
    """Session export / offline tool interchange format."""

    TIME = "RelativeTimestamp_ms"
    RAW_X = "RawX"
    RAW_Y = "RawY"
    SMOOTH_X = "SmoothX"
    SMOOTH_Y = "SmoothY"
    VEL_X = "VelX"
    VEL_Y = "VelY"
    TYPE = "Type"
    RETURN_SWEEP = "ReturnSweep"
    LINE_INDEX = "LineIndex"
    CHAR_INDEX = "CharIndex"
    ALGO_LINE_INDEX = "AlgoLineIndex"
    EXTREMA = "Extrema"

    EXPORT_COLUMNS = (
        TIME,
        RAW_X,
        RAW_Y,
        SMOOTH_X,
        SMOOTH_Y,
        VEL_X,
        VEL_Y,
        TYPE,
        RETURN_SWEEP,
        LINE_INDEX,
        CHAR_INDEX,
        ALGO_LINE_INDEX,
        EXTREMA,
    )

    POSITION_DECIMALS = 2
    VELOCITY_DECIMALS = 4
    TRUE_VALUE = "TRUE"

    # Minimum number of delimited fields for a data row
    MIN_FIELDS = 3


class ValidationMessages:
    """Standard validation and error messages."""

    MISSING_TIME_COLUMN = f"DataFrame must contain '{CsvFormat.TIME}'"
    UNKNOWN_SMOOTHING_MODE = "Unknown smoothing mode: {mode}"
    LENGTH_MISMATCH = "ts_ms and values must have the same length ({n_ts} != {n_values})"
