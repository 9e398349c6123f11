"""Detection: MAD spike detector, return-sweep / line detector, live sweep check."""

from .spike_detector import SpikeDetector, detect_spikes, mad, median, robust_scale
from .line_detector import (
    apply_segments,
    detect_lines,
    negative_velocity_series,
    observed_min_line_duration,
    select_candidates,
    validate_sweeps,
)
from .realtime import detect_realtime_return_sweep

__all__ = [
    "SpikeDetector",
    "detect_spikes",
    "mad",
    "median",
    "robust_scale",
    "apply_segments",
    "detect_lines",
    "negative_velocity_series",
    "observed_min_line_duration",
    "select_candidates",
    "validate_sweeps",
    "detect_realtime_return_sweep",
]
