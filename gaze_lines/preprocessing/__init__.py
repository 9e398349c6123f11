"""Preprocessing stage: ingestion, gap fill-in, smoothing and velocity."""

from .ingestion import (
    RawFrame,
    SampleIngestor,
    normalize_frame,
    to_optional_float,
    to_optional_int,
)
from .gap_fill import copy_raw_positions, interpolate_gaps, is_missing
from .noise_reduction import get_smoothing_strategy, smooth_gaze
from .velocity import classify_sample, classify_sample_types, compute_velocity

__all__ = [
    'RawFrame',
    'SampleIngestor',
    'normalize_frame',
    'to_optional_float',
    'to_optional_int',
    'copy_raw_positions',
    'interpolate_gaps',
    'is_missing',
    'get_smoothing_strategy',
    'smooth_gaze',
    'classify_sample',
    'classify_sample_types',
    'compute_velocity',
]
