"""Configuration and constants for the gaze line pipeline."""

from .config import (
    GazeLineConfig,
    LineDetectorConfig,
    PreprocessConfig,
    RealtimeSweepConfig,
    SpikeDetectorConfig,
)
from .constants import (
    ComputationalConstants,
    CsvFormat,
    SdkEyeMovementState,
    ValidationMessages,
)
from .config_builder import ConfigBuilder

__all__ = [
    "GazeLineConfig",
    "LineDetectorConfig",
    "PreprocessConfig",
    "RealtimeSweepConfig",
    "SpikeDetectorConfig",
    "ComputationalConstants",
    "CsvFormat",
    "SdkEyeMovementState",
    "ValidationMessages",
    "ConfigBuilder",
]
