"""Pipeline stages composing the gaze line engine."""

from .base import IFilterStage
from .gap_filling import GapFillingStage
from .noise_reduction import NoiseReductionStage
from .velocity_computation import VelocityComputationStage
from .line_detection import LineDetectionStage

__all__ = [
    "IFilterStage",
    "GapFillingStage",
    "NoiseReductionStage",
    "VelocityComputationStage",
    "LineDetectionStage",
]
