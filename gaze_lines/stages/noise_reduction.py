"""Noise reduction stage."""
from __future__ import annotations

from .base import IFilterStage
from ..config import GazeLineConfig
from ..domain.dataset import Recording
from ..preprocessing.noise_reduction import smooth_gaze


class NoiseReductionStage(IFilterStage):
    """Apply the configured smoothing strategy to the gap-filled positions."""

    def process(self, recording: Recording, config: GazeLineConfig) -> None:
        smooth_gaze(recording.samples, config.preprocess)
