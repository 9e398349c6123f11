"""Velocity computation stage."""
from __future__ import annotations

from .base import IFilterStage
from ..config import GazeLineConfig
from ..domain.dataset import Recording
from ..preprocessing.velocity import classify_sample_types, compute_velocity


class VelocityComputationStage(IFilterStage):
    """Derive px/ms velocities from smoothed positions and type each sample."""

    def process(self, recording: Recording, config: GazeLineConfig) -> None:
        compute_velocity(recording.samples)
        classify_sample_types(recording.samples, config.preprocess)
