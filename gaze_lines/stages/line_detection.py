"""Return-sweep / line detection stage."""
from __future__ import annotations

from .base import IFilterStage
from ..config import GazeLineConfig
from ..domain.dataset import Recording
from ..processing.line_detector import detect_lines


class LineDetectionStage(IFilterStage):
    """Validate return sweeps and label each sample with its reading line."""

    def process(self, recording: Recording, config: GazeLineConfig) -> None:
        recording.line_detection = detect_lines(recording.samples, config.line_detector)
