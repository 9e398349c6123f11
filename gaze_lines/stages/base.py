"""Base class for each step in the gaze line pipeline."""
from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import GazeLineConfig
from ..domain.dataset import Recording


class IFilterStage(ABC):
    """Abstract processing stage.

    Each concrete implementation is responsible for a single step of the
    pipeline: gap fill-in, smoothing, velocity or line detection.
    """

    @abstractmethod
    def process(self, recording: Recording, config: GazeLineConfig) -> None:
        """Mutate the recording in-place according to the stage's behaviour."""
        raise NotImplementedError
