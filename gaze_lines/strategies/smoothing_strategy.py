# gaze_lines/strategies/smoothing_strategy.py
"""
Strategies for spatial smoothing of gap-filled gaze positions.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

import numpy as np

from ..domain.dataset import GazeSample


def gaussian_kernel(sigma: float) -> np.ndarray:
    """
    Truncated Gaussian kernel with radius ceil(3 * sigma), normalized to 1.

    sigma=3 -> radius 9 -> 19 taps.
    """
    if sigma <= 0:
        raise ValueError(f"sigma must be > 0, got {sigma}")
    radius = int(math.ceil(3 * sigma))
    offsets = np.arange(-radius, radius + 1, dtype=float)
    weights = np.exp(-(offsets * offsets) / (2.0 * sigma * sigma))
    return weights / weights.sum()


class SmoothingStrategy(ABC):
    """Abstract base for smoothing strategies.

    Strategies write ``gx`` / ``gy`` for the samples in ``[start, stop)``
    reading the gap-filled ``fx`` / ``fy`` of their neighbours.
    """

    #: number of neighbours on each side a smoothed value depends on
    radius: int = 0

    @abstractmethod
    def smooth(self, samples: List[GazeSample], start: int = 0, stop: Optional[int] = None) -> None:
        """Apply smoothing in place."""

    @abstractmethod
    def get_description(self) -> str:
        """Description of the smoothing strategy."""


class NoSmoothing(SmoothingStrategy):
    """No smoothing: the smoothed position is the gap-filled position."""

    def smooth(self, samples: List[GazeSample], start: int = 0, stop: Optional[int] = None) -> None:
        stop = len(samples) if stop is None else min(stop, len(samples))
        for sample in samples[max(0, start):stop]:
            if sample.has_filled_position():
                sample.gx, sample.gy = sample.fx, sample.fy
            else:
                sample.gx, sample.gy = sample.x, sample.y

    def get_description(self) -> str:
        return "NoSmoothing"


class GaussianSmoothing(SmoothingStrategy):
    """
    Acausal Gaussian smoothing with per-sample renormalization.

    The kernel is centred on the sample being smoothed. Only neighbours that
    are inside the series and have a resolved position contribute; their
    weights are rescaled to sum to 1, so sequence edges and unresolved gaps
    degrade gracefully instead of producing NaN. A sample without any
    contributing neighbour falls back to its raw position.
    """

    def __init__(self, sigma: float = 3.0) -> None:
        self.sigma = float(sigma)
        self.kernel = gaussian_kernel(self.sigma)
        self.radius = (len(self.kernel) - 1) // 2

    def window_weights(self, samples: List[GazeSample], idx: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Indices and renormalized weights applied when smoothing ``samples[idx]``.

        Returns two empty arrays when no neighbour is available.
        """
        lo = max(0, idx - self.radius)
        hi = min(len(samples), idx + self.radius + 1)
        indices = np.array(
            [j for j in range(lo, hi) if samples[j].has_filled_position()],
            dtype=int,
        )
        if indices.size == 0:
            return indices, np.empty(0, dtype=float)
        weights = self.kernel[indices - idx + self.radius]
        return indices, weights / weights.sum()

    def smooth(self, samples: List[GazeSample], start: int = 0, stop: Optional[int] = None) -> None:
        stop = len(samples) if stop is None else min(stop, len(samples))
        for idx in range(max(0, start), stop):
            sample = samples[idx]
            indices, weights = self.window_weights(samples, idx)
            if indices.size == 0:
                sample.gx, sample.gy = sample.x, sample.y
                continue
            xs = np.array([samples[j].fx for j in indices], dtype=float)
            ys = np.array([samples[j].fy for j in indices], dtype=float)
            sample.gx = float(np.dot(weights, xs))
            sample.gy = float(np.dot(weights, ys))

    def get_description(self) -> str:
        return f"GaussianSmoothing(sigma={self.sigma}, width={len(self.kernel)})"
