"""Smoothing strategies."""

from .smoothing_strategy import (
    SmoothingStrategy,
    NoSmoothing,
    GaussianSmoothing,
    gaussian_kernel,
)

__all__ = [
    "SmoothingStrategy",
    "NoSmoothing",
    "GaussianSmoothing",
    "gaussian_kernel",
]
