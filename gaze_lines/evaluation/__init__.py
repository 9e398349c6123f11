"""Evaluation of line detection output.

The matplotlib based chart lives in ``gaze_lines.evaluation.plotting`` and is
imported on demand (``plot`` extra).
"""

from .evaluation import compute_line_metrics, print_line_metrics

__all__ = [
    "compute_line_metrics",
    "print_line_metrics",
]
