# gaze_lines/preprocessing/gap_fill.py
"""Gap fill-in interpolation: fills tracking dropouts in a gaze series."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..domain.dataset import GazeSample

logger = logging.getLogger(__name__)


def is_missing(sample: GazeSample, treat_origin_as_missing: bool = True) -> bool:
    """
    A sample is missing when x or y is None/NaN, or when it sits exactly on
    (0, 0), the sentinel the tracker emits when it loses the eyes.
    """
    if not sample.has_raw_position():
        return True
    return treat_origin_as_missing and sample.x == 0 and sample.y == 0


def previous_valid_index(
    samples: List[GazeSample],
    idx: int,
    treat_origin_as_missing: bool = True,
) -> Optional[int]:
    """Nearest index <= idx holding a valid raw position."""
    while idx >= 0:
        if not is_missing(samples[idx], treat_origin_as_missing):
            return idx
        idx -= 1
    return None


def interpolate_gaps(
    samples: List[GazeSample],
    start: int = 0,
    stop: Optional[int] = None,
    treat_origin_as_missing: bool = True,
) -> int:
    """
    Fill ``fx`` / ``fy`` for the samples in ``[start, stop)``.

      - Valid samples copy their raw position.
      - A missing sample is interpolated linearly by elapsed time between
        the nearest valid neighbour on each side.
      - With a valid neighbour on one side only, that neighbour's position
        is copied (constant extrapolation).
      - Without any valid neighbour the sample stays unresolved (None).

    Neighbours are searched over the whole list, so a sub-range gives the
    same values a full pass would. Returns the number of unresolved samples
    in the range.
    """
    n = len(samples)
    stop = n if stop is None else min(stop, n)
    unresolved = 0
    filled = 0

    idx = max(0, start)
    while idx < stop:
        sample = samples[idx]
        if not is_missing(sample, treat_origin_as_missing):
            sample.fx = sample.x
            sample.fy = sample.y
            idx += 1
            continue

        # Start of a gap; its end is searched beyond stop to find the next
        # valid neighbour.
        gap_start = idx
        while idx < n and is_missing(samples[idx], treat_origin_as_missing):
            idx += 1
        next_idx = idx if idx < n else None
        prev_idx = previous_valid_index(samples, gap_start - 1, treat_origin_as_missing)

        prev = samples[prev_idx] if prev_idx is not None else None
        nxt = samples[next_idx] if next_idx is not None else None

        for j in range(gap_start, min(idx, stop)):
            target = samples[j]
            if prev is not None and nxt is not None:
                total = nxt.t - prev.t
                ratio = (target.t - prev.t) / total if total != 0 else 0.0
                target.fx = prev.x + (nxt.x - prev.x) * ratio
                target.fy = prev.y + (nxt.y - prev.y) * ratio
            elif prev is not None:
                target.fx, target.fy = prev.x, prev.y
            elif nxt is not None:
                target.fx, target.fy = nxt.x, nxt.y
            else:
                target.fx = target.fy = None
                unresolved += 1
                continue
            filled += 1

    if filled or unresolved:
        logger.debug("Gap fill-in: %s samples filled, %s unresolved", filled, unresolved)
    return unresolved


def copy_raw_positions(
    samples: List[GazeSample],
    start: int = 0,
    stop: Optional[int] = None,
) -> None:
    """Use the raw position as filled position (gap fill-in disabled)."""
    stop = len(samples) if stop is None else min(stop, len(samples))
    for sample in samples[max(0, start):stop]:
        if sample.has_raw_position():
            sample.fx, sample.fy = sample.x, sample.y
        else:
            sample.fx = sample.fy = None
