"""Gap fill-in stage."""
from __future__ import annotations

import logging

from .base import IFilterStage
from ..config import GazeLineConfig
from ..domain.dataset import Recording
from ..preprocessing.gap_fill import copy_raw_positions, interpolate_gaps

logger = logging.getLogger(__name__)


class GapFillingStage(IFilterStage):
    """Interpolates tracking dropouts so downstream stages operate on continuous data."""

    def process(self, recording: Recording, config: GazeLineConfig) -> None:
        cfg = config.preprocess
        if not cfg.gap_fill_enabled:
            copy_raw_positions(recording.samples)
            return
        unresolved = interpolate_gaps(
            recording.samples,
            treat_origin_as_missing=cfg.treat_origin_as_missing,
        )
        if unresolved:
            logger.info("[Gap Fill] %s: %s samples without any valid neighbour", recording.id, unresolved)
