"""
Parallel offline processing of many recorded sessions.

Each session is independent, so sessions are distributed over joblib
workers; a single session always runs in one worker.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from joblib import Parallel, delayed

from .config import GazeLineConfig
from .domain.dataset import Recording
from .engine import GazeLineEngine, ProcessingResult

logger = logging.getLogger(__name__)


def _process_one(recording: Recording, config: GazeLineConfig) -> ProcessingResult:
    return GazeLineEngine().run(recording, config)


def process_recordings(
    recordings: Sequence[Recording],
    config: Optional[GazeLineConfig] = None,
    n_jobs: int = -1,
    backend: str = "loky",
) -> List[ProcessingResult]:
    """
    Run the batch pipeline over several sessions.

    Args:
        recordings: Sessions to process.
        config: Shared configuration (defaults to GazeLineConfig()).
        n_jobs: joblib worker count (-1 = all cores, 1 = sequential).
        backend: joblib backend ("loky", "threading", ...).

    Returns:
        One ProcessingResult per recording, in input order. With process
        based backends the results hold copies of the recordings.
    """
    config = config or GazeLineConfig()
    if not recordings:
        return []
    logger.info("Processing %s recordings with n_jobs=%s (%s)", len(recordings), n_jobs, backend)
    return Parallel(n_jobs=n_jobs, backend=backend)(
        delayed(_process_one)(recording, config) for recording in recordings
    )
