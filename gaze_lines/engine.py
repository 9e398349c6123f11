"""High level batch orchestration of the gaze line pipeline."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Protocol

from .config import GazeLineConfig
from .domain.dataset import GazeSample, Recording
from .domain.events import LineDetectionResult
from .preprocessing.ingestion import SampleIngestor, normalize_frame
from .stages import (
    GapFillingStage,
    NoiseReductionStage,
    VelocityComputationStage,
    LineDetectionStage,
    IFilterStage,
)

logger = logging.getLogger(__name__)


class IGazeLineEngine(Protocol):
    """Protocol for running the gaze line pipeline."""

    def run(self, recording: Recording, config: GazeLineConfig) -> "ProcessingResult":
        ...


@dataclass
class ProcessingResult:
    """Wrapper holding the processed recording and its line detection result."""

    recording: Recording
    lines: LineDetectionResult
    created_at: datetime


class GazeLineEngine(IGazeLineEngine):
    """Pipeline composed of four dedicated stages."""

    def __init__(self, stages: List[IFilterStage] | None = None) -> None:
        self.stages: List[IFilterStage] = stages or [
            GapFillingStage(),
            NoiseReductionStage(),
            VelocityComputationStage(),
            LineDetectionStage(),
        ]

    def run(self, recording: Recording, config: GazeLineConfig) -> ProcessingResult:
        for stage in self.stages:
            stage.process(recording, config)
        lines = recording.line_detection or LineDetectionResult.insufficient()
        logger.info(
            "[Engine] %s: %s samples, %s sweeps, %s lines",
            recording.id, len(recording), len(lines.sweeps), lines.line_count,
        )
        return ProcessingResult(recording=recording, lines=lines, created_at=datetime.now(timezone.utc))


def process_samples(
    samples: List[GazeSample],
    config: Optional[GazeLineConfig] = None,
    recording_id: str = "session",
) -> ProcessingResult:
    """Run the full pipeline over already ingested samples (mutated in place)."""
    recording = Recording(id=recording_id, samples=samples)
    return GazeLineEngine().run(recording, config or GazeLineConfig())


def process_frames(
    frames: Iterable[Any],
    config: Optional[GazeLineConfig] = None,
    recording_id: str = "session",
) -> ProcessingResult:
    """Ingest raw tracker frames and run the full pipeline over the session."""
    ingestor = SampleIngestor()
    samples: List[GazeSample] = []
    for frame in frames:
        sample = ingestor.ingest_frame(normalize_frame(frame))
        if sample is not None:
            samples.append(sample)
    return process_samples(samples, config, recording_id)
