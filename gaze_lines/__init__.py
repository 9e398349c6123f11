# gaze_lines/__init__.py
"""
Gaze line detection package.

Contains:
- Sample ingestion, gap fill-in, Gaussian smoothing and velocity
- MAD spike detection and return-sweep / line detection
- Batch engine and live streaming processor
- CSV interchange and evaluation
"""

from .config import GazeLineConfig, LineDetectorConfig, PreprocessConfig, SpikeDetectorConfig
from .domain import GazeSample, LineDetectionResult, Recording, SampleType
from .engine import GazeLineEngine, ProcessingResult, process_frames, process_samples
from .processing import SpikeDetector, detect_lines, detect_spikes
from .streaming import StreamingGazeProcessor
from .io import read_gaze_csv, write_gaze_csv
from .evaluation import compute_line_metrics

__version__ = "0.1.0"
