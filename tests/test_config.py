import pytest

from gaze_lines.cli import build_arg_parser
from gaze_lines.config import (
    ConfigBuilder,
    GazeLineConfig,
    LineDetectorConfig,
    PreprocessConfig,
    SpikeDetectorConfig,
)


def test_defaults():
    cfg = GazeLineConfig()
    assert cfg.preprocess.smoothing_mode == "gaussian"
    assert cfg.preprocess.smoothing_sigma == 3.0
    assert cfg.line_detector.spike.k == 2.0
    assert cfg.line_detector.spike.gap_ms == 120.0
    assert SpikeDetectorConfig().k == 6.0
    assert cfg.realtime.lookback_ms == 600.0


def test_builder_maps_cli_arguments():
    args = build_arg_parser().parse_args(
        [
            "in.csv",
            "out.csv",
            "--k", "1.5",
            "--gap-ms", "80",
            "--min-displacement", "150",
            "--min-line-duration", "250",
            "--adaptive-min-line-duration",
            "--ignore-line-context",
            "--first-line-index", "1",
            "--smoothing", "none",
            "--sigma", "2",
        ]
    )
    cfg = ConfigBuilder.build_all_configs(args)

    assert cfg.preprocess.smoothing_mode == "none"
    assert cfg.preprocess.smoothing_sigma == 2.0
    det = cfg.line_detector
    assert det.spike.k == 1.5
    assert det.spike.gap_ms == 80.0
    assert det.min_displacement_px == 150.0
    assert det.min_line_duration_ms == 250.0
    assert det.adaptive_min_line_duration
    assert not det.use_line_context
    assert det.first_line_index == 1


@pytest.mark.parametrize(
    "factory",
    [
        lambda: PreprocessConfig(smoothing_sigma=0.0),
        lambda: SpikeDetectorConfig(k=-1.0),
        lambda: SpikeDetectorConfig(gap_ms=-5.0),
        lambda: LineDetectorConfig(min_samples=1),
        lambda: LineDetectorConfig(min_segment_samples=-1),
    ],
)
def test_invalid_values_raise(factory):
    with pytest.raises(ValueError):
        factory()
