import pytest

from gaze_lines.config import GazeLineConfig, LineDetectorConfig, SpikeDetectorConfig
from gaze_lines.domain.dataset import GazeSample, LineExtremum
from gaze_lines.domain.events import RejectionReason, SpikeInterval
from gaze_lines.engine import process_samples
from gaze_lines.processing.line_detector import (
    apply_segments,
    detect_lines,
    negative_velocity_series,
    observed_min_line_duration,
    validate_sweeps,
)


class TestThreeLineParagraph:
    """Two clean return sweeps in a three line paragraph."""

    def test_two_sweeps_three_lines(self, reading_session):
        result = process_samples(reading_session).lines

        assert len(result.sweeps) == 2
        assert result.line_count == 3
        assert [seg.line_index for seg in result.segments] == [0, 1, 2]
        assert [sweep.line_number for sweep in result.sweeps] == [2, 3]
        assert result.rejections == []

    def test_sweeps_cover_line_breaks(self, reading_session):
        process_samples(reading_session)
        # index 41 / 82 are the first samples of line 2 / 3
        assert reading_session[41].is_return_sweep
        assert reading_session[82].is_return_sweep
        assert not reading_session[20].is_return_sweep

    def test_labels_are_monotonic(self, reading_session):
        process_samples(reading_session)
        labels = [s.detected_line_index for s in reading_session if s.detected_line_index is not None]
        assert labels[0] == 0
        assert labels[-1] == 2
        assert labels == sorted(labels)
        assert reading_session[-1].detected_line_index == 2
        assert all(s.detected_line_index is None for s in reading_session if s.is_return_sweep)

    def test_extrema_mark_segment_bounds(self, reading_session):
        result = process_samples(reading_session).lines
        for seg in result.segments:
            assert reading_session[seg.start_index].extrema == LineExtremum.LINE_START
            assert reading_session[seg.end_index].extrema == LineExtremum.POS_MAX
        assert result.segments[0].start_index == 0
        assert result.segments[-1].end_index == len(reading_session) - 1

    def test_sweep_displacement_is_leftward(self, reading_session):
        result = process_samples(reading_session).lines
        assert all(sweep.displacement_px >= 100.0 for sweep in result.sweeps)

    def test_first_line_index_offset(self, reading_session):
        config = GazeLineConfig(line_detector=LineDetectorConfig(first_line_index=1))
        result = process_samples(reading_session, config).lines
        assert [seg.line_index for seg in result.segments] == [1, 2, 3]


def test_context_gate_caps_sweeps(session_builder):
    samples = session_builder(context_value=0)
    result = process_samples(samples).lines

    assert result.sweeps == []
    assert result.line_count == 1
    assert [r.reason for r in result.rejections] == [RejectionReason.LINE_CONTEXT] * 2
    assert {s.detected_line_index for s in samples} == {0}


def test_context_gate_can_be_disabled(session_builder):
    samples = session_builder(context_value=0)
    config = GazeLineConfig(line_detector=LineDetectorConfig(use_line_context=False))
    assert process_samples(samples, config).lines.line_count == 3


def test_missing_context_passes_gate(session_builder):
    samples = session_builder(with_line_context=False)
    assert process_samples(samples).lines.line_count == 3


def test_insufficient_data():
    samples = [GazeSample(t=10.0 * i, x=100.0 + i, y=100.0, gx=100.0 + i, gy=100.0, vx=0.1, vy=0.0)
               for i in range(9)]
    result = detect_lines(samples)
    assert result.sufficient_data is False
    assert result.line_count == 0
    assert result.sweeps == []
    assert result.segments == []


def test_time_range_outside_data_is_insufficient(reading_session):
    process_samples(reading_session)
    result = detect_lines(reading_session, LineDetectorConfig(), start_ms=10_000.0)
    assert result.line_count == 0
    # labels from the previous full run are cleared
    assert all(s.detected_line_index is None for s in reading_session)
    assert not any(s.is_return_sweep for s in reading_session)


def test_time_range_restricts_labelling(reading_session):
    process_samples(reading_session)
    # from the middle of the second line: only the second sweep is inside
    result = detect_lines(reading_session, LineDetectorConfig(), start_ms=1200.0)
    assert len(result.sweeps) == 1
    assert reading_session[0].detected_line_index is None
    assert result.sweeps[0].start_index > 59
    assert result.segments[0].start_index == 59
    assert [seg.line_index for seg in result.segments] == [0, 1]


def test_rerun_clears_previous_output(reading_session):
    process_samples(reading_session)
    config = LineDetectorConfig(spike=SpikeDetectorConfig(k=2.0), min_displacement_px=10_000.0)
    result = detect_lines(reading_session, config)
    assert result.sweeps == []
    assert not any(s.is_return_sweep for s in reading_session)
    assert all(r.reason == RejectionReason.DISPLACEMENT for r in result.rejections)


def _timeline(n=60, step=10.0):
    return [GazeSample(t=step * i, x=500.0, y=100.0, gx=500.0, gy=100.0) for i in range(n)]


def test_temporal_gate_rejects_rapid_second_sweep():
    samples = _timeline()
    first = SpikeInterval(start_index=10, end_index=12, start_ms=100.0, end_ms=120.0, peak_abs_value=5.0)
    second = SpikeInterval(start_index=32, end_index=34, start_ms=320.0, end_ms=340.0, peak_abs_value=5.0)

    sweeps, rejections = validate_sweeps(samples, [first, second], LineDetectorConfig())

    assert [s.interval for s in sweeps] == [first]
    assert [(r.interval, r.reason) for r in rejections] == [(second, RejectionReason.TEMPORAL_GAP)]


def test_temporal_gate_accepts_after_min_duration():
    samples = _timeline()
    first = SpikeInterval(10, 12, 100.0, 120.0, 5.0)
    second = SpikeInterval(45, 47, 450.0, 470.0, 5.0)
    sweeps, _ = validate_sweeps(samples, [first, second], LineDetectorConfig())
    assert len(sweeps) == 2


def test_context_gate_searches_backwards_for_line_index():
    samples = _timeline()
    samples[5].line_index = 0
    interval = SpikeInterval(10, 12, 100.0, 120.0, 5.0)
    sweeps, rejections = validate_sweeps(samples, [interval], LineDetectorConfig())
    assert sweeps == []
    assert rejections[0].reason == RejectionReason.LINE_CONTEXT


def test_short_segments_are_not_labelled_but_count():
    samples = _timeline(n=30)
    config = LineDetectorConfig()
    sweeps, _ = validate_sweeps(
        samples,
        [SpikeInterval(3, 5, 30.0, 50.0, 5.0), SpikeInterval(15, 17, 150.0, 170.0, 5.0)],
        config,
        min_duration_ms=0.0,
    )
    segments = apply_segments(samples, sweeps, config)

    # [0, 3) has 3 samples -> skipped; [6, 15) -> line 1; [18, 30) -> line 2
    assert [(seg.line_index, seg.start_index, seg.end_index) for seg in segments] == [(1, 6, 14), (2, 18, 29)]
    assert samples[0].detected_line_index is None
    assert samples[4].is_return_sweep


def test_negative_velocity_series():
    samples = [GazeSample(t=0.0, x=0.0, y=0.0, vx=v) for v in (1.0, -2.0, None, -0.5)]
    assert list(negative_velocity_series(samples)) == [0.0, -2.0, 0.0, -0.5]


def test_observed_min_line_duration():
    samples = [GazeSample(t=t, x=1.0, y=1.0, line_index=li)
               for t, li in [(0, 0), (400, 0), (500, 1), (520, 2), (900, 3)]]
    # 500 (line 0), 20 (glitch, ignored), 380 (line 2)
    assert observed_min_line_duration(samples) == 380
    assert observed_min_line_duration(samples[:2]) is None


def test_adaptive_min_line_duration(reading_session):
    config = LineDetectorConfig(adaptive_min_line_duration=True)
    result = process_samples(reading_session, GazeLineConfig(line_detector=config)).lines
    assert result.line_count == 3
