import pytest

from gaze_lines.config import RealtimeSweepConfig
from gaze_lines.domain.dataset import GazeSample
from gaze_lines.processing.realtime import (
    detect_realtime_return_sweep,
    mad_fallback_threshold,
    mean_reading_velocity,
)


def with_velocities(velocities, step=20.0):
    return [GazeSample(t=step * i, x=500.0, y=100.0, vx=v, vy=0.0) for i, v in enumerate(velocities)]


def test_needs_minimum_samples():
    assert detect_realtime_return_sweep(with_velocities([-5.0] * 4)) is False


def test_steady_reading_does_not_fire():
    assert detect_realtime_return_sweep(with_velocities([0.3] * 30)) is False


def test_surge_relaxes_adaptive_trigger():
    # reading velocity 0.3 -> trigger -1.5; a surge of -0.8 relaxes it to -0.9
    samples = with_velocities([0.3] * 20 + [-0.2, -1.0])
    assert detect_realtime_return_sweep(samples) is True


def test_adaptive_trigger_requires_leftward_previous_sample():
    samples = with_velocities([0.3] * 20 + [-3.0])
    assert detect_realtime_return_sweep(samples) is False


def test_mad_fallback_hit():
    samples = with_velocities([-0.1] * 10 + [-1.2] + [-0.1] * 5)
    assert detect_realtime_return_sweep(samples) is True


def test_lookback_excludes_old_samples():
    samples = with_velocities([-1.2] + [-0.1] * 40)
    assert detect_realtime_return_sweep(samples, lookback_ms=200.0) is False


def test_mad_threshold_is_clamped():
    config = RealtimeSweepConfig()
    assert mad_fallback_threshold(with_velocities([-0.01] * 6), config) == -0.05
    assert mad_fallback_threshold(with_velocities([-5.0] * 6), config) == -2.0
    assert mad_fallback_threshold(with_velocities([-0.5] * 4), config) is None


def test_mean_reading_velocity_default():
    assert mean_reading_velocity(with_velocities([-1.0, 0.0]), 0.3) == 0.3
    assert mean_reading_velocity(with_velocities([0.2, 0.6, -1.0]), 0.3) == pytest.approx(0.4)


def test_without_surge_the_base_trigger_applies():
    samples = with_velocities([0.3] * 20 + [-0.9, -1.0])
    assert detect_realtime_return_sweep(samples) is False
