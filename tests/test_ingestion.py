import math

from gaze_lines.domain.dataset import ReadingContext
from gaze_lines.preprocessing.ingestion import (
    RawFrame,
    SampleIngestor,
    normalize_frame,
    to_optional_float,
)


def test_relative_timestamps_anchor_on_first_sample():
    ingestor = SampleIngestor()
    first = ingestor.ingest(1000.0, 10.0, 20.0)
    second = ingestor.ingest(1016.5, 11.0, 21.0)
    assert first.t == 0.0
    assert second.t == 16.5
    assert ingestor.first_timestamp == 1000.0


def test_missing_coordinates_are_preserved():
    ingestor = SampleIngestor()
    sample = ingestor.ingest(0.0, float("nan"), None)
    assert sample.x is None
    assert sample.y is None


def test_line_index_is_sticky():
    ingestor = SampleIngestor()
    assert ingestor.ingest(0.0, 1.0, 1.0).line_index is None
    assert ingestor.ingest(10.0, 1.0, 1.0, line_index=0).line_index == 0
    assert ingestor.ingest(20.0, 1.0, 1.0).line_index == 0
    assert ingestor.ingest(30.0, 1.0, 1.0, line_index=2).line_index == 2
    assert ingestor.ingest(40.0, 1.0, 1.0).line_index == 2


def test_set_context_updates_only_given_fields():
    ingestor = SampleIngestor()
    ingestor.set_context(ReadingContext(line_index=1, char_index=5))
    ingestor.set_context(ReadingContext(target_y=300.0))
    sample = ingestor.ingest(0.0, 1.0, 1.0)
    assert sample.line_index == 1
    assert sample.char_index == 5
    assert sample.target_y == 300.0


def test_frame_without_timestamp_is_dropped():
    ingestor = SampleIngestor()
    assert ingestor.ingest(float("nan"), 1.0, 1.0) is None
    assert ingestor.first_timestamp is None


def test_non_monotonic_timestamp_does_not_raise():
    ingestor = SampleIngestor()
    ingestor.ingest(100.0, 1.0, 1.0)
    sample = ingestor.ingest(90.0, 1.0, 1.0)
    assert sample.t == -10.0


def test_reset_clears_anchor_and_context():
    ingestor = SampleIngestor()
    ingestor.ingest(500.0, 1.0, 1.0, line_index=3)
    ingestor.reset()
    sample = ingestor.ingest(800.0, 1.0, 1.0)
    assert sample.t == 0.0
    assert sample.line_index is None


def test_normalize_frame_from_mapping_and_object():
    frame = normalize_frame({"timestamp": 12.0, "x": "3,5", "y": None, "eyemovementState": 2})
    assert frame == RawFrame(timestamp=12.0, x=3.5, y=None, sdk_state=2)

    class SdkFrame:
        timestamp = 7.0
        x = 1.0
        y = float("inf")

    frame = normalize_frame(SdkFrame())
    assert frame.x == 1.0
    assert frame.y is None
    assert frame.sdk_state is None


def test_normalize_frame_with_bad_timestamp():
    frame = normalize_frame({"timestamp": "null", "x": 1, "y": 2})
    assert math.isnan(frame.timestamp)


def test_to_optional_float():
    assert to_optional_float("null") is None
    assert to_optional_float("") is None
    assert to_optional_float("abc") is None
    assert to_optional_float(" 2.5 ") == 2.5
    assert to_optional_float(4) == 4.0
