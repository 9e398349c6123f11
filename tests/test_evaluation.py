import math

import pandas as pd
import pytest

from gaze_lines.config import CsvFormat
from gaze_lines.engine import process_samples
from gaze_lines.evaluation import compute_line_metrics


def test_metrics_on_processed_session(reading_session):
    process_samples(reading_session)
    metrics = compute_line_metrics(reading_session)

    assert metrics["n_samples"] == len(reading_session)
    assert metrics["n_return_sweeps"] == 2
    assert metrics["n_detected_lines"] == 3
    assert metrics["n_content_lines"] == 3
    assert metrics["n_unlabelled"] == sum(s.is_return_sweep for s in reading_session)
    assert 0.0 < metrics["agreement"] <= 1.0
    assert sorted(metrics["samples_per_line"]) == [0, 1, 2]


def test_metrics_on_handcrafted_frame():
    df = pd.DataFrame(
        {
            CsvFormat.LINE_INDEX: [0, 0, 0, 1, 1, None],
            CsvFormat.ALGO_LINE_INDEX: [0, 0, None, None, 1, 1],
            CsvFormat.RETURN_SWEEP: [False, False, True, True, False, False],
        }
    )
    metrics = compute_line_metrics(df)

    assert metrics["n_compared"] == 3
    assert metrics["n_agree"] == 3
    assert metrics["agreement"] == pytest.approx(1.0)
    assert metrics["n_return_sweeps"] == 1
    assert metrics["n_unlabelled"] == 2
    assert metrics["samples_per_line"] == {0: 2, 1: 2}


def test_agreement_is_nan_without_overlap():
    df = pd.DataFrame(
        {
            CsvFormat.LINE_INDEX: [None, None],
            CsvFormat.ALGO_LINE_INDEX: [0, 0],
            CsvFormat.RETURN_SWEEP: [False, False],
        }
    )
    assert math.isnan(compute_line_metrics(df)["agreement"])


def test_missing_columns_raise():
    with pytest.raises(ValueError, match="Run line detection first"):
        compute_line_metrics(pd.DataFrame({CsvFormat.LINE_INDEX: [0]}))
