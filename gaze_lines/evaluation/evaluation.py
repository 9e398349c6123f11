# gaze_lines/evaluation/evaluation.py
from __future__ import annotations

from typing import Any, Dict, Sequence, Union

import pandas as pd

from ..config import CsvFormat
from ..domain.dataset import GazeSample
from ..io.io import samples_to_dataframe


def _count_runs(flags: pd.Series) -> int:
    """Number of contiguous True blocks."""
    flags = flags.fillna(False).astype(bool)
    starts = flags & ~flags.shift(1, fill_value=False)
    return int(starts.sum())


def compute_line_metrics(data: Union[pd.DataFrame, Sequence[GazeSample]]) -> Dict[str, Any]:
    """
    Agreement between detected line labels and the content line index,
    without printing anything.

    Accepts a DataFrame in export column layout or a list of samples. Only
    samples carrying both labels count towards the agreement.
    """
    df = data if isinstance(data, pd.DataFrame) else samples_to_dataframe(data)

    for col in (CsvFormat.LINE_INDEX, CsvFormat.ALGO_LINE_INDEX, CsvFormat.RETURN_SWEEP):
        if col not in df.columns:
            raise ValueError(f"Column '{col}' not found. Run line detection first.")

    truth = pd.to_numeric(df[CsvFormat.LINE_INDEX], errors="coerce")
    detected = pd.to_numeric(df[CsvFormat.ALGO_LINE_INDEX], errors="coerce")

    both = truth.notna() & detected.notna()
    n_compared = int(both.sum())
    n_agree = int((truth[both] == detected[both]).sum())
    agreement = n_agree / n_compared if n_compared > 0 else float("nan")

    labelled = detected.dropna()
    samples_per_line = {int(k): int(v) for k, v in labelled.value_counts().sort_index().items()}

    return {
        "n_samples": int(len(df)),
        "n_compared": n_compared,
        "n_agree": n_agree,
        "agreement": agreement,
        "n_return_sweeps": _count_runs(df[CsvFormat.RETURN_SWEEP]),
        "n_detected_lines": int(labelled.nunique()),
        "n_content_lines": int(truth.dropna().nunique()),
        "n_unlabelled": int(detected.isna().sum()),
        "samples_per_line": samples_per_line,
    }


def print_line_metrics(metrics: Dict[str, Any]) -> None:
    """Print a metrics dictionary as produced by compute_line_metrics."""
    print("=== Line detection vs. content line index ===")
    print(f"Samples:            {metrics['n_samples']}")
    print(f"Compared:           {metrics['n_compared']}")
    print(f"Agreement:          {metrics['agreement'] * 100:.2f} %")
    print(f"Return sweeps:      {metrics['n_return_sweeps']}")
    print(f"Detected lines:     {metrics['n_detected_lines']}")
    print(f"Content lines:      {metrics['n_content_lines']}")
    print(f"Unlabelled samples: {metrics['n_unlabelled']}")
