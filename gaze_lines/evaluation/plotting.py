# gaze_lines/evaluation/plotting.py
from __future__ import annotations

from os import PathLike
from typing import Dict, List, Optional, Tuple, Union

import matplotlib.pyplot as plt
import pandas as pd

from ..config import CsvFormat, ValidationMessages
from ..domain.dataset import LineExtremum


def sweep_spans(df: pd.DataFrame) -> List[Tuple[float, float]]:
    """(start_ms, end_ms) of each contiguous return sweep block."""
    times = pd.to_numeric(df[CsvFormat.TIME], errors="coerce").to_numpy()
    flags = df[CsvFormat.RETURN_SWEEP].fillna(False).astype(bool).to_numpy()
    spans: List[Tuple[float, float]] = []
    start = None
    for idx, flag in enumerate(flags):
        if flag and start is None:
            start = idx
        elif not flag and start is not None:
            spans.append((times[start], times[idx - 1]))
            start = None
    if start is not None:
        spans.append((times[start], times[len(flags) - 1]))
    return spans


def extrema_points(df: pd.DataFrame) -> Dict[str, Tuple[List[float], List[float]]]:
    """(times, smoothed x) of the LineStart and PosMax markers."""
    times = pd.to_numeric(df[CsvFormat.TIME], errors="coerce")
    smooth_x = pd.to_numeric(df[CsvFormat.SMOOTH_X], errors="coerce")
    points: Dict[str, Tuple[List[float], List[float]]] = {}
    for marker in (LineExtremum.LINE_START.value, LineExtremum.POS_MAX.value):
        hit = df[CsvFormat.EXTREMA] == marker
        points[marker] = (times[hit].tolist(), smooth_x[hit].tolist())
    return points


def plot_session(
    df: pd.DataFrame,
    path: Union[str, PathLike],
    title: Optional[str] = None,
) -> None:
    """
    Debugging chart of one processed session, written to ``path``.

    Panels: raw x/y with LineStart / PosMax markers, smoothed x/y, velocity
    x/y, content vs. detected line index. Return sweeps are shaded on every
    panel.
    """
    if CsvFormat.TIME not in df.columns:
        raise ValueError(ValidationMessages.MISSING_TIME_COLUMN)

    def col(name: str) -> pd.Series:
        return pd.to_numeric(df[name], errors="coerce")

    t = col(CsvFormat.TIME)

    fig, axes = plt.subplots(
        4, 1, sharex=True, figsize=(12, 10),
        gridspec_kw={"height_ratios": [2, 2, 2, 1]},
    )

    axes[0].plot(t, col(CsvFormat.RAW_X), linewidth=0.8, color="tab:blue", label="RawX")
    axes[0].plot(t, col(CsvFormat.RAW_Y), linewidth=0.8, color="tab:orange", label="RawY")
    points = extrema_points(df)
    starts_t, starts_x = points[LineExtremum.LINE_START.value]
    ends_t, ends_x = points[LineExtremum.POS_MAX.value]
    axes[0].scatter(starts_t, starts_x, marker="v", color="green", s=30, zorder=3, label="LineStart")
    axes[0].scatter(ends_t, ends_x, marker="^", color="red", s=30, zorder=3, label="PosMax")
    axes[0].set_ylabel("Raw [px]")
    axes[0].set_title(title or "Gaze line detection")

    axes[1].plot(t, col(CsvFormat.SMOOTH_X), linewidth=1.0, linestyle="--", color="dodgerblue", label="SmoothX")
    axes[1].plot(t, col(CsvFormat.SMOOTH_Y), linewidth=1.0, linestyle="--", color="darkorange", label="SmoothY")
    axes[1].set_ylabel("Smooth [px]")

    axes[2].plot(t, col(CsvFormat.VEL_X), linewidth=0.8, color="purple", label="VelX")
    axes[2].plot(t, col(CsvFormat.VEL_Y), linewidth=0.8, color="brown", label="VelY")
    axes[2].axhline(0.0, color="black", linewidth=0.5)
    axes[2].set_ylabel("Vel [px/ms]")

    axes[3].step(t, col(CsvFormat.LINE_INDEX), where="post", label="LineIndex")
    axes[3].step(t, col(CsvFormat.ALGO_LINE_INDEX), where="post", label="AlgoLineIndex")
    axes[3].set_ylabel("Line")
    axes[3].set_xlabel("Time [ms]")
    axes[3].grid(True, axis="y", linestyle=":", linewidth=0.5)

    for ax in axes:
        ax.legend(loc="upper left", fontsize="small")
        for start, end in sweep_spans(df):
            ax.axvspan(start, end, color="magenta", alpha=0.15, linewidth=0)

    plt.tight_layout()
    fig.savefig(path)
    plt.close(fig)
