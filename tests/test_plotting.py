import importlib

import pandas as pd
import pytest

matplotlib = pytest.importorskip("matplotlib")

from gaze_lines.config import CsvFormat  # noqa: E402
from gaze_lines.engine import process_samples  # noqa: E402
from gaze_lines.evaluation import plotting  # noqa: E402
from gaze_lines.evaluation.plotting import extrema_points, plot_session, sweep_spans  # noqa: E402
from gaze_lines.io import samples_to_dataframe  # noqa: E402


def test_sweep_spans():
    df = pd.DataFrame(
        {
            CsvFormat.TIME: [0.0, 20.0, 40.0, 60.0, 80.0],
            CsvFormat.RETURN_SWEEP: [False, True, True, False, True],
        }
    )
    assert sweep_spans(df) == [(20.0, 40.0), (80.0, 80.0)]


def test_extrema_points(reading_session):
    process_samples(reading_session)
    points = extrema_points(samples_to_dataframe(reading_session))

    starts_t, starts_x = points["LineStart"]
    ends_t, ends_x = points["PosMax"]
    assert starts_t == [reading_session[i].t for i in (0, 46, 87)]
    assert len(ends_t) == 3
    assert starts_x[0] == pytest.approx(reading_session[0].gx)
    assert ends_x[-1] == pytest.approx(reading_session[-1].gx)


def test_import_keeps_the_active_backend():
    before = matplotlib.get_backend()
    importlib.reload(plotting)
    assert matplotlib.get_backend() == before


def test_plot_session_writes_png(reading_session, tmp_path):
    process_samples(reading_session)
    path = tmp_path / "session.png"
    plot_session(samples_to_dataframe(reading_session), path, title="paragraph")
    assert path.exists()
    assert path.stat().st_size > 0


def test_plot_session_draws_both_axes_and_markers(reading_session, tmp_path, monkeypatch):
    process_samples(reading_session)
    close = plotting.plt.close
    figures = []
    monkeypatch.setattr(plotting.plt, "close", figures.append)

    plot_session(samples_to_dataframe(reading_session), tmp_path / "session.png")

    fig = figures[0]
    labels = [
        [line.get_label() for line in ax.get_lines()] + [c.get_label() for c in ax.collections]
        for ax in fig.axes
    ]
    assert {"RawX", "RawY", "LineStart", "PosMax"} <= set(labels[0])
    assert {"SmoothX", "SmoothY"} <= set(labels[1])
    assert {"VelX", "VelY"} <= set(labels[2])
    close(fig)
