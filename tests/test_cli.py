import pandas as pd
import pytest

from gaze_lines.cli import build_arg_parser, main
from gaze_lines.config import CsvFormat


@pytest.fixture
def input_csv(tmp_path, session_builder):
    path = tmp_path / "recording.csv"
    rows = ["Time,RawX,RawY,LineIndex"]
    for s in session_builder():
        rows.append(f"{1000 + s.t},{s.x},{s.y},{s.line_index}")
    path.write_text("\n".join(rows) + "\n")
    return path


def test_usage_without_arguments(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().err.lower()


def test_usage_without_output(input_csv):
    assert main([str(input_csv)]) == 1


def test_missing_input_file(tmp_path):
    assert main([str(tmp_path / "nope.csv"), str(tmp_path / "out.csv")]) == 1


def test_invalid_sigma_is_a_usage_error(input_csv, tmp_path):
    with pytest.raises(SystemExit):
        main([str(input_csv), str(tmp_path / "out.csv"), "--sigma", "0"])


def test_offline_run_writes_export(input_csv, tmp_path, capsys):
    out = tmp_path / "out.csv"
    assert main([str(input_csv), str(out)]) == 0

    printed = capsys.readouterr().out
    assert "[Line Detection] 3 lines, 2 return sweeps" in printed

    df = pd.read_csv(out, dtype=str, keep_default_na=False)
    assert list(df.columns) == list(CsvFormat.EXPORT_COLUMNS)
    assert df[CsvFormat.TIME][0] == "0"
    assert (df[CsvFormat.RETURN_SWEEP] == "TRUE").any()
    assert df[CsvFormat.ALGO_LINE_INDEX].iloc[-1] == "2"


def test_first_line_index_option(input_csv, tmp_path):
    out = tmp_path / "out.csv"
    assert main([str(input_csv), str(out), "--first-line-index", "1"]) == 0
    df = pd.read_csv(out, dtype=str, keep_default_na=False)
    assert df[CsvFormat.ALGO_LINE_INDEX][0] == "1"


def test_plot_option(input_csv, tmp_path):
    pytest.importorskip("matplotlib")
    out = tmp_path / "out.csv"
    png = tmp_path / "chart.png"
    assert main([str(input_csv), str(out), "--plot", str(png)]) == 0
    assert png.exists()


def test_parser_defaults():
    args = build_arg_parser().parse_args(["in.csv", "out.csv"])
    assert args.k == 2.0
    assert args.gap_ms == 120.0
    assert args.min_displacement == 100.0
    assert args.min_line_duration == 300.0
    assert args.smoothing == "gaussian"
    assert not args.ignore_line_context
