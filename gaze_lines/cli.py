# gaze_lines/cli.py
"""Offline reprocessing tool: recorded gaze CSV in, annotated interchange CSV out."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import ComputationalConstants, ConfigBuilder
from .engine import GazeLineEngine
from .io import read_gaze_csv, write_gaze_csv

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    """
    CLI parser for the offline line detection tool.

    Responsibility:
      - Parsing and option descriptions only.
      - No business logic (SRP).
    """
    parser = argparse.ArgumentParser(
        prog="gaze-lines",
        description=(
            "Reprocess a recorded gaze CSV: gap fill-in, Gaussian smoothing, velocity, "
            "MAD return-sweep detection and per-line segmentation. Writes the "
            "session export CSV format."
        ),
    )
    parser.add_argument(
        "input",
        nargs="?",
        help=(
            "Input CSV/TSV with time, x, y and optional line index columns. "
            "Header and delimiter are detected automatically."
        ),
    )
    parser.add_argument("output", nargs="?", help="Output CSV path.")

    # Detector
    parser.add_argument(
        "--k",
        type=float,
        default=ComputationalConstants.DEFAULT_LINE_K,
        help="MAD threshold multiplier on leftward velocity (default: 2.0, live build: 1.5).",
    )
    parser.add_argument(
        "--gap-ms",
        type=float,
        default=ComputationalConstants.DEFAULT_SPIKE_GAP_MS,
        help="Merge spike runs closer than this many ms (default: 120).",
    )
    parser.add_argument(
        "--min-displacement",
        type=float,
        default=ComputationalConstants.DEFAULT_MIN_SWEEP_DISPLACEMENT_PX,
        help="Minimum leftward travel of a return sweep in px (default: 100).",
    )
    parser.add_argument(
        "--min-line-duration",
        type=float,
        default=ComputationalConstants.DEFAULT_MIN_LINE_DURATION_MS,
        help="Minimum ms between an accepted sweep and the next one (default: 300).",
    )
    parser.add_argument(
        "--adaptive-min-line-duration",
        action="store_true",
        help="Derive the minimum line duration from the line index column (half the shortest line).",
    )
    parser.add_argument(
        "--ignore-line-context",
        action="store_true",
        help="Do not cap the number of sweeps by the line index column.",
    )
    parser.add_argument(
        "--first-line-index",
        type=int,
        default=0,
        help="Value written to AlgoLineIndex for the first line (default: 0).",
    )

    # Preprocessing
    parser.add_argument(
        "--smoothing",
        choices=["gaussian", "none"],
        default="gaussian",
        help="Spatial smoothing before velocity (default: gaussian).",
    )
    parser.add_argument(
        "--sigma",
        type=float,
        default=ComputationalConstants.DEFAULT_SMOOTHING_SIGMA,
        help="Gaussian sigma in samples (default: 3).",
    )

    # Output
    parser.add_argument(
        "--plot",
        default=None,
        help="Optional PNG path for a debugging chart (requires matplotlib).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every rejected sweep candidate.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Runs the offline pipeline:

      1) load CSV
      2) gap fill-in, smoothing, velocity
      3) line detection
      4) write CSV (and optionally the chart)
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.input is None or args.output is None:
        parser.print_usage(sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ConfigBuilder.build_all_configs(args)
    except ValueError as exc:
        parser.error(str(exc))

    # 1) load
    try:
        recording = read_gaze_csv(args.input)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Cannot read %s: %s", args.input, exc)
        return 1

    # 2) + 3)
    result = GazeLineEngine().run(recording, config)
    lines = result.lines
    print(
        f"[Line Detection] {lines.line_count} lines, {len(lines.sweeps)} return sweeps "
        f"({len(lines.rejections)} candidates rejected) in {len(recording)} samples."
    )

    # 4) write
    write_gaze_csv(recording.samples, args.output)
    print(f"Results written to: {args.output}")

    if args.plot:
        from .evaluation.plotting import plot_session
        from .io import samples_to_dataframe

        plot_session(samples_to_dataframe(recording.samples), args.plot, title=recording.id)
        print(f"Plot written to: {args.plot}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
