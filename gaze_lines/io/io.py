# gaze_lines/io/io.py
"""CSV interchange: offline input reader and session export writer."""
from __future__ import annotations

import logging
import math
from os import PathLike
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from ..config import CsvFormat, ValidationMessages
from ..domain.dataset import GazeSample, Recording
from ..preprocessing.ingestion import SampleIngestor, to_optional_float, to_optional_int

logger = logging.getLogger(__name__)

PathType = Union[str, PathLike]

# Positional fallback when the header names nothing usable
DEFAULT_COLUMNS: Dict[str, int] = {"t": 0, "x": 1, "y": 2}


def detect_delimiter(first_line: str) -> str:
    """Tab when the first line has more tabs than commas, comma otherwise."""
    return "\t" if first_line.count("\t") > first_line.count(",") else ","


def is_header(tokens: Sequence[str]) -> bool:
    """A row is a header when its first token does not parse as a number."""
    if not tokens:
        return False
    try:
        float(tokens[0].strip())
    except ValueError:
        return True
    return False


def detect_columns(header: Sequence[str]) -> Dict[str, int]:
    """
    Fuzzy column role matching on a header row.

    - t:          contains "time", or exactly "t"
    - x:          contains "rawx", or exactly "x"
    - y:          contains "rawy", or exactly "y"
    - line_index: contains "lineindex", or exactly "line" / "answer"
    - char_index: contains "charindex"

    The first matching column wins a role. t / x / y fall back to 0 / 1 / 2.
    """
    columns: Dict[str, int] = {}
    for idx, raw_name in enumerate(header):
        name = raw_name.strip().lower()
        if "time" in name or name == "t":
            role = "t"
        elif "rawx" in name or name == "x":
            role = "x"
        elif "rawy" in name or name == "y":
            role = "y"
        elif "lineindex" in name or name in ("line", "answer"):
            role = "line_index"
        elif "charindex" in name:
            role = "char_index"
        else:
            continue
        columns.setdefault(role, idx)

    for role, fallback in DEFAULT_COLUMNS.items():
        columns.setdefault(role, fallback)
    return columns


def read_gaze_table(path: PathType) -> pd.DataFrame:
    """
    Read an offline gaze file into a DataFrame with columns
    ``t, x, y, line_index, char_index`` (raw timestamps, NaN where missing).

    Rows with fewer than three fields or a non-numeric time are skipped.
    """
    text = Path(path).read_text(encoding="utf-8-sig")
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return pd.DataFrame(columns=["t", "x", "y", "line_index", "char_index"])

    delimiter = detect_delimiter(lines[0].strip())
    first_tokens = [tok.strip() for tok in lines[0].strip().split(delimiter)]
    header = is_header(first_tokens)
    if header:
        columns = detect_columns(first_tokens)
        body = lines[1:]
        logger.info("Header detected (delimiter %r), columns: %s", delimiter, columns)
    else:
        columns = dict(DEFAULT_COLUMNS)
        body = lines
        logger.info("No header detected, using columns t=0, x=1, y=2 (delimiter %r)", delimiter)

    def field(parts: List[str], role: str) -> Optional[str]:
        idx = columns.get(role)
        if idx is None or idx >= len(parts):
            return None
        return parts[idx]

    rows = []
    skipped = 0
    for line_no, line in enumerate(body, start=2 if header else 1):
        parts = [p.strip() for p in line.split(delimiter)]
        if len(parts) < CsvFormat.MIN_FIELDS:
            skipped += 1
            logger.debug("Skipping line %s: %s fields", line_no, len(parts))
            continue
        t = to_optional_float(field(parts, "t"))
        if t is None:
            skipped += 1
            logger.debug("Skipping line %s: non-numeric time", line_no)
            continue
        rows.append(
            {
                "t": t,
                "x": to_optional_float(field(parts, "x")),
                "y": to_optional_float(field(parts, "y")),
                "line_index": to_optional_int(field(parts, "line_index")),
                "char_index": to_optional_int(field(parts, "char_index")),
            }
        )

    if skipped:
        logger.warning("%s: skipped %s malformed rows", path, skipped)

    df = pd.DataFrame(rows, columns=["t", "x", "y", "line_index", "char_index"])
    df["line_index"] = df["line_index"].astype("Int64")
    df["char_index"] = df["char_index"].astype("Int64")
    return df


def read_gaze_csv(path: PathType, recording_id: Optional[str] = None) -> Recording:
    """
    Read an offline gaze file into a Recording.

    Timestamps become relative to the first row; line and char index are
    carried forward over rows that leave them blank.
    """
    df = read_gaze_table(path)
    ingestor = SampleIngestor()
    samples: List[GazeSample] = []
    for row in df.itertuples(index=False):
        sample = ingestor.ingest(
            row.t,
            _none_if_na(row.x),
            _none_if_na(row.y),
            line_index=_int_or_none(row.line_index),
            char_index=_int_or_none(row.char_index),
        )
        if sample is not None:
            samples.append(sample)
    logger.info("Loaded %s samples from %s", len(samples), path)
    return Recording(id=recording_id or Path(path).stem, samples=samples, source_path=str(path))


def _none_if_na(value):
    return None if pd.isna(value) else value


def _int_or_none(value) -> Optional[int]:
    return None if pd.isna(value) else int(value)


def samples_to_dataframe(samples: Sequence[GazeSample]) -> pd.DataFrame:
    """Typed DataFrame in export column order (NaN / <NA> where absent)."""
    data = {
        CsvFormat.TIME: [s.t for s in samples],
        CsvFormat.RAW_X: [s.x for s in samples],
        CsvFormat.RAW_Y: [s.y for s in samples],
        CsvFormat.SMOOTH_X: [s.gx for s in samples],
        CsvFormat.SMOOTH_Y: [s.gy for s in samples],
        CsvFormat.VEL_X: [s.vx for s in samples],
        CsvFormat.VEL_Y: [s.vy for s in samples],
        CsvFormat.TYPE: [s.type.value for s in samples],
        CsvFormat.RETURN_SWEEP: [s.is_return_sweep for s in samples],
        CsvFormat.LINE_INDEX: [s.line_index for s in samples],
        CsvFormat.CHAR_INDEX: [s.char_index for s in samples],
        CsvFormat.ALGO_LINE_INDEX: [s.detected_line_index for s in samples],
        CsvFormat.EXTREMA: [s.extrema.value if s.extrema is not None else None for s in samples],
    }
    df = pd.DataFrame(data, columns=list(CsvFormat.EXPORT_COLUMNS))
    for col in (
        CsvFormat.TIME,
        CsvFormat.RAW_X,
        CsvFormat.RAW_Y,
        CsvFormat.SMOOTH_X,
        CsvFormat.SMOOTH_Y,
        CsvFormat.VEL_X,
        CsvFormat.VEL_Y,
    ):
        df[col] = df[col].astype(float)
    for col in (CsvFormat.LINE_INDEX, CsvFormat.CHAR_INDEX, CsvFormat.ALGO_LINE_INDEX):
        df[col] = df[col].astype("Int64")
    df[CsvFormat.RETURN_SWEEP] = df[CsvFormat.RETURN_SWEEP].astype(bool)
    return df


def _format_plain(value) -> str:
    if pd.isna(value):
        return ""
    number = float(value)
    if not math.isfinite(number):
        return ""
    return str(int(number)) if number.is_integer() else repr(number)


def _format_fixed(decimals: int):
    def fmt(value) -> str:
        if pd.isna(value):
            return ""
        return f"{float(value):.{decimals}f}"
    return fmt


def _format_int(value) -> str:
    return "" if pd.isna(value) else str(int(value))


def format_export_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    String formatting of the interchange format:
    positions 2 decimals, velocities 4 decimals, booleans TRUE / empty,
    absent values empty.
    """
    missing = [c for c in CsvFormat.EXPORT_COLUMNS if c not in df.columns]
    if CsvFormat.TIME in missing:
        raise ValueError(ValidationMessages.MISSING_TIME_COLUMN)
    if missing:
        raise ValueError(f"DataFrame is missing export columns: {missing}")

    positions = _format_fixed(CsvFormat.POSITION_DECIMALS)
    velocities = _format_fixed(CsvFormat.VELOCITY_DECIMALS)

    out = pd.DataFrame(index=df.index)
    out[CsvFormat.TIME] = df[CsvFormat.TIME].map(_format_plain)
    out[CsvFormat.RAW_X] = df[CsvFormat.RAW_X].map(_format_plain)
    out[CsvFormat.RAW_Y] = df[CsvFormat.RAW_Y].map(_format_plain)
    out[CsvFormat.SMOOTH_X] = df[CsvFormat.SMOOTH_X].map(positions)
    out[CsvFormat.SMOOTH_Y] = df[CsvFormat.SMOOTH_Y].map(positions)
    out[CsvFormat.VEL_X] = df[CsvFormat.VEL_X].map(velocities)
    out[CsvFormat.VEL_Y] = df[CsvFormat.VEL_Y].map(velocities)
    out[CsvFormat.TYPE] = df[CsvFormat.TYPE].fillna("").astype(str)
    out[CsvFormat.RETURN_SWEEP] = (
        df[CsvFormat.RETURN_SWEEP].fillna(False).astype(bool).map(lambda flag: CsvFormat.TRUE_VALUE if flag else "")
    )
    out[CsvFormat.LINE_INDEX] = df[CsvFormat.LINE_INDEX].map(_format_int)
    out[CsvFormat.CHAR_INDEX] = df[CsvFormat.CHAR_INDEX].map(_format_int)
    out[CsvFormat.ALGO_LINE_INDEX] = df[CsvFormat.ALGO_LINE_INDEX].map(_format_int)
    out[CsvFormat.EXTREMA] = df[CsvFormat.EXTREMA].map(lambda v: "" if pd.isna(v) else str(v))
    return out


def write_gaze_csv(samples: Sequence[GazeSample], path: PathType) -> None:
    """Write samples in the interchange CSV format."""
    format_export_frame(samples_to_dataframe(samples)).to_csv(path, index=False)
