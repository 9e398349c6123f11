"""CSV interchange I/O."""

from .io import (
    detect_columns,
    detect_delimiter,
    format_export_frame,
    is_header,
    read_gaze_csv,
    read_gaze_table,
    samples_to_dataframe,
    write_gaze_csv,
)

__all__ = [
    "detect_columns",
    "detect_delimiter",
    "format_export_frame",
    "is_header",
    "read_gaze_csv",
    "read_gaze_table",
    "samples_to_dataframe",
    "write_gaze_csv",
]
