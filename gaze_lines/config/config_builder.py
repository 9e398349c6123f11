# gaze_lines/config/config_builder.py
"""Build configuration objects from CLI arguments.

Separates configuration construction from argument parsing (SRP).
"""
from __future__ import annotations

import argparse

from .config import (
    GazeLineConfig,
    LineDetectorConfig,
    PreprocessConfig,
    SpikeDetectorConfig,
)


class ConfigBuilder:
    """Builds configuration objects from parsed CLI arguments.

    Responsibilities:
        - Map CLI arguments to configuration dataclasses
        - Provide single source of truth for config construction
    """

    @staticmethod
    def build_preprocess_config(args: argparse.Namespace) -> PreprocessConfig:
        """Build preprocessing configuration from CLI arguments."""
        return PreprocessConfig(
            smoothing_mode=args.smoothing,
            smoothing_sigma=args.sigma,
        )

    @staticmethod
    def build_line_detector_config(args: argparse.Namespace) -> LineDetectorConfig:
        """Build line detector configuration from CLI arguments."""
        return LineDetectorConfig(
            spike=SpikeDetectorConfig(k=args.k, gap_ms=args.gap_ms),
            min_displacement_px=args.min_displacement,
            min_line_duration_ms=args.min_line_duration,
            adaptive_min_line_duration=args.adaptive_min_line_duration,
            use_line_context=not args.ignore_line_context,
            first_line_index=args.first_line_index,
        )

    @classmethod
    def build_all_configs(cls, args: argparse.Namespace) -> GazeLineConfig:
        """Build the aggregate configuration from CLI arguments."""
        return GazeLineConfig(
            preprocess=cls.build_preprocess_config(args),
            line_detector=cls.build_line_detector_config(args),
        )
