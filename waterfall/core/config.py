#!/usr/bin/env python3
"""
Configuration for waterfall rendering.
Mirrors the store geometry: number of time slices, bucket precision and
the number of seconds each slice (image row) represents.
"""

from dataclasses import dataclass, replace

DEFAULT_NUM_SLICES = 300
DEFAULT_PRECISION = 2
DEFAULT_SLICE_DURATION = 1
DEFAULT_MAX_VALUE = 60_000_000_000  # 60s in nanoseconds

MAX_PRECISION = 6


@dataclass(frozen=True)
class WaterfallConfig:
    """Store geometry used when building or loading a waterfall"""
    num_slices: int = DEFAULT_NUM_SLICES  # Image height, one row per slice
    precision: int = DEFAULT_PRECISION  # Significant digits per bucket
    slice_duration: int = DEFAULT_SLICE_DURATION  # Seconds per slice
    max_value: int = DEFAULT_MAX_VALUE  # Highest trackable latency (ns)

    def __post_init__(self):
        if self.num_slices <= 0:
            raise ValueError(f"num_slices must be positive, got {self.num_slices}")
        if not 1 <= self.precision <= MAX_PRECISION:
            raise ValueError(f"precision must be in 1..{MAX_PRECISION}, got {self.precision}")
        if self.slice_duration <= 0:
            raise ValueError(f"slice_duration must be positive, got {self.slice_duration}")
        if self.max_value < 0:
            raise ValueError(f"max_value cannot be negative, got {self.max_value}")

    def with_num_slices(self, count: int) -> 'WaterfallConfig':
        return replace(self, num_slices=count)

    def with_slice_duration(self, seconds: int) -> 'WaterfallConfig':
        return replace(self, slice_duration=seconds)

    def with_precision(self, precision: int) -> 'WaterfallConfig':
        return replace(self, precision=precision)
