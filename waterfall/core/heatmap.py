#!/usr/bin/env python3
"""
Time-series latency histogram store.

A Heatmap is a fixed number of time slices, each holding a Histogram of
log-linear latency buckets. Slices are kept in a list so every rendering
pass can walk the full store independently.
"""

import bisect
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .config import WaterfallConfig
from .errors import GeometryMismatchError

logger = logging.getLogger('waterfall.heatmap')


def bucket_values(precision: int, max_value: int) -> Tuple[int, ...]:
    """
    Generate log-linear bucket lower bounds in nanoseconds.

    Values below 10**precision get one bucket each. Every decade above that
    is split into 9 * 10**(precision - 1) equal-width buckets, so each bucket
    keeps `precision` significant digits.
    """
    linear_limit = 10 ** precision
    values = list(range(min(linear_limit, max_value + 1)))

    exponent = precision
    while 10 ** exponent <= max_value:
        step = 10 ** (exponent - precision + 1)
        upper = 10 ** (exponent + 1)
        for value in range(10 ** exponent, upper, step):
            if value > max_value:
                break
            values.append(value)
        exponent += 1

    return tuple(values)


@dataclass(frozen=True)
class Bucket:
    """Lower latency bound (ns) and number of observations"""
    value: int
    count: int


class Histogram:
    """Ordered latency buckets for one time slice"""

    def __init__(self, values: Sequence[int]):
        self.values = tuple(values)
        if any(a >= b for a, b in zip(self.values, self.values[1:])):
            raise GeometryMismatchError("Bucket lower bounds must be strictly increasing")
        self.counts: List[int] = [0] * len(self.values)

    def __len__(self):
        return len(self.values)

    def __iter__(self) -> Iterator[Bucket]:
        for value, count in zip(self.values, self.counts):
            yield Bucket(value, count)

    @property
    def buckets(self) -> List[Bucket]:
        return list(self)

    def index_of(self, value: int) -> int:
        """Index of the bucket whose range contains value"""
        if value < 0:
            raise ValueError(f"Latency cannot be negative: {value}")
        return max(0, bisect.bisect_right(self.values, value) - 1)

    def increment(self, value: int, count: int = 1):
        self.counts[self.index_of(value)] += count

    def total(self) -> int:
        return sum(self.counts)

    def max_count(self) -> int:
        return max(self.counts, default=0)

    def merge(self, other: 'Histogram'):
        if self.values != other.values:
            raise GeometryMismatchError(
                f"Cannot merge histograms with {len(self)} and {len(other)} buckets"
            )
        for i, count in enumerate(other.counts):
            self.counts[i] += count


class Heatmap:
    """Fixed-geometry series of latency histograms, one per time slice"""

    def __init__(self, config: Optional[WaterfallConfig] = None,
                 values: Optional[Sequence[int]] = None):
        self.config = config or WaterfallConfig()
        if values is None:
            values = bucket_values(self.config.precision, self.config.max_value)
        self.slices: List[Histogram] = [Histogram(values) for _ in range(self.config.num_slices)]
        self.dropped = 0

    @classmethod
    def from_rows(cls, values: Sequence[int], rows: Sequence[Sequence[int]],
                  slice_duration: int = 1) -> 'Heatmap':
        """
        Build a store from explicit bucket bounds and per-slice counts.

        The config records the highest bound as max_value; precision only
        shapes generated layouts and is left at its default.
        """
        if not values:
            raise GeometryMismatchError("At least one bucket bound is required")
        config = WaterfallConfig(num_slices=len(rows), slice_duration=slice_duration,
                                 max_value=values[-1])
        heatmap = cls(config, values=values)
        for histogram, counts in zip(heatmap.slices, rows):
            if len(counts) != len(values):
                raise GeometryMismatchError(
                    f"Row has {len(counts)} counts, expected {len(values)}"
                )
            histogram.counts = list(counts)
        return heatmap

    @property
    def num_slices(self) -> int:
        return len(self.slices)

    @property
    def histogram_buckets(self) -> int:
        return len(self.slices[0]) if self.slices else 0

    @property
    def slice_duration(self) -> int:
        return self.config.slice_duration

    def __iter__(self) -> Iterator[Histogram]:
        return iter(self.slices)

    def slice_index(self, offset_seconds: float) -> int:
        return int(offset_seconds // self.config.slice_duration)

    def increment(self, offset_seconds: float, value: int, count: int = 1) -> bool:
        """
        Record count observations of latency value at offset_seconds into
        the capture. Observations outside the slice window are dropped.
        """
        index = self.slice_index(offset_seconds)
        if not 0 <= index < self.num_slices:
            self.dropped += count
            return False
        self.slices[index].increment(value, count)
        return True

    def geometry(self) -> Tuple[int, int]:
        return (self.num_slices, self.histogram_buckets)

    def check_geometry(self):
        """Fail if any slice disagrees with the first slice's bucket layout"""
        if not self.slices:
            return
        expected = self.slices[0].values
        for index, histogram in enumerate(self.slices):
            if histogram.values != expected:
                raise GeometryMismatchError(
                    f"Slice {index} has {len(histogram)} buckets, expected {len(expected)}"
                )

    def merge(self, other: 'Heatmap'):
        """Add other's counts into this store bucket by bucket"""
        if self.geometry() != other.geometry():
            raise GeometryMismatchError(
                f"Cannot merge heatmap {other.geometry()} into {self.geometry()} "
                "(slices, buckets)"
            )
        for mine, theirs in zip(self.slices, other.slices):
            mine.merge(theirs)
        self.dropped += other.dropped
        logger.debug(f"Merged heatmap with {other.total()} observations")

    def total(self) -> int:
        return sum(histogram.total() for histogram in self.slices)
