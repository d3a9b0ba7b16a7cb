#!/usr/bin/env python3
"""
Waterfall rendering.

Walks a Heatmap three times (max scan, color fill, annotation) into one
PixelBuffer and writes the result as a PNG. Rows are time slices, columns
are latency buckets.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .color import BLACK, color_for_count
from .config import WaterfallConfig
from .data_source import SnapshotSource
from .glyphs import GlyphRasterizer
from .heatmap import Heatmap
from .labels import LabelCursor, is_gridline_row, time_label
from .pixel_buffer import PixelBuffer


class RenderState(Enum):
    IDLE = 'idle'
    MAX_SCAN = 'max_scan'
    COLOR_FILL = 'color_fill'
    ANNOTATE = 'annotate'
    SERIALIZED = 'serialized'
    DONE = 'done'


@dataclass
class RenderStats:
    """Summary of one render call"""
    width: int
    height: int
    max_count: int
    total: int
    time_labels: int
    latency_labels: int
    elapsed: float


def find_max(heatmap: Heatmap) -> int:
    """Largest bucket count in the store, 0 when it is empty"""
    max_count = 0
    for histogram in heatmap.slices:
        for bucket in histogram:
            if bucket.count > max_count:
                max_count = bucket.count
    return max_count


class WaterfallRenderer:
    """Renders a Heatmap into an annotated PNG"""

    def __init__(self, heatmap: Heatmap,
                 rasterizer: Optional[GlyphRasterizer] = None,
                 logger: Optional[logging.Logger] = None):
        self.heatmap = heatmap
        self.rasterizer = rasterizer or GlyphRasterizer()
        self.logger = logger or logging.getLogger('waterfall.renderer')
        self.state = RenderState.IDLE
        self.buffer: Optional[PixelBuffer] = None

    def render(self, path: Union[str, Path]) -> RenderStats:
        """
        Render the store to a PNG file.

        Raises:
            GeometryMismatchError: slices disagree on their bucket layout
            RasterizationError: a label could not be drawn
            CodecError: the PNG could not be encoded or written
        """
        start = time.time()
        self.heatmap.check_geometry()

        try:
            self.state = RenderState.MAX_SCAN
            max_count = find_max(self.heatmap)
            self.logger.debug(f"Max bucket count: {max_count}")

            self.state = RenderState.COLOR_FILL
            buffer = self.fill(max_count)

            self.state = RenderState.ANNOTATE
            time_labels, latency_labels = self.annotate(buffer)

            self.state = RenderState.SERIALIZED
            buffer.serialize(path)
        except Exception:
            self.state = RenderState.IDLE
            raise

        self.state = RenderState.DONE
        stats = RenderStats(
            width=buffer.width,
            height=buffer.height,
            max_count=max_count,
            total=self.heatmap.total(),
            time_labels=time_labels,
            latency_labels=latency_labels,
            elapsed=time.time() - start,
        )
        self.logger.info(
            f"Rendered {stats.width}x{stats.height} waterfall to {path} in {stats.elapsed:.3f}s"
        )
        return stats

    def fill(self, max_count: int) -> PixelBuffer:
        """Create the buffer and color every cell by its density"""
        self.buffer = PixelBuffer(self.heatmap.histogram_buckets, self.heatmap.num_slices)
        for y, histogram in enumerate(self.heatmap.slices):
            for x, bucket in enumerate(histogram):
                self.buffer.set_pixel(x, y, color_for_count(bucket.count, max_count))
        return self.buffer

    def annotate(self, buffer: PixelBuffer):
        """
        Draw time labels with horizontal gridlines on every minute row, and
        latency labels with vertical gridlines where a bucket first reaches
        each threshold. Latency thresholds are only checked on minute rows.

        Returns:
            Tuple of (time labels drawn, latency labels drawn)
        """
        cursor = LabelCursor()
        time_labels = 0
        latency_labels = 0

        for y, histogram in enumerate(self.heatmap.slices):
            if not is_gridline_row(y):
                continue
            for x, bucket in enumerate(histogram):
                if x == 0:
                    buffer.overlay(self.rasterizer.render(time_label(y)), x, y)
                    buffer.horizontal_line(y, BLACK)
                    time_labels += 1

                label = cursor.match(bucket.value)
                if label is not None:
                    buffer.overlay(self.rasterizer.render(label.text), x, y)
                    buffer.vertical_line(x, BLACK)
                    latency_labels += 1
                    self.logger.debug(f"Label {label.text} at column {x}, row {y}")

        return time_labels, latency_labels


def render(heatmap: Heatmap, path: Union[str, Path]) -> RenderStats:
    return WaterfallRenderer(heatmap).render(path)


class Waterfall:
    """A Heatmap plus the operations to populate and render it"""

    def __init__(self, config: Optional[WaterfallConfig] = None):
        self.config = config or WaterfallConfig()
        self.heatmap = Heatmap(self.config)

    def load_file(self, path: Union[str, Path]):
        """Merge a snapshot file into this waterfall"""
        with SnapshotSource(self.config) as source:
            self.heatmap.merge(source.load(path))

    def save_file(self, path: Union[str, Path]):
        with SnapshotSource(self.config) as source:
            source.save(self.heatmap, path)

    def merge_heatmap(self, heatmap: Heatmap):
        self.heatmap.merge(heatmap)

    def find_max(self) -> int:
        return find_max(self.heatmap)

    def render_png(self, path: Union[str, Path]) -> RenderStats:
        return WaterfallRenderer(self.heatmap).render(path)
