#!/usr/bin/env python3
"""
Core module for waterfall - histogram store, color mapping, compositing and rendering.
"""

from .errors import RenderError, CodecError, RasterizationError, GeometryMismatchError
from .config import WaterfallConfig
from .color import HSL, color_for_count, hsl_for_count, hsl_to_rgb, KNEE
from .pixel_buffer import PixelBuffer
from .glyphs import GlyphRasterizer
from .labels import Label, LABELS, LabelCursor, time_label, is_gridline_row
from .heatmap import Bucket, Histogram, Heatmap, bucket_values
from .data_source import SnapshotSource
from .renderer import Waterfall, WaterfallRenderer, RenderState, RenderStats, find_max, render
from .legend import color_scale

__all__ = [
    'RenderError',
    'CodecError',
    'RasterizationError',
    'GeometryMismatchError',
    'WaterfallConfig',
    'HSL',
    'color_for_count',
    'hsl_for_count',
    'hsl_to_rgb',
    'KNEE',
    'PixelBuffer',
    'GlyphRasterizer',
    'Label',
    'LABELS',
    'LabelCursor',
    'time_label',
    'is_gridline_row',
    'Bucket',
    'Histogram',
    'Heatmap',
    'bucket_values',
    'SnapshotSource',
    'Waterfall',
    'WaterfallRenderer',
    'RenderState',
    'RenderStats',
    'find_max',
    'render',
    'color_scale',
]
