#!/usr/bin/env python3
"""
Exception types raised while building and rendering a waterfall.
"""


class RenderError(Exception):
    """Base class for failures that abort a render call"""


class CodecError(RenderError):
    """The image codec rejected the buffer or the file could not be written"""


class RasterizationError(RenderError):
    """The embedded font could not be loaded or a label could not be laid out"""


class GeometryMismatchError(RenderError, ValueError):
    """Two stores (or slices of one store) disagree on slice/bucket counts"""
