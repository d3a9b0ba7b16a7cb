#!/usr/bin/env python3
"""
Text rasterization for waterfall annotations.
Renders strings with the embedded monospace font into white-on-black
PixelBuffers that can be overlaid onto the waterfall.
"""

import logging
import math
from pathlib import Path
from typing import Dict, Optional, Union

from PIL import Image, ImageDraw, ImageFont

from .color import WHITE
from .errors import RasterizationError
from .pixel_buffer import PixelBuffer

FONT_PATH = Path(__file__).resolve().parent / 'assets' / 'DejaVuSansMono.ttf'
LABEL_SIZE = 25  # pixels
COVERAGE_THRESHOLD = 0.25  # Minimum glyph coverage for a pixel to be drawn


class GlyphRasterizer:
    """Renders strings into monochrome PixelBuffers at a fixed pixel size"""

    def __init__(self, font_path: Union[str, Path] = FONT_PATH, size: int = LABEL_SIZE,
                 logger: Optional[logging.Logger] = None):
        self.font_path = Path(font_path)
        self.size = size
        self.logger = logger or logging.getLogger('waterfall.glyphs')
        self._font = None
        self._cache: Dict[str, PixelBuffer] = {}

    @property
    def font(self) -> ImageFont.FreeTypeFont:
        """Load the font on first use"""
        if self._font is None:
            try:
                self._font = ImageFont.truetype(str(self.font_path), size=self.size)
            except OSError as e:
                raise RasterizationError(f"Cannot load font {self.font_path}: {e}") from e
            self.logger.debug(f"Loaded font {self.font_path.name} at {self.size}px")
        return self._font

    def render(self, text: str) -> PixelBuffer:
        """
        Rasterize text with its top-left corner at the buffer origin.

        The buffer is as wide as the summed glyph advances and exactly
        `size` pixels tall. Covered pixels are white, everything else black.
        Each call returns its own copy, so callers may draw on the result.
        """
        if text in self._cache:
            return self._cache[text].copy()

        font = self.font
        try:
            width = math.ceil(font.getlength(text))
            height = math.ceil(self.size)
            buffer = PixelBuffer(width, height)
            if width > 0:
                mask = Image.new('L', (width, height), 0)
                ImageDraw.Draw(mask).text((0, 0), text, fill=255, font=font)
                cutoff = int(255 * COVERAGE_THRESHOLD)
                for i, coverage in enumerate(mask.tobytes()):
                    if coverage > cutoff:
                        buffer.pixels[i] = WHITE
        except (OSError, ValueError, UnicodeError) as e:
            raise RasterizationError(f"Cannot rasterize {text!r}: {e}") from e

        self._cache[text] = buffer
        return buffer.copy()
