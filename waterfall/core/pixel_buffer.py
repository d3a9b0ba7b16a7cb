#!/usr/bin/env python3
"""
RGB pixel buffer with the compositing operations used by the renderer.
Pixels are stored in a flat row-major list indexed by y * width + x.
"""

import logging
from pathlib import Path
from typing import List, Union

from PIL import Image

from .color import BLACK, Color
from .errors import CodecError

logger = logging.getLogger('waterfall.pixel_buffer')


class PixelBuffer:
    """Fixed-size RGB grid, initialized black"""

    def __init__(self, width: int, height: int):
        if width < 0 or height < 0:
            raise ValueError(f"Invalid buffer size: {width}x{height}")
        self.width = width
        self.height = height
        self.pixels: List[Color] = [BLACK] * (width * height)

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height})"

    def copy(self) -> 'PixelBuffer':
        other = PixelBuffer(self.width, self.height)
        other.pixels = list(self.pixels)
        return other

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_pixel(self, x: int, y: int) -> Color:
        if not self.in_bounds(x, y):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        return self.pixels[y * self.width + x]

    def set_pixel(self, x: int, y: int, color: Color):
        """Set one pixel; coordinates outside the buffer are clipped"""
        if self.in_bounds(x, y):
            self.pixels[y * self.width + x] = color

    def overlay(self, other: 'PixelBuffer', x: int, y: int):
        """
        Composite another buffer onto this one with its top-left at (x, y).

        Black source pixels are transparent. Source pixels landing outside
        this buffer are dropped one by one.
        """
        for sy in range(other.height):
            dy = y + sy
            if not 0 <= dy < self.height:
                continue
            src_row = sy * other.width
            dst_row = dy * self.width
            for sx in range(other.width):
                pixel = other.pixels[src_row + sx]
                if pixel == BLACK:
                    continue
                dx = x + sx
                if 0 <= dx < self.width:
                    self.pixels[dst_row + dx] = pixel

    def horizontal_line(self, y: int, color: Color):
        if not 0 <= y < self.height:
            raise IndexError(f"Row {y} outside buffer of height {self.height}")
        start = y * self.width
        self.pixels[start:start + self.width] = [color] * self.width

    def vertical_line(self, x: int, color: Color):
        if not 0 <= x < self.width:
            raise IndexError(f"Column {x} outside buffer of width {self.width}")
        for y in range(self.height):
            self.pixels[y * self.width + x] = color

    def to_bytes(self) -> bytes:
        """Interleaved R,G,B bytes, row-major, no alpha"""
        return bytes(channel for pixel in self.pixels for channel in pixel)

    def to_image(self) -> Image.Image:
        return Image.frombytes('RGB', (self.width, self.height), self.to_bytes())

    def serialize(self, path: Union[str, Path]):
        """Encode the buffer as an 8-bit RGB PNG at path"""
        if self.width == 0 or self.height == 0:
            raise CodecError(f"Cannot encode empty {self.width}x{self.height} image")

        try:
            image = self.to_image()
            image.save(str(path), format='PNG')
        except (OSError, ValueError) as e:
            raise CodecError(f"Failed to write PNG {path}: {e}") from e

        logger.debug(f"Wrote {self.width}x{self.height} PNG to {path}")
