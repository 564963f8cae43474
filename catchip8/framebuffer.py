"""
64x32 monochrome display with XOR sprite drawing.

Pixels live in a (height, width) uint8 numpy array. Every pixel a draw
flips is queued as a PixelDelta for the renderer. Clearing the screen
drops the queue and raises a full-redraw flag instead.
"""

from typing import Iterable, List, NamedTuple

import numpy as np

from .constants import DISPLAY_H, DISPLAY_W


class PixelDelta(NamedTuple):
    x: int
    y: int
    on: bool


class FrameUpdate(NamedTuple):
    """Everything the renderer needs since the previous drain"""
    full_redraw: bool
    pixels: List[PixelDelta]


class Framebuffer:
    """CHIP-8 display state plus pending render deltas"""

    width = DISPLAY_W
    height = DISPLAY_H

    def __init__(self):
        self.pixels = np.zeros((DISPLAY_H, DISPLAY_W), dtype=np.uint8)
        self._pending: List[PixelDelta] = []
        self._full_redraw = True  # renderer starts out of sync

    def clear(self):
        """Turn every pixel off and ask the renderer for a full redraw"""
        self.pixels.fill(0)
        self._pending.clear()
        self._full_redraw = True

    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        """XOR a sprite onto the screen with its top-left corner at (x, y).

        Each row byte is drawn MSB first. Pixels that land outside the
        64x32 grid are clipped, not wrapped.

        Returns True if any pixel was turned off (collision).
        """
        collision = False

        for row, sprite_byte in enumerate(rows):
            py = y + row
            if py >= DISPLAY_H:
                break

            for col in range(8):
                px = x + col
                if px >= DISPLAY_W:
                    break

                if sprite_byte & (0x80 >> col):
                    if self.pixels[py, px]:
                        collision = True
                    self.pixels[py, px] ^= 1
                    self._pending.append(PixelDelta(px, py, bool(self.pixels[py, px])))

        return collision

    def is_on(self, x: int, y: int) -> bool:
        return bool(self.pixels[y, x])

    @property
    def needs_full_redraw(self) -> bool:
        return self._full_redraw

    def drain(self) -> FrameUpdate:
        """Hand pending deltas to the renderer and reset the queue"""
        update = FrameUpdate(self._full_redraw, self._pending)
        self._pending = []
        self._full_redraw = False
        return update
