"""
Renderer-side screen state.

The renderer never reads the engine's framebuffer every frame; it keeps
its own copy and patches it from the FrameUpdates the engine hands out.
Only a full-redraw request makes it copy the framebuffer wholesale.
"""

import numpy as np

from .constants import DISPLAY_H, DISPLAY_W
from .framebuffer import Framebuffer, FrameUpdate


class ScreenMirror:
    """Renderer copy of the 64x32 display"""

    def __init__(self):
        self.pixels = np.zeros((DISPLAY_H, DISPLAY_W), dtype=np.uint8)
        self.dirty = True

    def apply(self, update: FrameUpdate, framebuffer: Framebuffer) -> bool:
        """Bring the mirror up to date. Returns True if this update changed anything."""
        changed = update.full_redraw or bool(update.pixels)
        if update.full_redraw:
            self.pixels[:] = framebuffer.pixels

        for x, y, on in update.pixels:
            self.pixels[y, x] = 1 if on else 0

        if changed:
            self.dirty = True
        return changed


def box_blur(arr: np.ndarray, passes: int = 1) -> np.ndarray:
    """Fast box blur using rolling averages"""
    a = arr.astype(np.float32)
    for _ in range(passes):
        # Horizontal blur
        a = (np.roll(a, 1, axis=1) + a + np.roll(a, -1, axis=1)) / 3.0
        # Vertical blur
        a = (np.roll(a, 1, axis=0) + a + np.roll(a, -1, axis=0)) / 3.0
    return a
