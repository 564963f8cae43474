"""
16-key hex keypad.

Keys latch Down on a press event and stay down until released or until
a key-test instruction reads them. Reading through test_and_reset()
forces the key back Up. Real CHIP-8 hardware does not do this, but
front ends that never see key-release events (terminals, for one)
would otherwise leave every key stuck down.
"""

from typing import List

from .constants import NUM_KEYS


class Keypad:
    def __init__(self):
        self.keys: List[bool] = [False] * NUM_KEYS

    def press(self, key: int):
        """Handle key press"""
        if 0 <= key < NUM_KEYS:
            self.keys[key] = True

    def release(self, key: int):
        """Handle key release"""
        if 0 <= key < NUM_KEYS:
            self.keys[key] = False

    def is_pressed(self, key: int) -> bool:
        """Peek at a key without consuming the press"""
        return self.keys[key & 0xF]

    def test_and_reset(self, key: int) -> bool:
        """Return whether `key` is down, then force it Up"""
        key &= 0xF
        pressed = self.keys[key]
        self.keys[key] = False
        return pressed

    def release_all(self):
        self.keys = [False] * NUM_KEYS
