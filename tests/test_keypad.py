"""Keypad latches.

NOTE: test_and_reset() clearing the key is a known deviation from real
CHIP-8 hardware, kept for input sources without key-release events.
"""

from catchip8.keypad import Keypad


class TestKeypad:

    def test_starts_up(self):
        assert not any(Keypad().keys)

    def test_press_latches(self):
        pad = Keypad()
        pad.press(5)
        assert pad.is_pressed(5)
        assert pad.is_pressed(5)  # peeking does not consume

    def test_release(self):
        pad = Keypad()
        pad.press(0xA)
        pad.release(0xA)
        assert not pad.is_pressed(0xA)

    def test_out_of_range_ignored(self):
        pad = Keypad()
        pad.press(16)
        pad.press(-1)
        pad.release(99)
        assert not any(pad.keys)

    def test_test_and_reset_consumes_press(self):
        """Deviation from hardware: reading a pressed key releases it"""
        pad = Keypad()
        pad.press(3)
        assert pad.test_and_reset(3)
        assert not pad.is_pressed(3)
        assert not pad.test_and_reset(3)

    def test_test_and_reset_masks_index(self):
        pad = Keypad()
        pad.press(0x2)
        assert pad.test_and_reset(0x12)

    def test_release_all(self):
        pad = Keypad()
        for k in range(16):
            pad.press(k)
        pad.release_all()
        assert not any(pad.keys)
