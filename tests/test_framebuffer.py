"""XOR sprite drawing, clipping and render deltas."""

import numpy as np

from catchip8.framebuffer import Framebuffer, PixelDelta
from catchip8.render import ScreenMirror


class TestDrawSprite:

    def test_draws_msb_first(self):
        fb = Framebuffer()
        collision = fb.draw_sprite(0, 0, [0b10000001])
        assert not collision
        assert fb.is_on(0, 0)
        assert fb.is_on(7, 0)
        assert not fb.is_on(1, 0)

    def test_xor_round_trip(self):
        """Drawing the same sprite twice restores the screen and reports a collision"""
        fb = Framebuffer()
        rows = [0xF0, 0x90, 0xF0, 0x90, 0x90]
        before = fb.pixels.copy()
        assert not fb.draw_sprite(10, 5, rows)
        assert fb.draw_sprite(10, 5, rows)
        assert np.array_equal(fb.pixels, before)

    def test_collision_only_when_pixel_turned_off(self):
        fb = Framebuffer()
        fb.draw_sprite(0, 0, [0b11000000])
        assert not fb.draw_sprite(2, 0, [0b11000000])
        assert fb.draw_sprite(1, 0, [0b10000000])

    def test_clips_right_edge(self):
        fb = Framebuffer()
        fb.draw_sprite(60, 0, [0xFF])
        assert fb.pixels[0].sum() == 4
        assert not fb.is_on(0, 0)  # no wrap-around

    def test_clips_bottom_edge(self):
        fb = Framebuffer()
        fb.draw_sprite(0, 30, [0x80] * 5)
        assert fb.pixels[:, 0].sum() == 2
        assert not fb.is_on(0, 0)

    def test_fully_offscreen(self):
        fb = Framebuffer()
        assert not fb.draw_sprite(70, 40, [0xFF])
        assert fb.pixels.sum() == 0


class TestDeltas:

    def test_initial_drain_requests_full_redraw(self):
        fb = Framebuffer()
        update = fb.drain()
        assert update.full_redraw
        assert update.pixels == []
        assert not fb.drain().full_redraw

    def test_flipped_pixels_recorded(self):
        fb = Framebuffer()
        fb.drain()
        fb.draw_sprite(3, 4, [0b10100000])
        update = fb.drain()
        assert not update.full_redraw
        assert update.pixels == [PixelDelta(3, 4, True), PixelDelta(5, 4, True)]
        assert fb.drain().pixels == []

    def test_turning_off_recorded(self):
        fb = Framebuffer()
        fb.draw_sprite(0, 0, [0x80])
        fb.drain()
        fb.draw_sprite(0, 0, [0x80])
        assert fb.drain().pixels == [PixelDelta(0, 0, False)]

    def test_clear(self):
        """Clear turns every pixel off and replaces pending deltas with a full redraw"""
        fb = Framebuffer()
        fb.pixels.fill(1)
        fb.drain()
        fb.draw_sprite(0, 0, [0xFF])
        fb.clear()
        assert fb.pixels.sum() == 0
        assert fb.needs_full_redraw
        update = fb.drain()
        assert update.full_redraw
        assert update.pixels == []


class TestScreenMirror:

    def test_follows_deltas(self):
        fb = Framebuffer()
        mirror = ScreenMirror()
        fb.draw_sprite(8, 8, [0xF0, 0x90])
        mirror.apply(fb.drain(), fb)
        assert np.array_equal(mirror.pixels, fb.pixels)

        fb.draw_sprite(8, 8, [0xF0])
        mirror.apply(fb.drain(), fb)
        assert np.array_equal(mirror.pixels, fb.pixels)

    def test_resyncs_after_clear(self):
        fb = Framebuffer()
        mirror = ScreenMirror()
        fb.draw_sprite(0, 0, [0xFF] * 8)
        mirror.apply(fb.drain(), fb)
        fb.clear()
        fb.draw_sprite(20, 20, [0x80])
        mirror.apply(fb.drain(), fb)
        assert np.array_equal(mirror.pixels, fb.pixels)
        assert mirror.pixels.sum() == 1

    def test_apply_reports_only_its_own_changes(self):
        """apply() answers for the update it was given, not earlier ones"""
        fb = Framebuffer()
        mirror = ScreenMirror()
        assert mirror.apply(fb.drain(), fb)  # initial full redraw
        assert not mirror.apply(fb.drain(), fb)
        assert mirror.dirty  # still waiting for the renderer
        mirror.dirty = False
        fb.draw_sprite(1, 1, [0x80])
        assert mirror.apply(fb.drain(), fb)
        assert mirror.dirty
