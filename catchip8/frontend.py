#!/usr/bin/env python3
"""
Cat's CHIP-8 - pygame front end.

Drives the engine the same way every frame:
  poll keyboard -> run clock_hz / 60 instructions -> drain display deltas -> render

Controls:
  1234 / QWER / ASDF / ZXCV   CHIP-8 keypad (configurable)
  P    pause / resume
  N    single step while paused
  F5   reset
  F3   debug overlay
  ESC  exit
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import pygame
from rich.console import Console
from rich.logging import RichHandler

from .config import EmulatorConfig, load_config
from .constants import DISPLAY_H, DISPLAY_W, HARDWARE_STACK_DEPTH, TIMER_HZ
from .disasm import disassemble, disassemble_program
from .engine import Chip8Engine
from .errors import Chip8Error
from .render import ScreenMirror, box_blur

logger = logging.getLogger(__name__)
console = Console()

GLOW_UPSCALE = 4                        # Internal upscale for glow blur
STATUS_H = 25

COLORS = {
    'bg_dark': (15, 15, 25),
    'status_bg': (20, 20, 35),
    'text': (200, 200, 200),
    'text_dim': (120, 120, 140),
    'fault': (255, 100, 150),
}


def setup_logging(debug: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            RichHandler(
                rich_tracebacks=True,
                show_path=debug,
                show_level=True,
                console=console,
            ),
        ],
        force=True,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# GLOW EFFECT SYSTEM
# ═══════════════════════════════════════════════════════════════════════════════

class GlowRenderer:
    """Phosphor glow/bloom post-processing effect"""

    def __init__(self, scale: int, fg_color: Tuple[int, int, int],
                 bg_color: Tuple[int, int, int] = COLORS['bg_dark'],
                 bloom_strength: float = 0.55, blur_radius: int = 1):
        self.width = DISPLAY_W
        self.height = DISPLAY_H
        self.scale = scale
        self.fg_color = fg_color
        self.bg_color = bg_color
        self.bloom_strength = bloom_strength
        self.blur_radius = blur_radius
        self.final_size = (self.width * scale, self.height * scale)

    def render(self, pixels: np.ndarray) -> Tuple[pygame.Surface, pygame.Surface]:
        """
        Convert a (height, width) 0/1 pixel array to glow surfaces

        Returns:
            (base_surface, glow_surface) tuple
        """
        base = pixels.astype(np.float32)

        # Upscale for a smoother halo
        up = np.kron(base, np.ones((GLOW_UPSCALE, GLOW_UPSCALE), dtype=np.float32))
        glow = box_blur(up, passes=1 + self.blur_radius)
        glow = np.clip(glow * self.bloom_strength, 0.0, 1.0)

        # Colorize glow (surfarray wants width-major arrays)
        glow_rgb = np.zeros((up.shape[1], up.shape[0], 3), dtype=np.uint8)
        for i, c in enumerate(self.fg_color):
            glow_rgb[:, :, i] = (glow.T * c).astype(np.uint8)
        glow_surf = pygame.surfarray.make_surface(glow_rgb)

        # Colorize base pixels
        base_rgb = np.zeros((self.width, self.height, 3), dtype=np.uint8)
        for i, c in enumerate(self.fg_color):
            base_rgb[:, :, i] = (base.T * c).astype(np.uint8)
        base_surf = pygame.surfarray.make_surface(base_rgb)
        base_surf.set_colorkey((0, 0, 0))

        base_final = pygame.transform.scale(base_surf, self.final_size)
        glow_final = pygame.transform.smoothscale(glow_surf, self.final_size)
        return base_final, glow_final

    def create_background(self) -> pygame.Surface:
        """Create CRT-style background with scanlines"""
        surf = pygame.Surface(self.final_size)
        surf.fill(self.bg_color)

        scanline = tuple(min(255, c + 5) for c in self.bg_color)
        for y in range(0, self.final_size[1], 2):
            pygame.draw.line(surf, scanline, (0, y), (self.final_size[0], y))
        return surf


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN EMULATOR APPLICATION
# ═══════════════════════════════════════════════════════════════════════════════

class Chip8App:
    """Window, input and pacing around one Chip8Engine"""

    def __init__(self, program: bytes, config: EmulatorConfig, rom_name: str = ''):
        self.config = config
        self.rom_name = rom_name
        self.engine = Chip8Engine(
            program,
            stack_limit=HARDWARE_STACK_DEPTH if config.strict_stack else None,
        )

        pygame.init()
        pygame.display.set_caption("Cat's CHIP-8")

        self.window_w = DISPLAY_W * config.scale
        self.window_h = DISPLAY_H * config.scale + STATUS_H
        self.screen = pygame.display.set_mode((self.window_w, self.window_h))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 20)

        self.key_map = self._build_key_map(config.key_map)

        self.mirror = ScreenMirror()
        self.renderer = GlowRenderer(config.scale, config.fg_color,
                                     bloom_strength=config.bloom_strength,
                                     blur_radius=config.blur_radius)
        self.background = self.renderer.create_background()
        self._frame: Optional[Tuple[pygame.Surface, pygame.Surface]] = None

        self.running = True
        self.paused = False
        self.show_debug = False
        self.cycles_per_frame = max(1, config.clock_hz // TIMER_HZ)
        self.status = f"Running: {rom_name}" if rom_name else "Running"

    @staticmethod
    def _build_key_map(names: Dict[str, int]) -> Dict[int, int]:
        """Translate key names ('q', '4', ...) to pygame key codes"""
        key_map = {}
        for name, index in names.items():
            try:
                key_map[pygame.key.key_code(name)] = index
            except ValueError:
                logger.warning("Unknown key name %r in keyboard layout", name)
        return key_map

    # --- Controls ---

    def _toggle_pause(self):
        self.paused = not self.paused
        if self.paused:
            # latched presses do not carry over a pause
            self.engine.keypad.release_all()
        self.status = "Paused" if self.paused else "Running"

    def _step(self):
        """Single step execution"""
        if self.paused:
            self._run_cycles(1)
            self.status = f"Step - PC: ${self.engine.registers.PC:03X}"

    def _reset(self):
        self.engine.reset()
        self.paused = False
        self.status = "Reset"

    def handle_events(self):
        """Process input events"""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_p:
                    self._toggle_pause()
                elif event.key == pygame.K_n:
                    self._step()
                elif event.key == pygame.K_F3:
                    self.show_debug = not self.show_debug
                elif event.key in self.key_map:
                    self.engine.keypad.press(self.key_map[event.key])
                elif event.key == pygame.K_F5:
                    self._reset()

            elif event.type == pygame.KEYUP:
                if event.key in self.key_map:
                    self.engine.keypad.release(self.key_map[event.key])

    def _run_cycles(self, count: int):
        fault = self.engine.run(count)
        if fault is not None:
            self.paused = True
            self.status = f"HALTED - {fault}"

    def update(self):
        """Run one frame's worth of CPU cycles"""
        if not self.paused and not self.engine.halted:
            self._run_cycles(self.cycles_per_frame)

    def render(self):
        """Render display"""
        self.mirror.apply(self.engine.drain(), self.engine.framebuffer)
        if self.mirror.dirty or self._frame is None:
            self._frame = self.renderer.render(self.mirror.pixels)
            self.mirror.dirty = False

        base_surf, glow_surf = self._frame
        self.screen.fill(COLORS['bg_dark'])
        self.screen.blit(self.background, (0, 0))
        self.screen.blit(glow_surf, (0, 0), special_flags=pygame.BLEND_ADD)
        self.screen.blit(base_surf, (0, 0))

        if self.show_debug:
            self._render_debug()
        self._render_status()

        pygame.display.flip()

    def _render_status(self):
        rect = pygame.Rect(0, self.window_h - STATUS_H, self.window_w, STATUS_H)
        pygame.draw.rect(self.screen, COLORS['status_bg'], rect)
        color = COLORS['fault'] if self.engine.halted else COLORS['text_dim']
        text_surf = self.font.render(self.status, True, color)
        self.screen.blit(text_surf, (10, rect.y + 5))

    def _render_debug(self):
        """Render debug information overlay"""
        regs = self.engine.registers

        overlay = pygame.Surface((220, 150), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 180))
        self.screen.blit(overlay, (self.window_w - 230, 5))

        lines = [
            f"PC: ${regs.PC:03X}  I: ${regs.I:03X}",
            f"SP: {len(regs.stack)}  DT: {self.engine.delay_timer.get_value():02X}"
            f"  ST: {self.engine.state.sound_timer:02X}",
            "V0-V7: " + " ".join(f"{v:02X}" for v in regs.V[:8]),
            "V8-VF: " + " ".join(f"{v:02X}" for v in regs.V[8:]),
            f"OP: ${self.engine.fetch():04X} {disassemble(self.engine.fetch())}",
            f"Cycles: {self.engine.cycles}",
        ]
        for i, line in enumerate(lines):
            text = self.font.render(line, True, self.config.fg_color)
            self.screen.blit(text, (self.window_w - 225, 10 + i * 18))

    def run(self):
        """Main loop"""
        while self.running:
            self.handle_events()
            self.update()
            self.render()
            self.clock.tick(TIMER_HZ)

        pygame.quit()


# ═══════════════════════════════════════════════════════════════════════════════
# ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="catchip8", description="Cat's CHIP-8 emulator")
    parser.add_argument("rom", type=Path, help="CHIP-8 program image (.ch8)")
    parser.add_argument("--config", type=Path, help="TOML config file")
    parser.add_argument("--hz", type=int, help="instructions per second")
    parser.add_argument("--scale", type=int, help="window scale factor")
    parser.add_argument("--strict-stack", action="store_true", default=None,
                        help=f"cap the call stack at {HARDWARE_STACK_DEPTH} entries")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    parser.add_argument("--disassemble", action="store_true",
                        help="print a listing of the program and exit")
    parser.add_argument("-o", "--output", type=Path, help="write the listing to a file")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)

    try:
        config = load_config(args.config)
        if args.hz is not None:
            config.clock_hz = args.hz
        if args.scale is not None:
            config.scale = args.scale
        if args.strict_stack:
            config.strict_stack = True
        config.validate()

        program = args.rom.read_bytes()
    except (Chip8Error, OSError) as e:
        logger.error("%s", e)
        return 1

    if args.disassemble:
        listing = "\n".join(disassemble_program(program))
        if args.output:
            args.output.write_text(listing + "\n", encoding="utf-8")
            logger.info("Exported %s to %s", args.rom.name, args.output)
        else:
            print(listing)
        return 0

    print("Cat's CHIP-8 Emulator")
    print("  CHIP-8 Keypad: 1234 / QWER / ASDF / ZXCV")
    print("  P = Pause/Resume  N = Step  F5 = Reset  F3 = Debug  ESC = Exit")
    print()

    try:
        app = Chip8App(program, config, rom_name=args.rom.stem)
    except Chip8Error as e:
        logger.error("%s", e)
        return 1

    app.run()
    return 1 if app.engine.halted else 0


if __name__ == "__main__":
    sys.exit(main())
