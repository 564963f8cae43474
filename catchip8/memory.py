"""
CHIP-8 4K memory image.

Flat bytearray with the font table copied to 0x050 at construction and
the program image at 0x200. Every access wraps modulo 4096; writes into
the font region are dropped so the glyphs stay intact for the lifetime
of the machine.
"""

import logging
from typing import Iterable

from .constants import (
    ADDRESS_MASK, FONT_END, FONT_START, FONTSET, GLYPH_SIZE,
    MAX_PROGRAM_SIZE, MEMORY_SIZE, PROGRAM_START,
)
from .errors import ProgramTooLargeError

logger = logging.getLogger(__name__)


class MemoryImage:
    """4096-byte address space holding font, program and runtime data"""

    def __init__(self):
        self._mem = bytearray(MEMORY_SIZE)
        self._mem[FONT_START:FONT_END] = FONTSET

    @classmethod
    def initialize(cls, program: Iterable[int]) -> 'MemoryImage':
        """Build a memory image with `program` loaded at PROGRAM_START.

        Raises ProgramTooLargeError before touching memory when the image
        would run past the end of RAM.
        """
        data = bytes(program)
        if len(data) > MAX_PROGRAM_SIZE:
            raise ProgramTooLargeError(len(data), MAX_PROGRAM_SIZE)

        image = cls()
        image._mem[PROGRAM_START:PROGRAM_START + len(data)] = data
        logger.debug("Loaded %d byte program at $%03X", len(data), PROGRAM_START)
        return image

    def __len__(self) -> int:
        return MEMORY_SIZE

    # --- Core read/write ---

    def read8(self, addr: int) -> int:
        return self._mem[addr & ADDRESS_MASK]

    def write8(self, addr: int, value: int):
        """Write one byte. Font bytes are read-only; writes there are dropped."""
        addr &= ADDRESS_MASK
        if FONT_START <= addr < FONT_END:
            logger.debug("Dropped write of $%02X to font byte $%03X", value & 0xFF, addr)
            return
        self._mem[addr] = value & 0xFF

    def read16(self, addr: int) -> int:
        """Read a big-endian instruction word"""
        return (self.read8(addr) << 8) | self.read8(addr + 1)

    def read_block(self, addr: int, length: int) -> bytes:
        """Read `length` bytes starting at `addr`, wrapping past 0xFFF"""
        return bytes(self.read8(addr + i) for i in range(length))

    @staticmethod
    def glyph_address(digit: int) -> int:
        """Address of the built-in sprite for hex digit `digit` (low nibble)"""
        return FONT_START + (digit & 0xF) * GLYPH_SIZE
