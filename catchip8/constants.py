"""
Machine constants for the CHIP-8 core.

Memory map:
  0x000-0x04F  unused (zeroed)
  0x050-0x09F  built-in hex font, 16 glyphs x 5 bytes (read-only)
  0x0A0-0x1FF  unused (zeroed)
  0x200-0xFFF  program image + runtime data
"""

MEMORY_SIZE = 4096                      # 4KB RAM
ADDRESS_MASK = MEMORY_SIZE - 1          # Addresses wrap modulo 4096
PROGRAM_START = 0x200                   # Programs load at 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

FONT_START = 0x050
GLYPH_SIZE = 5                          # Bytes per glyph
FONT_END = FONT_START + 16 * GLYPH_SIZE  # 0x0A0, exclusive

DISPLAY_W, DISPLAY_H = 64, 32           # CHIP-8 native resolution

NUM_REGISTERS = 16                      # V0-VF registers
FLAG_REGISTER = 0xF                     # VF: carry / borrow / collision
NUM_KEYS = 16                           # 16 hex keys
HARDWARE_STACK_DEPTH = 16               # Call depth of the original hardware

# Timing
DEFAULT_CLOCK_HZ = 500                  # Instructions per second
TIMER_HZ = 60                           # Delay/Sound timer rate

# CHIP-8 Font (4x5 pixels, stored as 5 bytes each)
FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

# Keyboard mapping (key name -> CHIP-8 hex keypad)
# CHIP-8 Keypad:    Keyboard:
# 1 2 3 C          1 2 3 4
# 4 5 6 D          Q W E R
# 7 8 9 E          A S D F
# A 0 B F          Z X C V
DEFAULT_KEY_MAP = {
    '1': 0x1, '2': 0x2, '3': 0x3, '4': 0xC,
    'q': 0x4, 'w': 0x5, 'e': 0x6, 'r': 0xD,
    'a': 0x7, 's': 0x8, 'd': 0x9, 'f': 0xE,
    'z': 0xA, 'x': 0x0, 'c': 0xB, 'v': 0xF,
}
