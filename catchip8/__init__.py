"""Cat's CHIP-8: a CHIP-8 virtual machine core with a pygame front end."""

from .engine import Chip8Engine, MachineState
from .errors import (
    Chip8Error, ConfigError, ExecutionFault, ProgramTooLargeError,
    StackOverflowError, StackUnderflowError, UnknownOpcodeError,
)
from .framebuffer import Framebuffer, FrameUpdate, PixelDelta
from .keypad import Keypad
from .memory import MemoryImage
from .registers import RegisterFile
from .timers import DelayTimer

__version__ = "0.1.0"

__all__ = [
    "Chip8Engine", "MachineState",
    "Chip8Error", "ConfigError", "ExecutionFault", "ProgramTooLargeError",
    "StackOverflowError", "StackUnderflowError", "UnknownOpcodeError",
    "Framebuffer", "FrameUpdate", "PixelDelta",
    "Keypad", "MemoryImage", "RegisterFile", "DelayTimer",
]
