"""Exception types raised by the CHIP-8 core and front end."""

from typing import Optional


class Chip8Error(Exception):
    """Base class for every error raised by catchip8"""


class ConfigError(Chip8Error):
    """Invalid emulator configuration"""


class ProgramTooLargeError(ConfigError, ValueError):
    """Program image does not fit between PROGRAM_START and the end of RAM"""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"program image is {size} bytes, at most {limit} bytes fit in memory"
        )


class ExecutionFault(Chip8Error):
    """Fatal condition that stops the machine.

    Carries the instruction word and the address it was fetched from so
    a driver can report where execution died.
    """

    reason = "execution fault"

    def __init__(self, opcode: Optional[int], address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.opcode is None:
            return f"{self.reason} at ${self.address:03X}"
        return f"{self.reason}: ${self.opcode:04X} at ${self.address:03X}"


class UnknownOpcodeError(ExecutionFault):
    reason = "unrecognized instruction"


class StackUnderflowError(ExecutionFault):
    reason = "return with empty call stack"


class StackOverflowError(ExecutionFault):
    reason = "call stack full"
