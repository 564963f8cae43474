"""
CHIP-8 register file and call stack.

Register model:
  V0-VE  8-bit general purpose
  VF     8-bit, doubles as carry / borrow / collision flag
  I      index register, 12 bits significant
  PC     program counter, starts at 0x200
  stack  return addresses (unbounded unless a limit is given)
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .constants import ADDRESS_MASK, FLAG_REGISTER, NUM_REGISTERS, PROGRAM_START
from .errors import StackOverflowError, StackUnderflowError


@dataclass
class RegisterFile:
    """CHIP-8 CPU registers"""
    V: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)  # V0-VF
    I: int = 0               # Index register (12-bit)
    PC: int = PROGRAM_START  # Program counter
    stack: List[int] = field(default_factory=list)
    stack_limit: Optional[int] = None

    def set_flag(self, value: bool):
        """Write VF as 1/0"""
        self.V[FLAG_REGISTER] = 1 if value else 0

    def advance(self, count: int = 1):
        """Move PC forward `count` instructions, wrapping at the top of RAM"""
        self.PC = (self.PC + 2 * count) & ADDRESS_MASK

    def jump(self, addr: int):
        self.PC = addr & ADDRESS_MASK

    # --- Stack operations ---

    def push(self, addr: int, opcode: Optional[int] = None):
        """Push a return address. Raises StackOverflowError past stack_limit."""
        if self.stack_limit is not None and len(self.stack) >= self.stack_limit:
            raise StackOverflowError(opcode, self.PC)
        self.stack.append(addr)

    def pop(self, opcode: Optional[int] = None) -> int:
        """Pop a return address. Raises StackUnderflowError on an empty stack."""
        if not self.stack:
            raise StackUnderflowError(opcode, self.PC)
        return self.stack.pop()

    # --- Display ---

    def display(self) -> str:
        """Format register state for debugging"""
        regs = ' '.join(f"V{i:X}={v:02X}" for i, v in enumerate(self.V))
        return f"PC={self.PC:03X} I={self.I:03X} SP={len(self.stack)} {regs}"
