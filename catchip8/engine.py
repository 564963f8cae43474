"""
CHIP-8 Instruction Engine

Owns the whole machine (memory, registers, display, timers, keypad) and
executes one instruction per step():

  1. Fetch the big-endian word at PC
  2. Decode on the high nibble, then on the low nibble / low byte
  3. Execute: update registers, memory, display; advance or set PC

Unknown instructions and call-stack misuse are fatal. step() does not
raise them: it returns the ExecutionFault, logs it, and the engine stays
halted on it so the driver can decide what to do.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .constants import FLAG_REGISTER
from .disasm import disassemble
from .errors import ExecutionFault, UnknownOpcodeError
from .framebuffer import Framebuffer, FrameUpdate
from .keypad import Keypad
from .memory import MemoryImage
from .registers import RegisterFile
from .timers import DelayTimer

logger = logging.getLogger(__name__)


@dataclass
class MachineState:
    """Everything one CHIP-8 machine owns"""
    memory: MemoryImage
    registers: RegisterFile
    delay_timer: DelayTimer
    framebuffer: Framebuffer = field(default_factory=Framebuffer)
    keypad: Keypad = field(default_factory=Keypad)
    sound_timer: int = 0  # set by FX18, never counts down


class Chip8Engine:
    """CHIP-8 fetch/decode/execute engine.

    Usage:
        engine = Chip8Engine(rom_bytes)
        engine.keypad.press(5)
        fault = engine.step()
        update = engine.framebuffer.drain()
    """

    def __init__(self, program: Iterable[int] = b'',
                 rng=None,
                 clock: Optional[Callable[[], float]] = None,
                 stack_limit: Optional[int] = None):
        self.program = bytes(program)
        self.rng = rng if rng is not None else random
        self._clock = clock
        self.stack_limit = stack_limit
        self.state = self._build_state()
        self.fault: Optional[ExecutionFault] = None
        self.cycles = 0

    def _build_state(self) -> MachineState:
        timer = DelayTimer(self._clock) if self._clock else DelayTimer()
        return MachineState(
            memory=MemoryImage.initialize(self.program),
            registers=RegisterFile(stack_limit=self.stack_limit),
            delay_timer=timer,
        )

    def reset(self):
        """Reload the program and return to power-on state"""
        self.state = self._build_state()
        self.fault = None
        self.cycles = 0

    # --- Component access ---

    @property
    def memory(self) -> MemoryImage:
        return self.state.memory

    @property
    def registers(self) -> RegisterFile:
        return self.state.registers

    @property
    def framebuffer(self) -> Framebuffer:
        return self.state.framebuffer

    @property
    def keypad(self) -> Keypad:
        return self.state.keypad

    @property
    def delay_timer(self) -> DelayTimer:
        return self.state.delay_timer

    @property
    def halted(self) -> bool:
        return self.fault is not None

    def drain(self) -> FrameUpdate:
        return self.state.framebuffer.drain()

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def fetch(self) -> int:
        """Fetch the 16-bit opcode at PC"""
        return self.state.memory.read16(self.state.registers.PC)

    def step(self) -> Optional[ExecutionFault]:
        """Execute one instruction. Returns the fault if the machine stopped, else None."""
        if self.fault is not None:
            return self.fault

        opcode = self.fetch()
        try:
            self.execute(opcode)
        except ExecutionFault as fault:
            self.fault = fault
            logger.error("Halted: %s (%s)", fault, disassemble(opcode))
            logger.error("  %s", self.state.registers.display())
            return fault

        self.cycles += 1
        return None

    def run(self, cycles: int) -> Optional[ExecutionFault]:
        """Execute up to `cycles` instructions, stopping at the first fault"""
        for _ in range(cycles):
            fault = self.step()
            if fault is not None:
                return fault
        return None

    def execute(self, opcode: int):
        """Decode and execute a single opcode"""
        # Extract common opcode parts
        nnn = opcode & 0x0FFF        # 12-bit address
        nn = opcode & 0x00FF         # 8-bit constant
        n = opcode & 0x000F          # 4-bit constant
        x = (opcode >> 8) & 0x0F     # 4-bit register index
        y = (opcode >> 4) & 0x0F     # 4-bit register index

        op = (opcode >> 12) & 0xF    # First nibble

        s = self.state
        regs = s.registers
        V = regs.V

        # ─── 0x0XXX ───
        if op == 0x0:
            if opcode == 0x00E0:
                # 00E0: CLS - Clear display
                s.framebuffer.clear()
                logger.debug("Screen cleared at $%03X", regs.PC)
                regs.advance()

            elif opcode == 0x00EE:
                # 00EE: RET - resume after the CALL that pushed this address
                regs.jump(regs.pop(opcode))
                regs.advance()

            else:
                self._unknown(opcode)

        # ─── 1NNN: JP addr ───
        elif op == 0x1:
            regs.jump(nnn)

        # ─── 2NNN: CALL addr ───
        elif op == 0x2:
            regs.push(regs.PC, opcode)
            regs.jump(nnn)

        # ─── 3XNN: SE Vx, byte ───
        elif op == 0x3:
            regs.advance(2 if V[x] == nn else 1)

        # ─── 4XNN: SNE Vx, byte ───
        elif op == 0x4:
            regs.advance(2 if V[x] != nn else 1)

        # ─── 6XNN: LD Vx, byte ───
        elif op == 0x6:
            V[x] = nn
            regs.advance()

        # ─── 7XNN: ADD Vx, byte (no carry) ───
        elif op == 0x7:
            V[x] = (V[x] + nn) & 0xFF
            regs.advance()

        # ─── 8XYZ: ALU operations ───
        elif op == 0x8:
            self._alu(opcode, x, y, n)

        # ─── 9XY0: SNE Vx, Vy ───
        elif op == 0x9:
            if n != 0x0:
                self._unknown(opcode)
            regs.advance(2 if V[x] != V[y] else 1)

        # ─── ANNN: LD I, addr ───
        elif op == 0xA:
            regs.I = nnn
            regs.advance()

        # ─── CXNN: RND Vx, byte ───
        elif op == 0xC:
            V[x] = self.rng.randint(0, 255) & nn
            regs.advance()

        # ─── DXYN: DRW Vx, Vy, nibble ───
        elif op == 0xD:
            self._draw_sprite(V[x], V[y], n)
            regs.advance()

        # ─── EX9E/EXA1: Key operations ───
        elif op == 0xE:
            if nn == 0x9E:
                # EX9E: SKP Vx (skip if key pressed, press is consumed)
                pressed = s.keypad.test_and_reset(V[x])
                regs.advance(2 if pressed else 1)

            elif nn == 0xA1:
                # EXA1: SKNP Vx (skip if key not pressed, press is consumed)
                pressed = s.keypad.test_and_reset(V[x])
                regs.advance(1 if pressed else 2)

            else:
                self._unknown(opcode)

        # ─── FX07-FX65: Misc operations ───
        elif op == 0xF:
            self._misc(opcode, x, nn)

        else:
            self._unknown(opcode)

    def _alu(self, opcode: int, x: int, y: int, z: int):
        """8XYZ register-to-register operations. VF is always written last."""
        regs = self.state.registers
        V = regs.V

        if z == 0x0:
            # 8XY0: LD Vx, Vy
            V[x] = V[y]

        elif z == 0x2:
            # 8XY2: AND Vx, Vy
            V[x] &= V[y]

        elif z == 0x4:
            # 8XY4: ADD Vx, Vy (VF = carry)
            result = V[x] + V[y]
            V[x] = result & 0xFF
            regs.set_flag(result > 0xFF)

        elif z == 0x5:
            # 8XY5: SUB Vx, Vy (VF = NOT borrow)
            no_borrow = V[x] >= V[y]
            V[x] = (V[x] - V[y]) & 0xFF
            regs.set_flag(no_borrow)

        elif z == 0x6:
            # 8XY6: SHR Vx (VF = bit shifted out)
            low_bit = V[x] & 0x1
            V[x] >>= 1
            V[FLAG_REGISTER] = low_bit

        else:
            self._unknown(opcode)

        regs.advance()

    def _misc(self, opcode: int, x: int, nn: int):
        s = self.state
        regs = s.registers
        V = regs.V

        if nn == 0x07:
            # FX07: LD Vx, DT
            V[x] = s.delay_timer.get_value()

        elif nn == 0x15:
            # FX15: LD DT, Vx
            s.delay_timer.start(V[x])

        elif nn == 0x18:
            # FX18: LD ST, Vx
            s.sound_timer = V[x]

        elif nn == 0x1E:
            # FX1E: ADD I, Vx (VF = I ran past 0xFFF)
            total = regs.I + V[x]
            regs.I = total % 4096
            regs.set_flag(total > 0xFFF)

        elif nn == 0x29:
            # FX29: LD F, Vx (point I to font sprite)
            regs.I = s.memory.glyph_address(V[x])

        elif nn == 0x33:
            # FX33: LD B, Vx (BCD)
            value = V[x]
            s.memory.write8(regs.I, value // 100)
            s.memory.write8(regs.I + 1, (value // 10) % 10)
            s.memory.write8(regs.I + 2, value % 10)

        elif nn == 0x65:
            # FX65: LD Vx, [I] (load V0-Vx, I unchanged)
            for i in range(x + 1):
                V[i] = s.memory.read8(regs.I + i)

        else:
            self._unknown(opcode)

        regs.advance()

    def _draw_sprite(self, x: int, y: int, height: int):
        """Draw `height` rows from memory[I] at (x, y); VF = collision"""
        s = self.state
        rows = s.memory.read_block(s.registers.I, height)
        collision = s.framebuffer.draw_sprite(x, y, rows)
        s.registers.set_flag(collision)

    def _unknown(self, opcode: int):
        raise UnknownOpcodeError(opcode, self.state.registers.PC)
