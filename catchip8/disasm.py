"""
CHIP-8 disassembler.

Mnemonics cover exactly the instruction set the engine executes; any
other word is listed as `.word` data so a listing shows up front where
the engine would stop with an unknown-opcode fault.
"""

from typing import List

from .constants import PROGRAM_START

# 8XYn ALU ops the engine implements
_ALU_OPS = {0x0: "LD", 0x2: "AND", 0x4: "ADD", 0x5: "SUB"}

# FXnn misc ops the engine implements
_MISC_OPS = {
    0x07: "LD Vx, DT",
    0x15: "LD DT, Vx",
    0x18: "LD ST, Vx",
    0x1E: "ADD I, Vx",
    0x29: "LD F, Vx",
    0x33: "LD B, Vx",
    0x65: "LD Vx, [I]",
}


def disassemble(opcode: int) -> str:
    """Return a mnemonic string for a 16-bit CHIP-8 instruction word"""
    nnn = opcode & 0x0FFF
    nn = opcode & 0x00FF
    n = opcode & 0x000F
    x = (opcode >> 8) & 0x0F
    y = (opcode >> 4) & 0x0F
    op = (opcode >> 12) & 0xF

    if opcode == 0x00E0:
        return "CLS"
    elif opcode == 0x00EE:
        return "RET"
    elif op == 0x1:
        return f"JP ${nnn:03X}"
    elif op == 0x2:
        return f"CALL ${nnn:03X}"
    elif op == 0x3:
        return f"SE V{x:X}, ${nn:02X}"
    elif op == 0x4:
        return f"SNE V{x:X}, ${nn:02X}"
    elif op == 0x6:
        return f"LD V{x:X}, ${nn:02X}"
    elif op == 0x7:
        return f"ADD V{x:X}, ${nn:02X}"
    elif op == 0x8:
        if n in _ALU_OPS:
            return f"{_ALU_OPS[n]} V{x:X}, V{y:X}"
        if n == 0x6:
            return f"SHR V{x:X}"
    elif op == 0x9 and n == 0:
        return f"SNE V{x:X}, V{y:X}"
    elif op == 0xA:
        return f"LD I, ${nnn:03X}"
    elif op == 0xC:
        return f"RND V{x:X}, ${nn:02X}"
    elif op == 0xD:
        return f"DRW V{x:X}, V{y:X}, {n}"
    elif op == 0xE:
        if nn == 0x9E:
            return f"SKP V{x:X}"
        elif nn == 0xA1:
            return f"SKNP V{x:X}"
    elif op == 0xF and nn in _MISC_OPS:
        return _MISC_OPS[nn].replace("Vx", f"V{x:X}")

    return f".word ${opcode:04X}  ; unknown opcode"


def disassemble_program(data: bytes, start: int = PROGRAM_START) -> List[str]:
    """
    Convert a program image into disassembly lines.
    Each line: "ADDR:  MNEMONIC"
    """
    lines = []
    addr = start
    i = 0
    while i + 1 < len(data):
        opcode = (data[i] << 8) | data[i + 1]
        lines.append(f"{addr:04X}:  {disassemble(opcode)}")
        addr += 2
        i += 2
    if i < len(data):
        lines.append(f"{addr:04X}:  .byte ${data[i]:02X}  ; odd trailing byte")
    return lines
