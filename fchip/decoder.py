#!/usr/bin/env python3

"""
Instruction Decoder

Turns a raw 16-bit opcode into an Instruction: an operation tag plus every
field an instruction might use.  Decoding is a pure function of the opcode, so
results are cached and the CPU never decodes the same opcode twice.

Fields are always in the same opcode position throughout all instructions:
    x   = bits 11-8 (register)
    y   = bits 7-4  (register)
    n   = bits 3-0  (nibble)
    nn  = bits 7-0  (byte)
    nnn = bits 11-0 (address)

The first nibble picks the instruction class.  Classes 0x0, 0x5, 0x8, 0x9, 0xE
and 0xF then need a second lookup on the low nibble or low byte.  Anything
which doesn't match is decoded as UNKNOWN rather than failing, and it is left
to the CPU to decide what to do with it.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from enum import Enum, auto
from functools import lru_cache


class Op(Enum):
    SYS = auto()        # 0nnn
    CLS = auto()        # 00E0
    RET = auto()        # 00EE
    JP = auto()         # 1nnn
    CALL = auto()       # 2nnn
    SE_BYTE = auto()    # 3xkk
    SNE_BYTE = auto()   # 4xkk
    SE_REG = auto()     # 5xy0
    LD_BYTE = auto()    # 6xkk
    ADD_BYTE = auto()   # 7xkk
    LD_REG = auto()     # 8xy0
    OR = auto()         # 8xy1
    AND = auto()        # 8xy2
    XOR = auto()        # 8xy3
    ADD_REG = auto()    # 8xy4
    SUB = auto()        # 8xy5
    SHR = auto()        # 8xy6
    SUBN = auto()       # 8xy7
    SHL = auto()        # 8xyE
    SNE_REG = auto()    # 9xy0
    LD_I = auto()       # Annn
    JP_V0 = auto()      # Bnnn
    RND = auto()        # Cxkk
    DRW = auto()        # Dxyn
    SKP = auto()        # Ex9E
    SKNP = auto()       # ExA1
    LD_VX_DT = auto()   # Fx07
    LD_VX_K = auto()    # Fx0A
    LD_DT_VX = auto()   # Fx15
    LD_ST_VX = auto()   # Fx18
    ADD_I = auto()      # Fx1E
    LD_F = auto()       # Fx29
    LD_B = auto()       # Fx33
    LD_MEM_VX = auto()  # Fx55
    LD_VX_MEM = auto()  # Fx65
    UNKNOWN = auto()


Instruction = namedtuple("Instruction", ["op", "opcode", "x", "y", "n", "nn", "nnn"])

# Instructions decided by the first nibble alone
CLASS_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW
}

# Instructions beginning with nibble 0x0, bitmask 0xFFFF (i.e., exact match).  Every other 0nnn is SYS.
EXACT_OPS = {
    0x00E0: Op.CLS,
    0x00EE: Op.RET
}

# Instructions beginning with nibble 0x5/0x8/0x9, bitmask 0xF00F
NIBBLE_OPS = {
    0x5000: Op.SE_REG,
    0x8000: Op.LD_REG,
    0x8001: Op.OR,
    0x8002: Op.AND,
    0x8003: Op.XOR,
    0x8004: Op.ADD_REG,
    0x8005: Op.SUB,
    0x8006: Op.SHR,
    0x8007: Op.SUBN,
    0x800E: Op.SHL,
    0x9000: Op.SNE_REG
}

# Instructions beginning with nibble 0xE/0xF, bitmask 0xF0FF
BYTE_OPS = {
    0xE09E: Op.SKP,
    0xE0A1: Op.SKNP,
    0xF007: Op.LD_VX_DT,
    0xF00A: Op.LD_VX_K,
    0xF015: Op.LD_DT_VX,
    0xF018: Op.LD_ST_VX,
    0xF01E: Op.ADD_I,
    0xF029: Op.LD_F,
    0xF033: Op.LD_B,
    0xF055: Op.LD_MEM_VX,
    0xF065: Op.LD_VX_MEM
}

# Used for live debugging and crash reports
MNEMONICS = {
    Op.SYS: "SYS 0x{nnn:03x}",
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP 0x{nnn:03x}",
    Op.CALL: "CALL 0x{nnn:03x}",
    Op.SE_BYTE: "SE V{x:01x}, 0x{nn:02x}",
    Op.SNE_BYTE: "SNE V{x:01x}, 0x{nn:02x}",
    Op.SE_REG: "SE V{x:01x}, V{y:01x}",
    Op.LD_BYTE: "LD V{x:01x}, 0x{nn:02x}",
    Op.ADD_BYTE: "ADD V{x:01x}, 0x{nn:02x}",
    Op.LD_REG: "LD V{x:01x}, V{y:01x}",
    Op.OR: "OR V{x:01x}, V{y:01x}",
    Op.AND: "AND V{x:01x}, V{y:01x}",
    Op.XOR: "XOR V{x:01x}, V{y:01x}",
    Op.ADD_REG: "ADD V{x:01x}, V{y:01x}",
    Op.SUB: "SUB V{x:01x}, V{y:01x}",
    Op.SHR: "SHR V{x:01x} {{, V{y:01x}}}",
    Op.SUBN: "SUBN V{x:01x}, V{y:01x}",
    Op.SHL: "SHL V{x:01x} {{, V{y:01x}}}",
    Op.SNE_REG: "SNE V{x:01x}, V{y:01x}",
    Op.LD_I: "LD I, 0x{nnn:03x}",
    Op.JP_V0: "JP V0, 0x{nnn:03x}",
    Op.RND: "RND V{x:01x}, 0x{nn:02x}",
    Op.DRW: "DRW V{x:01x}, V{y:01x}, 0x{n:01x}",
    Op.SKP: "SKP V{x:01x}",
    Op.SKNP: "SKNP V{x:01x}",
    Op.LD_VX_DT: "LD V{x:01x}, DT",
    Op.LD_VX_K: "LD V{x:01x}, K",
    Op.LD_DT_VX: "LD DT, V{x:01x}",
    Op.LD_ST_VX: "LD ST, V{x:01x}",
    Op.ADD_I: "ADD I, V{x:01x}",
    Op.LD_F: "LD F, V{x:01x}",
    Op.LD_B: "LD B, V{x:01x}",
    Op.LD_MEM_VX: "LD [I], V{x:01x}",
    Op.LD_VX_MEM: "LD V{x:01x}, [I]",
    Op.UNKNOWN: "??? 0x{opcode:04x}"
}


def _lookup_op(opcode):
    op_class = opcode >> 12

    if op_class == 0x0:
        return EXACT_OPS.get(opcode, Op.SYS)

    if op_class in (0x5, 0x8, 0x9):
        return NIBBLE_OPS.get(opcode & 0xF00F, Op.UNKNOWN)

    if op_class in (0xE, 0xF):
        return BYTE_OPS.get(opcode & 0xF0FF, Op.UNKNOWN)

    return CLASS_OPS[op_class]


@lru_cache(maxsize=None)
def decode(opcode):
    opcode &= 0xFFFF

    return Instruction(
        op=_lookup_op(opcode),
        opcode=opcode,
        x=(opcode & 0xF00) >> 8,
        y=(opcode & 0xF0) >> 4,
        n=opcode & 0xF,
        nn=opcode & 0xFF,
        nnn=opcode & 0xFFF
    )


def mnemonic(instruction):
    return MNEMONICS[instruction.op].format(**instruction._asdict())
