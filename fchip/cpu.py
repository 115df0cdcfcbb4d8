#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  Each
call to step() is one complete fetch, decode and execute of a single
instruction.  The CPU keeps no timing of its own: the machine decides how many
steps to run per 60Hz frame.

The executor is a two-state machine.  Normally it is RUNNING, but the
'wait for key' instruction (Fx0A) parks it in AWAITING_KEY with the program
counter left on that instruction.  Each following step simply polls the input
latch until a key is held, so timers and the display keep updating while the
program waits, and no step ever blocks.

Quirk policy (each can be switched on the command line):
    * Vf is always written after the result, so the flag wins if Vx is Vf.
    * 8xy6/8xyE shift Vx in place (shift quirks shift Vy into Vx instead).
    * Fx55/Fx65 leave I pointing after the last register (load quirks).
    * 8xy1/8xy2/8xy3 leave Vf alone (logic quirks reset it).
    * I is a 16-bit register, and only memory accesses through it wrap.
    * Unmapped opcodes do nothing, unless strict decoding is enabled.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from enum import Enum
from random import Random
from .constants import APP_INTRO, FONT_GLYPH_SIZE, FONT_LOCATION
from .decoder import Op, decode, mnemonic


class CPUError(Exception):
    pass


class ExecState(Enum):
    RUNNING = "running"
    AWAITING_KEY = "awaiting key"


class CPU:
    def __init__(self, memory, stack, framebuffer, inputs, timers, debugger, shift_quirks=None, load_quirks=None,
                 logic_quirks=None, strict=False, rng=None):

        self.memory = memory
        self.stack = stack
        self.framebuffer = framebuffer
        self.inputs = inputs
        self.timers = timers
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()
        self.random = Random() if rng is None else rng
        self.strict = strict

        self.shift_quirks = False if shift_quirks is None else shift_quirks
        self.load_quirks = True if load_quirks is None else load_quirks
        self.logic_quirks = False if logic_quirks is None else logic_quirks

        # Handlers for every decoded operation
        self.instructions = {
            Op.SYS: self._0nnn,
            Op.CLS: self._00E0,
            Op.RET: self._00EE,
            Op.JP: self._1nnn,
            Op.CALL: self._2nnn,
            Op.SE_BYTE: self._3xkk,
            Op.SNE_BYTE: self._4xkk,
            Op.SE_REG: self._5xy0,
            Op.LD_BYTE: self._6xkk,
            Op.ADD_BYTE: self._7xkk,
            Op.LD_REG: self._8xy0,
            Op.OR: self._8xy1,
            Op.AND: self._8xy2,
            Op.XOR: self._8xy3,
            Op.ADD_REG: self._8xy4,
            Op.SUB: self._8xy5,
            Op.SHR: self._8xy6,
            Op.SUBN: self._8xy7,
            Op.SHL: self._8xyE,
            Op.SNE_REG: self._9xy0,
            Op.LD_I: self._Annn,
            Op.JP_V0: self._Bnnn,
            Op.RND: self._Cxkk,
            Op.DRW: self._Dxyn,
            Op.SKP: self._Ex9E,
            Op.SKNP: self._ExA1,
            Op.LD_VX_DT: self._Fx07,
            Op.LD_VX_K: self._Fx0A,
            Op.LD_DT_VX: self._Fx15,
            Op.LD_ST_VX: self._Fx18,
            Op.ADD_I: self._Fx1E,
            Op.LD_F: self._Fx29,
            Op.LD_B: self._Fx33,
            Op.LD_MEM_VX: self._Fx55,
            Op.LD_VX_MEM: self._Fx65,
            Op.UNKNOWN: self._unknown
        }

        self.reset(0)

    def reset(self, start_location):
        self.v = memoryview(bytearray(16))  # Bytearrays are mutable, so this should be fast when a register is updated
        self.i = 0  # Index register
        self.pc = start_location & 0xFFF
        self.debug_pc = self.pc
        self.opcode = 0
        self.state = ExecState.RUNNING
        self.key_register = 0  # Register awaiting a keypress

    @property
    def awaiting_key(self):
        return self.state is ExecState.AWAITING_KEY

    def step(self):
        if self.state is ExecState.AWAITING_KEY:
            self._poll_keypress()
            return

        # Keep track of the program counter before altering it in any way for debugging purposes
        self.debug_pc = self.pc
        self.opcode = self.fetch()
        self.inc_pc()  # Program counter updates after fetch (and technically before decode), but before execute
        self.decode_exec()

    def fetch(self):
        return self.memory.read16(self.pc)

    def decode_exec(self):
        instruction = decode(self.opcode)

        if self.live_debug:
            self.debug(instruction)

        self.instructions[instruction.op](instruction)

    def inc_pc(self):
        self.pc = (self.pc + 2) & 0xFFF

    def dec_pc(self):
        # Only used to re-run instructions (i.e. keypress wait)
        self.pc = (self.pc - 2) & 0xFFF

    def debug(self, instruction):
        self.debugger.output(self, mnemonic(instruction))

    def crash_report(self, message):
        return (
            "Emulation halted.\n\n" +
            "{}Debug info:\n" +
            "{}\n\n{} (opcode 0x{:04x} at address 0x{:03x})"
        ).format(
            APP_INTRO, self.debugger.debug(self, mnemonic(decode(self.opcode)), verbose=True), message, self.opcode,
            self.debug_pc
        )

    def _unknown(self, ins):
        # Permissive by default, like the original interpreters
        if self.strict:
            raise CPUError(self.crash_report("Opcode is not part of the CHIP-8 instruction set"))

    def _0nnn(self, ins):  # SYS addr
        # Calls to native machine code routines can't be emulated, and were ignored by most interpreters
        pass

    def _00E0(self, ins):  # CLS
        self.framebuffer.clear()

    def _00EE(self, ins):  # RET
        self.pc = self.stack.pop()

    def _1nnn(self, ins):  # JP addr
        self.pc = ins.nnn

    def _2nnn(self, ins):  # CALL addr
        self.stack.push(self.pc)  # Already pointing at the next instruction
        self.pc = ins.nnn

    def _post_skip(self):
        self.inc_pc()

    def _3xkk(self, ins):  # SE Vx, byte
        if self.v[ins.x] == ins.nn:
            self._post_skip()

    def _4xkk(self, ins):  # SNE Vx, byte
        if self.v[ins.x] != ins.nn:
            self._post_skip()

    def _5xy0(self, ins):  # SE Vx, Vy
        if self.v[ins.x] == self.v[ins.y]:
            self._post_skip()

    def _6xkk(self, ins):  # LD Vx, byte
        self.v[ins.x] = ins.nn

    def _7xkk(self, ins):  # ADD Vx, byte
        # No carry flag for this one
        self.v[ins.x] = (self.v[ins.x] + ins.nn) & 0xFF

    def _post_8xy1_8xy2_8xy3(self):
        if self.logic_quirks:
            self.v[0xF] = 0

    def _8xy0(self, ins):  # LD Vx, Vy
        self.v[ins.x] = self.v[ins.y]

    def _8xy1(self, ins):  # OR Vx, Vy
        self.v[ins.x] |= self.v[ins.y]
        self._post_8xy1_8xy2_8xy3()

    def _8xy2(self, ins):  # AND Vx, Vy
        self.v[ins.x] &= self.v[ins.y]
        self._post_8xy1_8xy2_8xy3()

    def _8xy3(self, ins):  # XOR Vx, Vy
        self.v[ins.x] ^= self.v[ins.y]
        self._post_8xy1_8xy2_8xy3()

    def _8xy4(self, ins):  # ADD Vx, Vy
        val = self.v[ins.x] + self.v[ins.y]
        self.v[ins.x] = val & 0xFF
        self.v[0xF] = int(val > 0xFF)  # Vf is set when carrying

    def _8xy5(self, ins):  # SUB Vx, Vy
        vx = self.v[ins.x]
        vy = self.v[ins.y]
        self.v[ins.x] = (vx - vy) & 0xFF
        # Vf is set when NOT borrowing, and this should happen AFTER Vx is set, as sometimes Vf is specified in the
        # parameters
        self.v[0xF] = int(vx > vy)

    def _8xy6(self, ins):  # SHR Vx {, Vy}
        val = self.v[ins.y if self.shift_quirks else ins.x]
        self.v[ins.x] = val >> 1
        self.v[0xF] = val & 1

    def _8xy7(self, ins):  # SUBN Vx, Vy
        vx = self.v[ins.x]
        vy = self.v[ins.y]
        self.v[ins.x] = (vy - vx) & 0xFF
        self.v[0xF] = int(vy > vx)

    def _8xyE(self, ins):  # SHL Vx {, Vy}
        val = self.v[ins.y if self.shift_quirks else ins.x]
        self.v[ins.x] = (val << 1) & 0xFF
        self.v[0xF] = (val >> 7) & 1

    def _9xy0(self, ins):  # SNE Vx, Vy
        if self.v[ins.x] != self.v[ins.y]:
            self._post_skip()

    def _Annn(self, ins):  # LD I, addr
        self.i = ins.nnn

    def _Bnnn(self, ins):  # JP V0, addr
        self.pc = (self.v[0] + ins.nnn) & 0xFFF

    def _Cxkk(self, ins):  # RND Vx, byte
        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[ins.x] = self.random.randint(0, 0xFF) & ins.nn

    def _Dxyn(self, ins):  # DRW Vx, Vy, nibble
        # Read the coordinates before Vf is touched, in case Vf holds one of them
        x_pos = self.v[ins.x]
        y_pos = self.v[ins.y]
        i = self.i
        sprite = [self.memory.read8(i + row) for row in range(ins.n)]
        self.v[0xF] = int(self.framebuffer.draw_sprite(x_pos, y_pos, sprite))

    def _Ex9E(self, ins):  # SKP Vx
        if self.inputs.is_key_down(self.v[ins.x]):
            self._post_skip()

    def _ExA1(self, ins):  # SKNP Vx
        if not self.inputs.is_key_down(self.v[ins.x]):
            self._post_skip()

    def _Fx07(self, ins):  # LD Vx, DT
        self.v[ins.x] = self.timers.delay

    def _Fx0A(self, ins):  # LD Vx, K
        # Stay on this instruction until a key is held.  The machine keeps running frames in the meantime, so timers
        # still expire and the framebuffer still updates.
        self.key_register = ins.x
        self.dec_pc()
        self.state = ExecState.AWAITING_KEY
        self._poll_keypress()

    def _poll_keypress(self):
        key = self.inputs.first_pressed()

        if key is not None:
            self.v[self.key_register] = key
            self.inc_pc()
            self.state = ExecState.RUNNING

    def _Fx15(self, ins):  # LD DT, Vx
        self.timers.set_delay(self.v[ins.x])

    def _Fx18(self, ins):  # LD ST, Vx
        self.timers.set_sound(self.v[ins.x])

    def _Fx1E(self, ins):  # ADD I, Vx
        self.i = (self.i + self.v[ins.x]) & 0xFFFF

    def _Fx29(self, ins):  # LD F, Vx
        self.i = FONT_LOCATION + FONT_GLYPH_SIZE * self.v[ins.x]

    def _Fx33(self, ins):  # LD B, Vx
        val = self.v[ins.x]
        i = self.i
        self.memory.write8(i, val // 100)            # Most-significant digit
        self.memory.write8(i + 1, (val // 10) % 10)  # Middle digit
        self.memory.write8(i + 2, val % 10)          # Least-significant digit

    def _post_Fx55_Fx65(self, ins):
        if self.load_quirks:
            self.i = (self.i + ins.x + 1) & 0xFFFF

    def _Fx55(self, ins):  # LD [I], Vx
        i = self.i

        # Ensure with +1 that the final register is copied
        for reg in range(ins.x + 1):
            self.memory.write8(i + reg, self.v[reg])

        self._post_Fx55_Fx65(ins)

    def _Fx65(self, ins):  # LD Vx, [I]
        i = self.i

        for reg in range(ins.x + 1):
            self.v[reg] = self.memory.read8(i + reg)

        self._post_Fx55_Fx65(ins)
