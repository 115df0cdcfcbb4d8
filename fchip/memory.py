#!/usr/bin/env python3

"""
System Memory

The 4K address space seen by programs.  The font lives at the very bottom,
the rest of the first 512 bytes is reserved for the interpreter, and programs
are loaded from 0x200 upwards.

Addresses are masked to 12 bits on every access, so an index register that
runs off the top of memory wraps around to 0x000, as it did on the original
hardware.  Programs may never write into the reserved area, so a wrapped write
is caught rather than silently corrupting the font.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import ADDRESS_MASK, FONT_LOCATION, FONT_SET, MEMORY_SIZE, PROGRAM_SPACE, PROGRAM_START
from .ram import RAM, RAMError


class ProgramSizeError(RAMError):
    pass


class ReservedMemoryError(RAMError):
    pass


class Memory(RAM):
    def __init__(self):
        super().__init__(MEMORY_SIZE)

    def read8(self, address):
        return self.mem[address & ADDRESS_MASK]

    def write8(self, address, byte):
        address &= ADDRESS_MASK

        if address < PROGRAM_START:
            raise ReservedMemoryError("Write to reserved interpreter memory at 0x{:03x}".format(address))

        self.mem[address] = byte & 0xFF

    def read16(self, address):
        # CHIP-8 is big-endian
        return (self.read8(address) << 8) | self.read8(address + 1)

    def load_font_set(self):
        self.write_block(FONT_LOCATION, FONT_SET)

    def check_program_size(self, data):
        if len(data) > PROGRAM_SPACE:
            raise ProgramSizeError(
                "Program is {} bytes, but only {} bytes of program space are available".format(
                    len(data), PROGRAM_SPACE
                )
            )

    def load_program(self, data):
        self.check_program_size(data)
        self.write_block(PROGRAM_START, data)
