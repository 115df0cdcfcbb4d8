#!/usr/bin/env python3

"""
Null Input Plugin

Holds the input latch: one pressed/released flag for each of the 16 keys on
the hex keypad.  Host plugins translate their own key events into symbols
(single characters such as "q" or "4") and feed them into set_key.  The latch
owns the mapping from symbols to keypad keys, so unmapped symbols are simply
ignored.

Serves as a base class for other Input plugins.  Can be used on its own if
zero host input functionality is required, e.g. when keys are set directly by
an embedding application or a test.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from ..constants import DEFAULT_KEYMAP


class InputsError(Exception):
    pass


class Inputs:
    def __init__(self, keymap=DEFAULT_KEYMAP, renderer=None):
        self.keymap_dict = {}
        self.renderer = renderer
        self.key_down = [False] * 0x10
        keymap_split = keymap.split(",")

        if len(keymap_split) != 0x10:
            raise InputsError("Incorrect number of keys defined -- 16 required.  Use commas to split symbols")

        for key_num, key_defined in enumerate(keymap_split):
            symbol = key_defined.strip().lower()

            if not symbol:
                raise InputsError("Empty key symbol defined for key 0x{:01x}".format(key_num))

            if symbol in self.keymap_dict:
                raise InputsError("Duplicate keys defined")

            self.keymap_dict[symbol] = key_num

    def set_key(self, symbol, pressed):
        hex_key = self.keymap_dict.get(str(symbol).lower())

        if hex_key is not None:
            self.key_down[hex_key] = bool(pressed)

        return hex_key

    def is_key_down(self, key):
        return self.key_down[key & 0xF]

    def first_pressed(self):
        # Lowest-numbered key held down, or None
        for key_num, down in enumerate(self.key_down):
            if down:
                return key_num

        return None

    def release_all(self):
        for key_num in range(0x10):
            self.key_down[key_num] = False

    def process_messages(self):
        return False  # Don't exit the program

    def shutdown(self):
        pass
