#!/usr/bin/env python3

"""
Stack Emulator

The call stack is not part of system RAM, because there is no specified
location for it, and there is no stack pointer register exposed to the
running program.  Wrapping a list is enough to fully (and quickly) emulate it.

Original hardware behaviour on overflow or underflow is undefined.  Here both
raise a distinct error, which halts emulation rather than letting a runaway
program corrupt anything.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class StackError(Exception):
    pass


class StackOverflowError(StackError):
    pass


class StackUnderflowError(StackError):
    pass


class Stack:
    def __init__(self, size):
        self.items = []
        self.size = size

    @property
    def pointer(self):
        return len(self.items)

    def push(self, item):
        if len(self.items) >= self.size:
            raise StackOverflowError("Stack overflow")

        self.items.append(item)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise StackUnderflowError("Stack underflow") from None

    def clear(self):
        self.items.clear()

    def get_items(self):
        # For debugging
        return self.items
