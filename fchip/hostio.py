#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading ROM binaries for later writing into memory.  There is no
header or checksum to check: a ROM is simply the raw program bytes.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            return f.read()
