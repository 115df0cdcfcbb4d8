#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are only handed to the actual display (the host
rendering system) at 60Hz, once all instructions for the frame have run.  The
rendering plugin never sees a half-drawn sprite, and the core never needs to
know anything about the host's display API.

Programs for this system cannot write directly into video RAM.  Instead,
sprites are drawn to the screen using an XOR method.  Each cell of the 64x32
screen is stored as a single byte holding 0 or 1.

Sprites wrap around the screen edges rather than being clipped.  A collision
is reported whenever a set pixel is unset by an XOR.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_NAME, VID_HEIGHT, VID_WIDTH
from .ram import RAM


class FramebufferError(Exception):
    pass


class Framebuffer():
    def __init__(self, renderer, vid_width=VID_WIDTH, vid_height=VID_HEIGHT):
        if vid_width <= 0 or vid_height <= 0:
            raise FramebufferError("Display dimensions must be positive")

        self.renderer = renderer
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.plane = RAM(self.vid_size)
        self.renderer.set_resolution(vid_width, vid_height)
        self.report_perf()

    def clear(self):
        self.plane.clear()

    def get_pixel(self, x, y):
        return self.plane.read((y % self.vid_height) * self.vid_width + (x % self.vid_width))

    def xor_pixel(self, x, y):
        # Returns flagging any collision
        vram_loc = (y % self.vid_height) * self.vid_width + (x % self.vid_width)
        pixel = self.plane.read(vram_loc)
        self.plane.write(vram_loc, pixel ^ 1)

        return pixel == 1

    def draw_sprite(self, x_pos, y_pos, sprite):
        # Each sprite byte is one 8-pixel row, most significant bit leftmost.  Unset bits leave the screen alone.
        collision = False

        for y, spr_data in enumerate(sprite):
            for x in range(8):
                if spr_data & (0x80 >> x):
                    if self.xor_pixel(x_pos + x, y_pos + y):
                        # Don't stop drawing, just remember
                        collision = True

        return collision

    def get_pixels(self):
        return self.plane.mem

    def refresh_display(self):
        self.renderer.present(self.plane.mem)

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def report_perf(self, fps=0, ops=0):
        title = "{} - {} FPS, {} OPS".format(APP_NAME, fps, ops)
        self.renderer.set_title(title)
