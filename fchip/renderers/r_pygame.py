#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Used by a Framebuffer object to draw the screen.  This draws graphics onto an
SDL window surface via PyGame.  The surface is allocated at the emulated
screen size (64x32), and then the contents are stretched (in the correct
aspect ratio using 'Nearest Neighbour' translation) to fit the window itself.
This means we don't have to draw the same pixel multiple times.

Set pixels are drawn in the foreground colour, and everything else in the
background colour.  Both can be overridden with a palette option.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import RendererError, Renderer as RendererBase
from ..constants import APP_NAME

DEFAULT_PALETTE = [0x212125, 0x27BF68]  # Background, foreground


class Renderer(RendererBase):
    def __init__(self, scale=None, pygame_palette=None, **kwargs):
        if scale is None:
            scale = 640  # Default window width if not supplied, or set to default

        pygame.display.init()
        self.set_title(APP_NAME)
        self.rgb_buffer = None
        self.last_pixels = None
        self.scaled_size = (scale, scale // 2)
        self.display_surface = pygame.display.set_mode(self.scaled_size)
        colour_map = list(DEFAULT_PALETTE)

        # Override one (or both) of the colours with a user-defined palette, if necessary
        if pygame_palette is not None:
            pygame_palette_split = pygame_palette.split(",")

            if len(pygame_palette_split) > len(colour_map):
                raise RendererError("Too many palette colours defined.")

            for pygame_colour_num, pygame_colour in enumerate(pygame_palette_split):
                if len(pygame_colour) != 6:
                    raise RendererError("Palette colours must all be 6 hex digits long.")

                try:
                    colour_map[pygame_colour_num] = int(pygame_colour, 16)
                except ValueError:
                    raise RendererError("Invalid palette colour defined.") from None

        # Split compound RGB values for faster byte-based lookup later
        self.rgb_map = [bytes((i >> 16, (i >> 8) & 0xFF, i & 0xFF)) for i in colour_map]

        super().__init__(scale)

    def set_resolution(self, width, height):
        # Fill the offscreen RGB buffer with the background colour.  The base class calls this before the colour map
        # is needed, with a zero-sized screen.
        self.rgb_buffer = bytearray(self.rgb_map[0] * (width * height)) if width and height else None
        self.last_pixels = None
        super().set_resolution(width, height)

    def present(self, pixels):
        frame = bytes(pixels)

        if frame != self.last_pixels and self.rgb_buffer is not None:
            # Update RGB buffer in-place to minimise allocations and PyGame calls
            rgb_map = self.rgb_map
            rgb_buffer = self.rgb_buffer

            for location, pixel in enumerate(frame):
                rgb_location = location * 3
                rgb_buffer[rgb_location:rgb_location + 3] = rgb_map[pixel]

            # Blit the bytearray straight to the surface.  Much faster than very frequent PixelArray updates
            render_surface = pygame.image.frombuffer(rgb_buffer, (self.width, self.height), "RGB")
            scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
            self.display_surface.blit(scaled_win, (0, 0))
            pygame.display.flip()
            self.last_pixels = frame

        super().present(pixels)

    def set_title(self, title):
        pygame.display.set_caption(title)
        super().set_title(title)

    def shutdown(self):
        # PyGame currently segfaults if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
