#!/usr/bin/env python3

"""
Timer Unit

The delay and sound timers count down once per 60Hz tick, stopping at zero.
The driver calls tick() once per frame, independently of how many
instructions were executed in that frame.

The only sound this system makes is a single tone, requested from the audio
plugin at the moment the sound timer runs out.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Timers:
    def __init__(self, audio):
        self.audio = audio
        self.delay = 0  # Delay timer integer (byte)
        self.sound = 0  # Sound timer integer (byte)

    def set_delay(self, value):
        self.delay = value & 0xFF

    def set_sound(self, value):
        self.sound = value & 0xFF

    def tick(self):
        if self.delay > 0:
            self.delay -= 1

        if self.sound > 0:
            self.sound -= 1

            if self.sound == 0:
                # Sound timer just expired
                self.audio.play_tone()

    def reset(self):
        self.delay = 0
        self.sound = 0
