#!/usr/bin/env python3

"""
PyGame Audio Plugin

Plays a short square-wave tone within PyGame / SDL.

The waveform starts life as a 1-bit, 16-byte pattern of alternating on/off
bytes.  It has to be stretched lengthways and have its offset moved to fit in
a modern 8-bit PyGame / SDL buffer, but it will retain the shape of a square
wave.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase

PLAYBACK_FREQUENCY = 44100.0
TONE_FREQUENCY = 4000.0
TONE_LENGTH_MS = 100
DEFAULT_VOLUME = 0.1
TONE_PATTERN = b"\x00\xFF" * 8


class Audio(AudioBase):
    def __init__(self):
        pygame.mixer.pre_init(int(PLAYBACK_FREQUENCY), size=8, channels=1, buffer=512, allowedchanges=0)
        pygame.mixer.init()
        self.sound = pygame.mixer.Sound(buffer=self._resample(TONE_PATTERN))
        self.sound.set_volume(DEFAULT_VOLUME)
        super().__init__()

    def _resample(self, buffer):
        # Setting PyGame's playback rate is very slow, so we resample the pattern to the mixer's rate instead
        sample_multiplier = PLAYBACK_FREQUENCY / TONE_FREQUENCY
        resampled_buffer_size = int(len(buffer) * 8 * sample_multiplier)
        resampled_buffer = bytearray(resampled_buffer_size)

        for resampled_buffer_pos in range(resampled_buffer_size):
            buffer_byte_pos = resampled_buffer_pos / sample_multiplier
            byte = int(buffer_byte_pos / 8.0)
            bit = 7 - int(buffer_byte_pos % 8.0)
            resampled_buffer[resampled_buffer_pos] = ((buffer[byte] >> bit) & 1) * 0xFF

        return bytes(resampled_buffer)

    def play_tone(self):
        # Loop the short sample until the tone length is up.  A tone already playing is restarted.
        self.sound.stop()
        self.sound.play(loops=-1, maxtime=TONE_LENGTH_MS)
        super().play_tone()

    def shutdown(self):
        self.sound.stop()
        pygame.mixer.quit()
        super().shutdown()
