#!/usr/bin/env python3

"""
Machine

Owns every part of one emulated system: memory, call stack, framebuffer,
timers and CPU, plus the host plugins it was given for rendering, input and
audio.  Nothing is shared between machines.

The driver runs in 60Hz frames.  Each frame is a fixed burst of CPU steps,
then exactly one timer tick and one display refresh, so the renderer only ever
sees a fully settled framebuffer.  The number of steps per frame is a setting,
not a measured CPU speed.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter, sleep
from .constants import DEFAULT_STEPS_PER_FRAME, FRAME_FREQ, PROGRAM_START, STACK_SIZE
from .cpu import CPU
from .debugger import Debugger
from .framebuffer import Framebuffer
from .memory import Memory
from .stack import Stack
from .timers import Timers

FRAME_INTERVAL = 1.0 / FRAME_FREQ


class Machine:
    def __init__(self, renderer, inputs, audio, debugger=None, steps_per_frame=None, **cpu_options):
        self.renderer = renderer
        self.inputs = inputs
        self.audio = audio
        self.debugger = Debugger() if debugger is None else debugger
        self.steps_per_frame = DEFAULT_STEPS_PER_FRAME if steps_per_frame is None else steps_per_frame
        self.program = b""

        # Write system font into memory before anything else
        self.memory = Memory()
        self.memory.load_font_set()

        self.stack = Stack(STACK_SIZE)
        self.framebuffer = Framebuffer(renderer)
        self.timers = Timers(audio)
        self.cpu = CPU(
            self.memory, self.stack, self.framebuffer, self.inputs, self.timers, self.debugger, **cpu_options
        )
        self.cpu.reset(PROGRAM_START)

        # Performance-related vars
        self.frames = 0
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0

    def load_program(self, data):
        # Fails before anything is cleared if the program doesn't fit
        self.memory.check_program_size(data)
        self.program = bytes(data)
        self.reset()

    def reset(self):
        # Back to the state just after loading, ready to run the same program again
        self.memory.clear()
        self.memory.load_font_set()
        self.memory.load_program(self.program)
        self.stack.clear()
        self.framebuffer.clear()
        self.timers.reset()
        self.inputs.release_all()
        self.cpu.reset(PROGRAM_START)
        self.frames = 0

    def step(self):
        self.cpu.step()

    def tick(self):
        self.timers.tick()

    def run_frame(self):
        for _ in range(self.steps_per_frame):
            self.step()

        self.tick()
        self.framebuffer.refresh_display()
        self.frames += 1
        self.perf_counter_fps += 1
        self.perf_counter_ops += self.steps_per_frame

    def run(self, max_frames=None):
        # Returns when the host asks to quit, or after max_frames if given.  Errors are left to the caller.
        this_time = perf_counter()
        next_frame_time = this_time
        next_perf_report_time = this_time + 1.0
        frames_run = 0

        while max_frames is None or frames_run < max_frames:
            this_time = perf_counter()

            # Performance counters
            if this_time >= next_perf_report_time:
                next_perf_report_time = this_time + 1.0
                # Reporting the performance should be done before a refresh, as refreshing will likely show the report
                self.framebuffer.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_fps = 0
                self.perf_counter_ops = 0

            # Process inputs at 60Hz too, to avoid slowdown
            if self.inputs.process_messages():
                return

            self.run_frame()
            frames_run += 1

            # If we're running late, don't try to catch up by running frames back to back
            next_frame_time = max(next_frame_time + FRAME_INTERVAL, this_time)
            delay = next_frame_time - perf_counter()

            if delay > 0:
                sleep(delay)
