#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from fchip.constants import DEFAULT_KEYMAP, FONT_SET
from fchip.machine import Machine
from fchip.memory import ProgramSizeError
from fchip.renderers.r_null import Renderer
from fchip.inputs.i_null import Inputs
from fchip.audio.a_null import Audio

# Set V0 to 1, point I at the glyph for "1", draw it at (V0, V0), then loop forever
DRAW_PROGRAM = bytes((0x60, 0x01, 0xF0, 0x29, 0xD0, 0x05, 0x12, 0x06))

# Wait for a key in V4, then loop forever
KEY_PROGRAM = bytes((0xF4, 0x0A, 0x12, 0x02))

# Start a 2-frame sound timer, then loop forever
SOUND_PROGRAM = bytes((0x61, 0x02, 0xF1, 0x18, 0x12, 0x04))


class QuitAfterInputs(Inputs):
    def __init__(self, frames):
        super().__init__(DEFAULT_KEYMAP)
        self.frames = frames

    def process_messages(self):
        self.frames -= 1
        return self.frames < 0


class TestMachine(unittest.TestCase):
    def setUp(self):
        self.renderer = Renderer()
        self.inputs = Inputs(DEFAULT_KEYMAP, self.renderer)
        self.audio = Audio()
        self.machine = Machine(self.renderer, self.inputs, self.audio, steps_per_frame=4)

    def test_machine_initial_state(self):
        machine = self.machine
        self.assertEqual(0x200, machine.cpu.pc)
        self.assertEqual(FONT_SET, bytes(machine.memory.read_block(0, 80)))
        self.assertEqual(bytes(16), bytes(machine.cpu.v))
        self.assertEqual(0, machine.cpu.i)
        self.assertEqual(0, machine.stack.pointer)
        self.assertEqual((0, 0), (machine.timers.delay, machine.timers.sound))
        self.assertEqual(bytes(2048), bytes(machine.framebuffer.get_pixels()))

    def test_machine_load_program_too_large(self):
        self.assertRaises(ProgramSizeError, self.machine.load_program, bytes(0xE01))

    def test_machine_run_frame(self):
        self.machine.load_program(DRAW_PROGRAM)
        self.machine.run_frame()
        self.assertEqual(0x206, self.machine.cpu.pc)
        self.assertEqual(1, self.renderer.frames_presented)
        # Glyph "1" top row is 0x20, drawn at (1, 1)
        self.assertEqual(1, self.machine.framebuffer.get_pixel(3, 1))
        self.assertEqual(0, self.machine.cpu.v[0xF])

    def test_machine_timers_tick_once_per_frame(self):
        self.machine.load_program(b"\x12\x00")
        self.machine.timers.set_delay(10)

        for _ in range(3):
            self.machine.run_frame()

        self.assertEqual(7, self.machine.timers.delay)

    def test_machine_sound_tone(self):
        self.machine.load_program(SOUND_PROGRAM)
        self.machine.run_frame()  # Timer set to 2, then ticks to 1
        self.assertEqual(0, self.audio.tones_played)
        self.machine.run_frame()
        self.assertEqual(1, self.audio.tones_played)
        self.machine.run_frame()
        self.assertEqual(1, self.audio.tones_played)

    def test_machine_waits_for_key_across_frames(self):
        self.machine.load_program(KEY_PROGRAM)

        for _ in range(3):
            self.machine.run_frame()
            self.assertEqual(0x200, self.machine.cpu.pc)

        self.inputs.set_key("a", True)  # Key 0x7
        self.machine.step()
        self.assertEqual(0x7, self.machine.cpu.v[0x4])
        self.assertEqual(0x202, self.machine.cpu.pc)

    def test_machine_reset(self):
        self.machine.load_program(DRAW_PROGRAM)
        self.machine.run_frame()
        self.machine.timers.set_delay(5)
        self.inputs.set_key("1", True)
        self.machine.reset()
        self.assertEqual(0x200, self.machine.cpu.pc)
        self.assertEqual(0, self.machine.cpu.v[0])
        self.assertEqual(0, self.machine.timers.delay)
        self.assertIsNone(self.inputs.first_pressed())
        self.assertEqual(bytes(2048), bytes(self.machine.framebuffer.get_pixels()))
        self.assertEqual(DRAW_PROGRAM, bytes(self.machine.memory.read_block(0x200, len(DRAW_PROGRAM))))

    def test_machine_load_program_replaces_state(self):
        # CALL 0x204, then LD I, 0x000 and DRW V0, V0, 5 before looping at 0x208
        self.machine.load_program(bytes((0x22, 0x04, 0x00, 0x00, 0xA0, 0x00, 0xD0, 0x05, 0x12, 0x08)))
        self.machine.timers.set_delay(30)
        self.inputs.set_key("1", True)
        self.machine.run_frame()
        self.assertEqual(1, self.machine.stack.pointer)

        self.machine.load_program(b"\x12\x00")
        self.assertEqual(0x200, self.machine.cpu.pc)
        self.assertEqual(0, self.machine.stack.pointer)
        self.assertEqual((0, 0), (self.machine.timers.delay, self.machine.timers.sound))
        self.assertEqual(bytes(2048), bytes(self.machine.framebuffer.get_pixels()))
        self.assertIsNone(self.inputs.first_pressed())
        self.assertEqual(bytes(8), bytes(self.machine.memory.read_block(0x202, 8)))

    def test_machine_load_program_too_large_keeps_state(self):
        self.machine.load_program(DRAW_PROGRAM)
        self.machine.run_frame()
        self.assertRaises(ProgramSizeError, self.machine.load_program, bytes(0xE01))
        self.assertEqual(DRAW_PROGRAM, self.machine.program)
        self.assertEqual(0x206, self.machine.cpu.pc)
        self.assertEqual(1, self.machine.framebuffer.get_pixel(3, 1))

    def test_machine_run_until_quit(self):
        inputs = QuitAfterInputs(2)
        machine = Machine(self.renderer, inputs, self.audio, steps_per_frame=1)
        machine.load_program(b"\x12\x00")
        machine.run()
        self.assertEqual(2, machine.frames)

    def test_machine_run_max_frames(self):
        self.machine.load_program(b"\x12\x00")
        self.machine.run(max_frames=3)
        self.assertEqual(3, self.machine.frames)
        self.assertEqual(3, self.renderer.frames_presented)

    def test_machine_cpu_options(self):
        machine = Machine(Renderer(), Inputs(), Audio(), shift_quirks=True, strict=True)
        self.assertTrue(machine.cpu.shift_quirks)
        self.assertTrue(machine.cpu.strict)
