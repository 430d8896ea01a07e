#!/usr/bin/env python3
"""
Brainfuck Step-by-Step Debugger

Shows the step-by-step execution of a Brainfuck program, displaying the
state of the memory tape and the output after every executed instruction.
"""

import sys
from collections import deque
from typing import Optional, Sequence, TextIO

from bfcore.config import VMConfig
from brainfuck import BrainfuckInterpreter, Instruction

OUTPUT_TAIL = 40

_DESCRIPTIONS = {
    '>': "Move pointer right",
    '<': "Move pointer left",
    '+': "Increment cell",
    '-': "Decrement cell",
    '.': "Output cell",
    ',': "Read input",
    '[': "Loop start",
    ']': "Loop end",
    '#': "Debug print",
}


class BrainfuckDebugger(BrainfuckInterpreter):
    """Interpreter that prints the machine state after each step."""

    def __init__(self, config: Optional[VMConfig] = None, show_memory_range: int = 10,
                 stream: Optional[TextIO] = None):
        super().__init__(config)
        self.show_memory_range = show_memory_range
        self.stream = stream or sys.stderr

    def reset(self) -> None:
        super().reset()
        # Only the most recent output is shown, so only that is kept
        self.output_tail = deque(maxlen=OUTPUT_TAIL)

    def _after_step(self, instructions: Sequence[Instruction], position: int,
                    cmd: Instruction) -> None:
        cell = self.memory[self.pointer]
        if cmd == '.':
            self.output_tail.append(cell)
        print(f"\nStep {self.step_count}: Execute '{cmd.value}' at position {position}", file=self.stream)
        print(f"  {_DESCRIPTIONS[cmd.value]} → pointer {self.pointer}, cell {cell}", file=self.stream)
        self._show_state(instructions)

    def _show_state(self, instructions: Sequence[Instruction]) -> None:
        """Show the program around the instruction pointer and a window of the tape."""
        program_display = ""
        for i, cmd in enumerate(instructions):
            if i == self.instruction_pointer:
                program_display += f"[{cmd.value}]"
            else:
                program_display += cmd.value
        print(f"Program:  {program_display}", file=self.stream)

        # Show memory tape (focused around pointer)
        start = max(0, self.pointer - self.show_memory_range // 2)
        end = min(len(self.memory), start + self.show_memory_range)

        # Adjust start if we're near the end
        if end - start < self.show_memory_range:
            start = max(0, end - self.show_memory_range)

        width = max(3, len(str(self.config.cell_max)))
        memory_vals = []
        memory_ptrs = []
        memory_addrs = []

        for i in range(start, end):
            memory_vals.append(f"{self.memory[i]:{width}d}")
            memory_ptrs.append(f"{'^':^{width}}" if i == self.pointer else " " * width)
            memory_addrs.append(f"{i:{width}d}")

        print("Memory:   [" + "|".join(memory_vals) + "]", file=self.stream)
        print("Pointer:   " + " ".join(memory_ptrs), file=self.stream)
        print("Address:   " + " ".join(memory_addrs), file=self.stream)

        if self.output_tail:
            output_chars = ''.join(chr(v % 0x110000) for v in self.output_tail)
            print(f"Output:   {output_chars!r} (last {len(self.output_tail)} of {self.output_writes})", file=self.stream)
        else:
            print("Output:   (empty)", file=self.stream)
