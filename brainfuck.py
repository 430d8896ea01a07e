#!/usr/bin/env python3
"""
Brainfuck Interpreter

Brainfuck is an esoteric programming language with only 8 commands:
    >   Move the pointer to the right
    <   Move the pointer to the left
    +   Increment the memory cell at the pointer
    -   Decrement the memory cell at the pointer
    .   Output the character signified by the cell at the pointer
    ,   Input a character and store it in the cell at the pointer
    [   Jump past the matching ] if the cell at the pointer is 0
    ]   Jump back to the matching [ if the cell at the pointer is nonzero
    #   Print the interpreter state (only when debugging is enabled)

All other characters are treated as comments and ignored.

Cell width, cell wrapping, tape size, tape wrapping, dynamic tape growth and
the end-of-input policy all come from a VMConfig.
"""

import sys
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from bfcore.config import VMConfig, EOF_HALT, EOF_MAX, EOF_ZERO
from bfcore.errors import (
    BrainfuckError, CellOverflow, CellUnderflow, InvalidConfiguration, StepLimitExceeded,
    TapeOutOfBounds, UnmatchedBracket,
)
from bfcore.stats import RunStatistics
from bfcore.tape import Tape

CORE_COMMANDS = '><+-.,[]'
DEBUG_COMMAND = '#'

ReadByte = Callable[[], Optional[int]]
WriteByte = Callable[[int], None]


class Instruction(str, Enum):
    MOVE_RIGHT = '>'
    MOVE_LEFT = '<'
    INCREMENT = '+'
    DECREMENT = '-'
    OUTPUT = '.'
    INPUT = ','
    JUMP_IF_ZERO = '['
    JUMP_IF_NONZERO = ']'
    DEBUG_PRINT = '#'


_BY_SYMBOL = {ins.value: ins for ins in Instruction}


def accepted_commands(debug_enabled: bool = False) -> str:
    return CORE_COMMANDS + (DEBUG_COMMAND if debug_enabled else '')


def strip_comments(source: str, debug_enabled: bool = False) -> str:
    """Remove comments (keep only valid BF commands)."""
    accepted = accepted_commands(debug_enabled)
    return ''.join(c for c in source if c in accepted)


def load_program(source: str, debug_enabled: bool = False) -> Tuple[Instruction, ...]:
    """Turn raw source into the executable instruction sequence."""
    return tuple(_BY_SYMBOL[c] for c in strip_comments(source, debug_enabled))


def build_jump_table(code: Sequence[str]) -> Dict[int, int]:
    """Build a table mapping bracket positions for efficient jumping."""
    jump_table = {}
    stack = []

    for i, cmd in enumerate(code):
        if cmd == '[':
            stack.append(i)
        elif cmd == ']':
            if not stack:
                raise UnmatchedBracket(f"Unmatched ']' at position {i}", position=i)
            start = stack.pop()
            jump_table[start] = i
            jump_table[i] = start

    if stack:
        raise UnmatchedBracket(f"Unmatched '[' at position {stack[-1]}", position=stack[-1])

    return jump_table


def find_matching_bracket(code: Sequence[str], position: int) -> int:
    """Locate the partner of the bracket at position by counting nesting depth.

    Scans forward from '[' and backward from ']'. This is O(n) per call and
    only used to cross-check build_jump_table.
    """
    cmd = code[position]
    if cmd == '[':
        step, opener, closer = 1, '[', ']'
    elif cmd == ']':
        step, opener, closer = -1, ']', '['
    else:
        raise ValueError(f"no bracket at position {position}")

    depth = 1
    i = position
    while depth > 0:
        i += step
        if i < 0 or i >= len(code):
            raise UnmatchedBracket(f"Unmatched '{cmd}' at position {position}", position=position)
        if code[i] == opener:
            depth += 1
        elif code[i] == closer:
            depth -= 1
    return i


@dataclass
class DebugRecord:
    """Interpreter state captured by the '#' instruction."""
    position: int
    pointer: int
    value: int
    tape: List[int] = field(default_factory=list)

    def format(self) -> str:
        cells = ", ".join(str(v) for v in self.tape)
        return (f"Debug: Pointer: {self.position}, Tape Pointer: {self.pointer}, "
                f"Cell Value: {self.value}, Tape: [{cells}]")


def print_debug_record(record: DebugRecord) -> None:
    print(record.format(), file=sys.stderr)


@dataclass
class ExecutionResult:
    exit_status: int
    statistics: RunStatistics
    error: Optional[BrainfuckError] = None


class BrainfuckInterpreter:
    def __init__(self, config: Optional[VMConfig] = None):
        self.config = config or VMConfig()
        self.reset()

    def reset(self) -> None:
        """Fresh tape and pointers; a tape never outlives one run."""
        self.memory = Tape(self.config.initial_tape_size, self.config.cell_bits)
        self.pointer = 0
        self.instruction_pointer = 0
        self.input_reads = 0
        self.output_writes = 0
        self.step_count = 0
        self.statistics = RunStatistics(initial_tape_size=self.config.initial_tape_size)

    def run(self, code: str, input_data: Union[str, bytes] = "") -> str:
        """Execute Brainfuck code with optional input data, return the output as text."""
        if isinstance(input_data, str):
            input_data = input_data.encode('utf-8')
        pending = list(input_data)
        pending.reverse()

        def read_byte() -> Optional[int]:
            return pending.pop() if pending else None

        output: List[int] = []
        instructions = load_program(code, self.config.debug_enabled)
        self.execute(instructions, read_byte, output.append)
        return ''.join(chr(v % 0x110000) for v in output)

    def execute(self, instructions: Sequence[Instruction], read_byte: ReadByte,
                write_byte: WriteByte,
                debug_fn: Optional[Callable[[DebugRecord], None]] = None) -> RunStatistics:
        """Run an instruction sequence to completion.

        Raises a BrainfuckError subclass on the first fatal condition; the
        statistics gathered up to that point stay available on
        self.statistics.
        """
        self.reset()
        config = self.config
        debug_fn = debug_fn or print_debug_record
        cell_max = config.cell_max
        step_limit = config.step_limit
        memory = self.memory
        stats = self.statistics
        stats.executable_code_size = len(instructions)

        started = time.perf_counter()
        try:
            # Build jump table for brackets; unmatched brackets fail before anything runs
            jump_table = build_jump_table(instructions)

            while self.instruction_pointer < len(instructions):
                if step_limit is not None and self.step_count >= step_limit:
                    raise StepLimitExceeded(
                        f"Execution stopped after {step_limit} steps",
                        position=self.instruction_pointer, pointer=self.pointer,
                    )
                position = self.instruction_pointer
                cmd = instructions[position]
                self.step_count += 1

                if cmd == '>':
                    self.pointer += 1
                    if self.pointer >= len(memory):
                        if config.dynamic_tape:
                            memory.append_cell()
                        elif config.tape_wrapping:
                            self.pointer = 0
                        else:
                            raise TapeOutOfBounds(
                                "Tape pointer moved past the right end of the tape",
                                position=self.instruction_pointer, pointer=self.pointer,
                            )

                elif cmd == '<':
                    self.pointer -= 1
                    if self.pointer < 0:
                        if config.tape_wrapping:
                            self.pointer = len(memory) - 1
                        else:
                            raise TapeOutOfBounds(
                                "Tape pointer moved past the left end of the tape",
                                position=self.instruction_pointer, pointer=self.pointer,
                            )
                    if config.dynamic_tape:
                        # Only a left move can leave zero cells behind the pointer
                        memory.trim(self.pointer)

                elif cmd == '+':
                    value = memory[self.pointer] + 1
                    if value > cell_max:
                        if not config.cell_wrapping:
                            raise CellOverflow(
                                f"Cell value exceeds maximum for {config.cell_bits}-bit cells",
                                position=self.instruction_pointer, pointer=self.pointer,
                                value=cell_max,
                            )
                        value = 0
                    memory[self.pointer] = value

                elif cmd == '-':
                    value = memory[self.pointer] - 1
                    if value < 0:
                        if not config.cell_wrapping:
                            raise CellUnderflow(
                                f"Cell value cannot be negative for {config.cell_bits}-bit cells",
                                position=self.instruction_pointer, pointer=self.pointer,
                                value=0,
                            )
                        value = cell_max
                    memory[self.pointer] = value

                elif cmd == '.':
                    value = memory[self.pointer]
                    self.output_writes += 1
                    write_byte(value)

                elif cmd == ',':
                    value = read_byte()
                    if value is None:
                        if config.eof_behavior == EOF_HALT:
                            self.instruction_pointer = len(instructions)
                            break
                        if config.eof_behavior == EOF_ZERO:
                            memory[self.pointer] = 0
                        elif config.eof_behavior == EOF_MAX:
                            memory[self.pointer] = cell_max
                        # EOF_UNCHANGED: leave cell unchanged
                    else:
                        self.input_reads += 1
                        if value > cell_max:
                            if not config.cell_wrapping:
                                raise CellOverflow(
                                    f"Input value {value} exceeds maximum for {config.cell_bits}-bit cells",
                                    position=self.instruction_pointer, pointer=self.pointer,
                                    value=value,
                                )
                            value %= cell_max + 1
                        memory[self.pointer] = value

                elif cmd == '[':
                    if memory[self.pointer] == 0:
                        self.instruction_pointer = jump_table[self.instruction_pointer]

                elif cmd == ']':
                    if memory[self.pointer] != 0:
                        self.instruction_pointer = jump_table[self.instruction_pointer]

                elif cmd == '#':
                    if config.debug_enabled:
                        debug_fn(DebugRecord(
                            position=self.instruction_pointer,
                            pointer=self.pointer,
                            value=memory[self.pointer],
                            tape=memory.snapshot(),
                        ))

                self._after_step(instructions, position, cmd)
                self.instruction_pointer += 1
        finally:
            stats.commands_executed = self.step_count
            stats.command_execution_time_ms = (time.perf_counter() - started) * 1000.0
            stats.final_tape_size = len(memory)
            stats.max_tape_size = memory.max_size

        return stats

    def _after_step(self, instructions: Sequence[Instruction], position: int,
                    cmd: Instruction) -> None:
        """Hook called after every executed instruction; position is where cmd was fetched."""


def execute(instructions: Sequence[Instruction], config: VMConfig, read_byte: ReadByte,
            write_byte: WriteByte,
            debug_fn: Optional[Callable[[DebugRecord], None]] = None,
            interpreter: Optional[BrainfuckInterpreter] = None) -> ExecutionResult:
    """Run instructions and report (exit_status, statistics, error) instead of raising."""
    if interpreter is not None and interpreter.config != config:
        raise InvalidConfiguration("interpreter was built with a different configuration")
    itp = interpreter or BrainfuckInterpreter(config)
    try:
        stats = itp.execute(instructions, read_byte, write_byte, debug_fn)
    except BrainfuckError as e:
        return ExecutionResult(exit_status=1, statistics=itp.statistics, error=e)
    return ExecutionResult(exit_status=0, statistics=stats)
