import sys
import time
from typing import BinaryIO, Callable, Optional, TextIO, Union

from bfcore.config import VMConfig
from bfcore.errors import IOFailure
from brainfuck import (
    BrainfuckInterpreter, DebugRecord, ExecutionResult, ReadByte, WriteByte,
    execute, load_program,
)


def read_source(path: Optional[str] = None, code: Optional[str] = None,
                stdin: Optional[TextIO] = None) -> str:
    """Return program text from exactly one of: a file path, "-" (stdin), or a code string."""
    if path is not None and code is not None:
        raise IOFailure("Provide either a program file or a code string, not both")
    if code is not None:
        return code
    if path is None:
        raise IOFailure("No input file or code provided")
    if path == "-":
        stream = stdin or sys.stdin
        try:
            return stream.read()
        except (OSError, UnicodeDecodeError) as e:
            raise IOFailure(f"Unable to read program from stdin. {e}") from e
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise IOFailure(f"Unable to read from file {path}. {e}") from e


def stream_reader(stream: BinaryIO) -> ReadByte:
    """Byte producer over a binary stream; None signals end of input."""
    def read_byte() -> Optional[int]:
        try:
            data = stream.read(1)
        except OSError as e:
            raise IOFailure(f"Unable to read input. {e}") from e
        return data[0] if data else None
    return read_byte


def bytes_reader(data: Union[bytes, str]) -> ReadByte:
    """Byte producer over an in-memory buffer."""
    if isinstance(data, str):
        data = data.encode('utf-8')
    it = iter(data)

    def read_byte() -> Optional[int]:
        return next(it, None)
    return read_byte


def encode_cell(value: int) -> bytes:
    """Bytes written for one output cell.

    Values below 256 are raw bytes; wider values are written as the UTF-8
    encoding of the code point value % 0x110000.
    """
    if value < 256:
        return bytes((value,))
    return chr(value % 0x110000).encode('utf-8', 'replace')


def stream_writer(stream: BinaryIO, flush: bool = True) -> WriteByte:
    """Byte consumer over a binary stream."""
    def write_byte(value: int) -> None:
        try:
            stream.write(encode_cell(value))
            if flush:
                stream.flush()
        except OSError as e:
            raise IOFailure(f"Unable to write output. {e}") from e
    return write_byte


def run_source(source: str, config: VMConfig, read_byte: ReadByte, write_byte: WriteByte,
               program_path: Optional[str] = None,
               debug_fn: Optional[Callable[[DebugRecord], None]] = None,
               interpreter: Optional[BrainfuckInterpreter] = None) -> ExecutionResult:
    """Load and execute a program, filling in the load-time statistics."""
    started = time.perf_counter()
    instructions = load_program(source, config.debug_enabled)
    load_time_ms = (time.perf_counter() - started) * 1000.0

    result = execute(instructions, config, read_byte, write_byte, debug_fn=debug_fn,
                     interpreter=interpreter)

    stats = result.statistics
    stats.program_path = program_path
    stats.code_input_size = len(source)
    stats.executable_code_size = len(instructions)
    stats.code_load_time_ms = load_time_ms
    stats.initial_tape_size = config.initial_tape_size
    stats.total_execution_time_ms = (time.perf_counter() - started) * 1000.0
    return result


def run_once(code: str, input_data: Union[bytes, str] = b"",
             config: Optional[VMConfig] = None) -> bytes:
    """Execute BF code against in-memory input and return the raw output.

    Raises the BrainfuckError that stopped the run, if any.
    """
    config = config or VMConfig()
    out = bytearray()
    result = run_source(code, config, bytes_reader(input_data),
                        lambda value: out.extend(encode_cell(value)))
    if result.error is not None:
        raise result.error
    return bytes(out)
