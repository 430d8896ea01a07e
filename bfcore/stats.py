"""
Run statistics and the human readable statistics report.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from bfcore.config import VMConfig


@dataclass
class RunStatistics:
    """Counters and timings collected while loading and running a program."""
    program_path: Optional[str] = None
    code_input_size: int = 0
    executable_code_size: int = 0
    code_load_time_ms: float = 0.0
    commands_executed: int = 0
    command_execution_time_ms: float = 0.0
    total_execution_time_ms: float = 0.0
    initial_tape_size: int = 0
    final_tape_size: int = 0
    max_tape_size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count != 1 else ''}"


def _switch(flag: bool) -> str:
    return "enabled" if flag else "disabled"


def format_report(stats: RunStatistics, config: VMConfig) -> str:
    """Render the statistics block printed by ``bf-run --stats``."""
    lines = [
        "",
        "Brainfuck Interpreter Statistics:",
        "-=-=-=-=-=-=-=-=-=-=-=-=-=-=-=-=-",
        "",
        "Program Information",
        "-------------------",
        f"Program Path           : {stats.program_path or '(inline code)'}",
        f"Program Size           : {_plural(stats.code_input_size, 'character')}",
        f"Executable Code Size   : {_plural(stats.executable_code_size, 'character')}",
        f"Program Load Time      : {stats.code_load_time_ms:.2f} ms",
        "",
        "Execution Statistics",
        "--------------------",
        f"# of Commands Executed : {stats.commands_executed}",
        f"Command Execution Time : {stats.command_execution_time_ms:.2f} ms",
        f"Total Execution Time   : {stats.total_execution_time_ms:.2f} ms",
        "",
        "Tape Information",
        "----------------",
        f"Initial Tape Size      : {_plural(stats.initial_tape_size, 'cell')}",
        f"Final Tape Size        : {_plural(stats.final_tape_size, 'cell')}",
        f"Maximum Tape Size      : {_plural(stats.max_tape_size, 'cell')}",
        "",
        "Tape Configuration",
        "------------------",
        f"Dynamic Tape           : {_switch(config.dynamic_tape)}",
        f"Tape Wrapping          : {_switch(config.tape_wrapping)}",
        "",
        "Cell Configuration",
        "------------------",
        f"Cell Size              : {_plural(config.cell_bits, 'bit')}",
        f"Cell Wrapping          : {_switch(config.cell_wrapping)}",
        f"End Of Input           : {config.eof_behavior}",
        "",
        f"Debug Mode             : {_switch(config.debug_enabled)}",
        "",
    ]
    return "\n".join(lines)
