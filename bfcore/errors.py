"""
Error taxonomy for the Brainfuck virtual machine.

Every error is fatal: the run stops at the offending instruction and the
caller gets the instruction position and the tape pointer/value at the time
of the fault.
"""

from typing import Optional


class BrainfuckError(Exception):
    """Base class for all interpreter failures."""

    kind = "BrainfuckError"

    def __init__(self, message: str, position: Optional[int] = None,
                 pointer: Optional[int] = None, value: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.position = position
        self.pointer = pointer
        self.value = value

    def describe(self) -> str:
        """One-line diagnostic with the error kind and whatever context is known."""
        parts = [f"{self.kind}: {self.message}"]
        context = []
        if self.position is not None:
            context.append(f"instruction {self.position}")
        if self.pointer is not None:
            context.append(f"tape pointer {self.pointer}")
        if self.value is not None:
            context.append(f"cell value {self.value}")
        if context:
            parts.append(f"({', '.join(context)})")
        return " ".join(parts)


class TapeOutOfBounds(BrainfuckError):
    kind = "TapeOutOfBounds"


class CellOverflow(BrainfuckError):
    kind = "CellOverflow"


class CellUnderflow(BrainfuckError):
    kind = "CellUnderflow"


class UnmatchedBracket(BrainfuckError):
    kind = "UnmatchedBracket"


class StepLimitExceeded(BrainfuckError):
    kind = "StepLimitExceeded"


class InvalidConfiguration(BrainfuckError, ValueError):
    kind = "InvalidConfiguration"


class IOFailure(BrainfuckError, OSError):
    kind = "IOFailure"
