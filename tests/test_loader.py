import pytest

from brainfuck import Instruction, accepted_commands, load_program, strip_comments


def test_strips_comments_and_whitespace():
    source = "Hello + world -\n> [ < ] . , ! ok"
    assert strip_comments(source) == "+->[<].,"


def test_unicode_and_digits_are_comments():
    assert strip_comments("→ 123 ünïcode + ∞ -") == "+-"


def test_debug_symbol_only_kept_when_enabled():
    assert strip_comments("+#+") == "++"
    assert strip_comments("+#+", debug_enabled=True) == "+#+"
    assert accepted_commands() == "><+-.,[]"
    assert accepted_commands(True) == "><+-.,[]#"


@pytest.mark.parametrize("source", [
    "++++++++[>++++++++<-]>+.",
    "a[b]c,d.e#f",
    "",
    "no instructions at all",
])
@pytest.mark.parametrize("debug", [False, True])
def test_stripping_is_idempotent(source, debug):
    once = strip_comments(source, debug)
    assert strip_comments(once, debug) == once


def test_load_program_produces_instruction_members():
    program = load_program("x>y<+-.,[]#", debug_enabled=True)
    assert program == (
        Instruction.MOVE_RIGHT, Instruction.MOVE_LEFT, Instruction.INCREMENT,
        Instruction.DECREMENT, Instruction.OUTPUT, Instruction.INPUT,
        Instruction.JUMP_IF_ZERO, Instruction.JUMP_IF_NONZERO, Instruction.DEBUG_PRINT,
    )
    assert isinstance(program, tuple)


def test_debug_symbol_does_not_shift_positions_when_disabled():
    program = load_program("[#]")
    assert program == (Instruction.JUMP_IF_ZERO, Instruction.JUMP_IF_NONZERO)
