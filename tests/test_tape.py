import numpy as np
import pytest

from bfcore.tape import Tape, dtype_for_bits


@pytest.mark.parametrize("bits, dtype", [
    (1, np.uint8), (8, np.uint8), (9, np.uint16), (16, np.uint16),
    (17, np.uint32), (32, np.uint32), (33, np.uint64), (64, np.uint64),
])
def test_dtype_for_bits(bits, dtype):
    assert dtype_for_bits(bits) == np.dtype(dtype)


def test_initial_tape_is_zeroed():
    tape = Tape(5)
    assert len(tape) == 5
    assert tape.snapshot() == [0, 0, 0, 0, 0]
    assert tape.max_size == 5


def test_growth_past_capacity_keeps_values():
    tape = Tape(1, cell_bits=16)
    tape[0] = 1000
    for i in range(1, 100):
        tape.append_cell()
        tape[i] = i
    assert len(tape) == 100
    assert tape[0] == 1000
    assert tape[99] == 99
    assert tape.max_size == 100


def test_stores_full_64_bit_values():
    tape = Tape(1, cell_bits=64)
    tape[0] = 2 ** 64 - 1
    assert tape[0] == 2 ** 64 - 1
    assert isinstance(tape[0], int)


def test_out_of_range_index():
    tape = Tape(2)
    with pytest.raises(IndexError):
        tape[2]
    with pytest.raises(IndexError):
        tape[-1] = 1


def test_trim_drops_trailing_zeros_only():
    tape = Tape(1)
    for _ in range(5):
        tape.append_cell()
    tape[2] = 7
    assert tape.trim(0) == 3
    assert tape.snapshot() == [0, 0, 7]
    assert tape.max_size == 6


def test_trim_respects_floor_and_pointer():
    tape = Tape(3)
    for _ in range(4):
        tape.append_cell()
    assert tape.trim(4) == 2
    assert len(tape) == 5
    assert tape.trim(0) == 2
    assert len(tape) == 3


def test_regrown_cell_reads_zero_after_trim():
    tape = Tape(1)
    tape.append_cell()
    tape[1] = 9
    tape[1] = 0
    tape.trim(0)
    tape.append_cell()
    assert tape[1] == 0
