"""
Growable memory tape backed by a numpy array.

Cells are stored in the smallest unsigned dtype that fits the configured cell
width; all arithmetic on cell values is done on Python ints by the
interpreter, the tape only stores and hands back values.
"""

from typing import List

import numpy as np


def dtype_for_bits(cell_bits: int) -> np.dtype:
    """Smallest unsigned numpy dtype holding cell_bits bits."""
    if cell_bits <= 8:
        return np.dtype(np.uint8)
    if cell_bits <= 16:
        return np.dtype(np.uint16)
    if cell_bits <= 32:
        return np.dtype(np.uint32)
    return np.dtype(np.uint64)


class Tape:
    """Index-addressable buffer of cells that grows on the right only."""

    def __init__(self, initial_size: int = 1, cell_bits: int = 8):
        self.floor = initial_size
        self.dtype = dtype_for_bits(cell_bits)
        self._cells = np.zeros(max(initial_size, 16), dtype=self.dtype)
        self._size = initial_size
        self.max_size = initial_size

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index: int) -> int:
        if not 0 <= index < self._size:
            raise IndexError(f"tape index {index} out of range")
        return int(self._cells[index])

    def __setitem__(self, index: int, value: int) -> None:
        if not 0 <= index < self._size:
            raise IndexError(f"tape index {index} out of range")
        self._cells[index] = value

    def append_cell(self) -> None:
        """Grow by one zero cell at the right end."""
        if self._size == len(self._cells):
            # Double the capacity, copying the live region
            grown = np.zeros(len(self._cells) * 2, dtype=self.dtype)
            grown[:self._size] = self._cells[:self._size]
            self._cells = grown
        self._cells[self._size] = 0
        self._size += 1
        if self._size > self.max_size:
            self.max_size = self._size

    def trim(self, pointer: int) -> int:
        """Drop trailing zero cells beyond pointer, never below the floor.

        Returns the number of cells removed.
        """
        limit = max(self.floor, pointer + 1)
        if self._size <= limit:
            return 0
        tail = self._cells[limit:self._size]
        nonzero = np.flatnonzero(tail)
        new_size = limit + (int(nonzero[-1]) + 1 if len(nonzero) else 0)
        removed = self._size - new_size
        self._size = new_size
        return removed

    def snapshot(self) -> List[int]:
        """Copy of the live cells as Python ints."""
        return self._cells[:self._size].tolist()
