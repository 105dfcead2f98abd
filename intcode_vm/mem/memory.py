"""
Intcode VM: Memory + Operand Access

Flat, fixed-size array of signed integers. Program and data share it,
so programs may rewrite their own instructions.

Every access is bounds-checked. Negative addresses are out of bounds;
Python's negative indexing never leaks through.
"""

from typing import Iterable, List, Tuple

from ..config import INSTRUCTION_WINDOW
from ..cpu.commands import Immediate, Operand, Position
from ..faults import OutOfBounds, WriteToImmediate


class Memory:
    """Machine memory image.

    The constructor copies its input so no caller list is aliased.
    """

    __slots__ = ('_cells',)

    def __init__(self, cells: Iterable[int]):
        self._cells: List[int] = list(cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __getitem__(self, address: int) -> int:
        return self.read(address)

    def in_bounds(self, address: int) -> bool:
        return 0 <= address < len(self._cells)

    # --- Raw access ---

    def read(self, address: int) -> int:
        if not self.in_bounds(address):
            raise OutOfBounds(address, len(self._cells))
        return self._cells[address]

    def write(self, address: int, value: int):
        if not self.in_bounds(address):
            raise OutOfBounds(address, len(self._cells))
        self._cells[address] = value

    # --- Operand access ---

    def resolve_read(self, operand: Operand) -> int:
        """Value of an operand: the literal for Immediate, memory for Position."""
        if isinstance(operand, Immediate):
            return operand.value
        return self.read(operand.address)

    def resolve_write(self, operand: Operand, value: int):
        """Store through a Position operand. Immediate is never writable."""
        if isinstance(operand, Immediate):
            raise WriteToImmediate(operand.value)
        self.write(operand.address, value)

    # --- Fetch ---

    def window(self, pc: int, size: int = INSTRUCTION_WINDOW) -> Tuple[int, ...]:
        """Cells pc..pc+size, clamped to the end of memory."""
        if not self.in_bounds(pc):
            raise OutOfBounds(pc, len(self._cells))
        return tuple(self._cells[pc:pc + size])

    # --- Inspection ---

    def snapshot(self) -> Tuple[int, ...]:
        return tuple(self._cells)

    def dump(self, start: int = 0, length: int = None, per_line: int = 8) -> str:
        """Produce a decimal dump of memory for debugging."""
        end = len(self._cells) if length is None else min(start + length, len(self._cells))
        width = max((len(str(v)) for v in self._cells[start:end]), default=1)
        lines = []
        for addr in range(start, end, per_line):
            row = self._cells[addr:min(addr + per_line, end)]
            cells = ' '.join(f'{v:>{width}}' for v in row)
            lines.append(f'{addr:5d}: {cells}')
        return '\n'.join(lines)
