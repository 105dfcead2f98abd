"""
Intcode VM: Disassembler

Linear-sweep listing of a memory image. Code and data share memory, so
every cell that does not decode as an instruction is listed as DATA and
the sweep moves on by one cell.

    dis = Disassembler([1,9,10,3,2,3,11,0,99,30,40,50])
    print(dis.listing())

        0: 1,9,10,3          ADD  [9], [10], [3]
        4: 2,3,11,0          MUL  [3], [11], [0]
        8: 99                HALT
        9: 30                DATA 30
       ...
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence

from .cpu.commands import Command, resolve_command
from .faults import DecodeFault


@dataclass
class DisassembledInstruction:
    """One listing line: an instruction, or a single DATA cell."""
    address: int
    raw: Sequence[int]
    command: Optional[Command] = None

    @property
    def length(self) -> int:
        return len(self.raw)

    @property
    def mnemonic(self) -> str:
        return self.command.mnemonic if self.command else 'DATA'

    def format(self, raw_width: int = 20) -> str:
        raw_s = ','.join(str(v) for v in self.raw).ljust(raw_width)
        if self.command is None:
            asm_s = f"DATA {self.raw[0]}"
        else:
            asm_s = self.command.format()
        return f"{self.address:5d}: {raw_s} {asm_s}"


class Disassembler:
    def __init__(self, program: Sequence[int]):
        self.program = list(program)

    def decode_one(self, address: int) -> DisassembledInstruction:
        if not 0 <= address < len(self.program):
            raise ValueError(
                f"Address {address} outside program of {len(self.program)} cells")
        window = self.program[address:address + 4]
        try:
            command = resolve_command(window)
        except DecodeFault:
            return DisassembledInstruction(address, window[:1])
        return DisassembledInstruction(address, window[:command.length], command)

    def sweep(self, start: int = 0, count: Optional[int] = None) -> Iterator[DisassembledInstruction]:
        """Yield listing entries from start, at most count of them.

        Raises ValueError on the first iteration if start is not a cell
        of the program.
        """
        if not 0 <= start < len(self.program):
            raise ValueError(
                f"Start {start} outside program of {len(self.program)} cells")
        address = start
        emitted = 0
        while address < len(self.program):
            if count is not None and emitted >= count:
                return
            inst = self.decode_one(address)
            yield inst
            emitted += 1
            address += inst.length

    def listing(self, start: int = 0, count: Optional[int] = None) -> str:
        return '\n'.join(inst.format() for inst in self.sweep(start, count))

    def opcode_histogram(self) -> Dict[str, int]:
        """Mnemonic counts over a full sweep, DATA included."""
        return dict(Counter(inst.mnemonic for inst in self.sweep()))


def disassemble(program: Sequence[int], start: int = 0,
                count: Optional[int] = None) -> List[DisassembledInstruction]:
    return list(Disassembler(program).sweep(start, count))
