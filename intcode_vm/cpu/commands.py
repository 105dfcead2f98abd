"""
Intcode VM: Operands and Commands

Turns the instruction window at pc into a typed Command. Each Command
carries its operands already tagged with an addressing mode, so the
engine dispatches on the Command class alone.

Operand layout per opcode:

    ADD  a, b, dest      MUL  a, b, dest
    LT   a, b, dest      EQ   a, b, dest
    JT   cond, target    JF   cond, target
    IN   dest            OUT  src
    HALT

IN and OUT take a raw address. Their mode digit is ignored and the
operand is always a Position, even for a word like 104.
"""

from dataclasses import dataclass
from typing import ClassVar, Sequence, Union

from . import decoder
from .decoder import IMMEDIATE, decode
from ..faults import TruncatedInstruction


# ══════════════════════════════════════════════
# Addressing modes
# ══════════════════════════════════════════════

@dataclass(frozen=True)
class Immediate:
    """Operand is the literal value. Never a write target."""
    value: int

    def __str__(self) -> str:
        return f"#{self.value}"


@dataclass(frozen=True)
class Position:
    """Operand is an address into memory."""
    address: int

    def __str__(self) -> str:
        return f"[{self.address}]"


Operand = Union[Immediate, Position]


def make_operand(mode: int, raw: int) -> Operand:
    if mode == IMMEDIATE:
        return Immediate(raw)
    return Position(raw)


# ══════════════════════════════════════════════
# Commands
# ══════════════════════════════════════════════

class Command:
    """Base for the nine operations.

    Subclasses set OPCODE; MNEMONIC and LENGTH come from the decoder's
    opcode table so the two never disagree.
    """

    OPCODE: ClassVar[int]

    @property
    def length(self) -> int:
        return decoder.instruction_length(self.OPCODE)

    @property
    def mnemonic(self) -> str:
        return decoder.mnemonic(self.OPCODE)

    def operands(self) -> tuple:
        return ()

    def format(self) -> str:
        ops = ', '.join(str(op) for op in self.operands())
        return f"{self.mnemonic:4s} {ops}".rstrip()


@dataclass(frozen=True)
class _Ternary(Command):
    a: Operand
    b: Operand
    dest: Operand

    def operands(self) -> tuple:
        return (self.a, self.b, self.dest)


@dataclass(frozen=True)
class Add(_Ternary):
    OPCODE = decoder.ADD


@dataclass(frozen=True)
class Multiply(_Ternary):
    OPCODE = decoder.MUL


@dataclass(frozen=True)
class LessThan(_Ternary):
    OPCODE = decoder.LT


@dataclass(frozen=True)
class Equal(_Ternary):
    OPCODE = decoder.EQ


@dataclass(frozen=True)
class Input(Command):
    OPCODE = decoder.IN
    dest: Position

    def operands(self) -> tuple:
        return (self.dest,)


@dataclass(frozen=True)
class Output(Command):
    OPCODE = decoder.OUT
    src: Position

    def operands(self) -> tuple:
        return (self.src,)


@dataclass(frozen=True)
class _Jump(Command):
    cond: Operand
    target: Operand

    def operands(self) -> tuple:
        return (self.cond, self.target)


@dataclass(frozen=True)
class JumpIfTrue(_Jump):
    OPCODE = decoder.JT


@dataclass(frozen=True)
class JumpIfFalse(_Jump):
    OPCODE = decoder.JF


@dataclass(frozen=True)
class Halt(Command):
    OPCODE = decoder.HALT


COMMAND_CLASSES = {
    cls.OPCODE: cls
    for cls in (Add, Multiply, Input, Output, JumpIfTrue, JumpIfFalse,
                LessThan, Equal, Halt)
}


# ══════════════════════════════════════════════
# Resolver
# ══════════════════════════════════════════════

def resolve_command(window: Sequence[int]) -> Command:
    """Build the Command for the instruction at the start of window.

    window is the slice of memory beginning at pc; it may be shorter
    than four cells near the end of memory as long as the opcode needs
    no more than what is there.

    Raises the decoder's faults, or TruncatedInstruction.
    """
    if not window:
        raise TruncatedInstruction(opcode=-1, needed=1, available=0)

    opcode, modes = decode(window[0])
    length = decoder.instruction_length(opcode)
    if len(window) < length:
        raise TruncatedInstruction(opcode, length, len(window))

    cls = COMMAND_CLASSES[opcode]
    raw = window[1:length]

    if cls in (Input, Output):
        return cls(Position(raw[0]))

    operands = [make_operand(mode, value) for mode, value in zip(modes, raw)]
    return cls(*operands)
