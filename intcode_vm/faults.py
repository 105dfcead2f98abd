"""
Intcode VM: Fault Taxonomy

Every condition that stops a machine early is one of these exceptions.
The decoder, command resolver and memory raise them at the point of
detection; the engine catches them in ``Machine.step()`` and turns them
into a terminal ``Faulted`` result.

    IntcodeFault
    ├── DecodeFault
    │   ├── MalformedWord
    │   ├── UnknownOpcode
    │   ├── InvalidAddressingMode
    │   └── TruncatedInstruction
    └── RuntimeFault
        ├── OutOfBounds
        ├── WriteToImmediate
        ├── ProgramCounterOutOfBounds
        ├── StepLimitExceeded
        └── IOFault
"""

from typing import Optional


class IntcodeFault(Exception):
    """Base for all machine faults.

    ``pc`` is the program counter of the instruction that faulted. The
    engine fills it in when the raising layer could not know it.
    """

    def __init__(self, message: str, pc: Optional[int] = None):
        super().__init__(message)
        self.pc = pc

    def __str__(self) -> str:
        msg = super().__str__()
        if self.pc is not None:
            return f"{msg} (pc={self.pc})"
        return msg


# ──────────────────────────────────────────────
# Decode faults
# ──────────────────────────────────────────────

class DecodeFault(IntcodeFault):
    """The instruction at pc could not be turned into a Command."""


class MalformedWord(DecodeFault):
    def __init__(self, word, pc: Optional[int] = None):
        self.word = word
        super().__init__(f"Malformed instruction word {word!r}", pc)


class UnknownOpcode(DecodeFault):
    def __init__(self, opcode: int, pc: Optional[int] = None):
        self.opcode = opcode
        super().__init__(f"Unknown opcode {opcode}", pc)


class InvalidAddressingMode(DecodeFault):
    def __init__(self, digit: str, pc: Optional[int] = None):
        self.digit = digit
        super().__init__(f"Invalid addressing mode digit {digit!r}", pc)


class TruncatedInstruction(DecodeFault):
    """Fewer cells remain after pc than the opcode needs."""

    def __init__(self, opcode: int, needed: int, available: int,
                 pc: Optional[int] = None):
        self.opcode = opcode
        self.needed = needed
        self.available = available
        super().__init__(
            f"Truncated instruction: opcode {opcode} needs {needed} cells, "
            f"{available} available", pc)


# ──────────────────────────────────────────────
# Runtime faults
# ──────────────────────────────────────────────

class RuntimeFault(IntcodeFault):
    """A decoded instruction could not be carried out."""


class OutOfBounds(RuntimeFault):
    def __init__(self, address: int, size: Optional[int] = None,
                 pc: Optional[int] = None):
        self.address = address
        self.size = size
        if size is None:
            msg = f"Address {address} out of bounds"
        else:
            msg = f"Address {address} out of bounds [0, {size})"
        super().__init__(msg, pc)


class WriteToImmediate(RuntimeFault):
    def __init__(self, value: int, pc: Optional[int] = None):
        self.value = value
        super().__init__(f"Write through immediate operand {value}", pc)


class ProgramCounterOutOfBounds(RuntimeFault):
    def __init__(self, pc: int, size: int):
        self.size = size
        super().__init__(f"Program counter left memory [0, {size})", pc)


class StepLimitExceeded(RuntimeFault):
    def __init__(self, limit: int, pc: Optional[int] = None):
        self.limit = limit
        super().__init__(f"Step limit of {limit} instructions exceeded", pc)


class IOFault(RuntimeFault):
    """The I/O port failed while serving an Input or Output instruction."""

    def __init__(self, cause: Exception, pc: Optional[int] = None):
        self.cause = cause
        super().__init__(f"I/O port error: {cause}", pc)
