"""
Intcode VM
==========
Interpreter for the Intcode instruction set: a self-modifying machine
over a flat array of signed integers with nine instructions (ADD, MUL,
IN, OUT, JT, JF, LT, EQ, HALT) and two addressing modes (position and
immediate).

Architecture:
    ┌────────────┐    ┌───────────┐    ┌──────────────┐    ┌──────────┐
    │ Memory     │───>│  Decoder  │───>│  Resolver    │───>│  Engine  │
    │ (window@pc)│    │ (op+modes)│    │ (Command)    │    │ (execute)│
    └────────────┘    └───────────┘    └──────────────┘    └────┬─────┘
                                                                │
                                                           ┌────┴─────┐
                                                           │ I/O Port │
                                                           └──────────┘

    - cpu/decoder.py:    instruction word -> opcode + mode digits
    - cpu/commands.py:   operands and Commands, resolve_command()
    - mem/memory.py:     bounds-checked memory and operand access
    - periph/io_port.py: IOPort interface and ready-made ports
    - emu.py:            Machine, execute(), Halted / Faulted results
    - faults.py:         fault taxonomy
"""

__version__ = "0.1.0"

from .faults import (
    IntcodeFault, DecodeFault, RuntimeFault,
    MalformedWord, UnknownOpcode, InvalidAddressingMode, TruncatedInstruction,
    OutOfBounds, WriteToImmediate, ProgramCounterOutOfBounds,
    StepLimitExceeded, IOFault,
)
from .cpu.decoder import DecodedWord, decode
from .cpu.commands import (
    Immediate, Position, Command, Add, Multiply, Input, Output,
    JumpIfTrue, JumpIfFalse, LessThan, Equal, Halt, resolve_command,
)
from .mem.memory import Memory
from .periph.io_port import (
    IOPort, IOPortError, InputExhausted, ScriptedIO, ConsoleIO, QueueIO,
)
from .emu import Machine, MachineState, Halted, Faulted, execute
from .loader import ProgramFormatError, parse_program, load_program
from .disasm import Disassembler, disassemble


def run_program(program, inputs=(), **kwargs):
    """Run a program against a scripted input list.

    Convenience wrapper: builds a ScriptedIO and a Machine, executes it
    and returns the Halted/Faulted result. kwargs go to Machine.
    """
    return execute(Machine(program, ScriptedIO(inputs), **kwargs))
