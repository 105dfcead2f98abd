"""
Intcode VM: Execution Engine

Owns memory and the program counter and runs the cycle:

  1. Check pc is inside memory
  2. Fetch the instruction window memory[pc .. pc+4] (clamped)
  3. Resolve it into a Command (decode opcode + modes)
  4. Execute the Command: memory reads/writes or an I/O port call
  5. Advance pc by the instruction length, or jump

until HALT or a fault.

Termination:
  HALTED   HALT executed; memory[0] is reported as the final value
  FAULTED  any IntcodeFault (decode, bounds, immediate write, I/O, step
           limit); execution never resumes afterwards

Both terminal results carry the final memory and every output value in
the order the program produced it.

Usage:
    io = ScriptedIO([8])
    result = execute(Machine([3,9,8,9,10,9,4,9,99,-1,8], io))
    result.outputs      # (1,)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from .cpu.commands import (
    Add, Command, Equal, Halt, Input, JumpIfFalse, JumpIfTrue, LessThan,
    Multiply, Output, resolve_command,
)
from .faults import (
    IntcodeFault, IOFault, OutOfBounds, ProgramCounterOutOfBounds, StepLimitExceeded,
)
from .mem.memory import Memory
from .periph.io_port import IOPort, IOPortError

log = logging.getLogger(__name__)


class MachineState(Enum):
    RUNNING = 'RUNNING'
    HALTED = 'HALTED'
    FAULTED = 'FAULTED'


@dataclass(frozen=True)
class Halted:
    """Program reached HALT."""
    final_value: int
    memory: Tuple[int, ...]
    outputs: Tuple[int, ...]
    steps: int

    state = MachineState.HALTED


@dataclass(frozen=True)
class Faulted:
    """Program stopped on a fault; ``error`` says which."""
    error: IntcodeFault
    pc: int
    memory: Tuple[int, ...]
    outputs: Tuple[int, ...]
    steps: int

    state = MachineState.FAULTED


Result = Union[Halted, Faulted]


class Machine:
    """One program run: memory, program counter and an I/O port.

    Args:
        program: initial memory image, non-empty sequence of ints
        io: the IOPort serving IN/OUT
        max_steps: instruction budget; None for no limit
        trace: record one line per executed instruction
    """

    def __init__(self, program: Sequence[int], io: IOPort, *,
                 max_steps: Optional[int] = None, trace: bool = False):
        if not program:
            raise ValueError("program must be a non-empty sequence of integers")
        if max_steps is not None and max_steps < 0:
            raise ValueError(f"max_steps must be >= 0, got {max_steps}")

        self.mem = Memory(program)
        self.io = io
        self.max_steps = max_steps

        self._pc = 0
        self._steps = 0
        self._outputs: List[int] = []
        self._state = MachineState.RUNNING
        self._result: Optional[Result] = None

        self._trace = trace
        self._trace_output: List[str] = []

        self._dispatch = {
            Add:         self._op_add,
            Multiply:    self._op_mul,
            Input:       self._op_in,
            Output:      self._op_out,
            JumpIfTrue:  self._op_jt,
            JumpIfFalse: self._op_jf,
            LessThan:    self._op_lt,
            Equal:       self._op_eq,
            Halt:        self._op_halt,
        }

    # ══════════════════════════════════════════════
    # Inspection
    # ══════════════════════════════════════════════

    @property
    def pc(self) -> int:
        return self._pc

    @property
    def state(self) -> MachineState:
        return self._state

    @property
    def steps(self) -> int:
        return self._steps

    @property
    def outputs(self) -> Tuple[int, ...]:
        return tuple(self._outputs)

    @property
    def memory(self) -> Tuple[int, ...]:
        return self.mem.snapshot()

    @property
    def result(self) -> Optional[Result]:
        return self._result

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Optional[Result]:
        """Execute one instruction.

        Returns None while the machine keeps running, otherwise the
        terminal Halted/Faulted result. A stopped machine returns its
        result again without executing anything.
        """
        if self._state is not MachineState.RUNNING:
            return self._result

        pc = self._pc
        try:
            if self.max_steps is not None and self._steps >= self.max_steps:
                raise StepLimitExceeded(self.max_steps)
            if not self.mem.in_bounds(pc):
                raise ProgramCounterOutOfBounds(pc, len(self.mem))

            command = resolve_command(self.mem.window(pc))
            if self._trace:
                self._record_trace(pc, command)

            next_pc = self._dispatch[type(command)](command)
        except IntcodeFault as e:
            if e.pc is None:
                e.pc = pc
            return self._fault(e)

        self._steps += 1
        if next_pc is None:
            return self._halt()
        self._pc = next_pc
        return None

    def run(self) -> Result:
        """Step until HALT or a fault and return the terminal result."""
        while True:
            result = self.step()
            if result is not None:
                return result

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Each returns the next pc, or None for HALT.

    def _op_add(self, cmd: Add) -> int:
        value = self.mem.resolve_read(cmd.a) + self.mem.resolve_read(cmd.b)
        self.mem.resolve_write(cmd.dest, value)
        return self._pc + cmd.length

    def _op_mul(self, cmd: Multiply) -> int:
        value = self.mem.resolve_read(cmd.a) * self.mem.resolve_read(cmd.b)
        self.mem.resolve_write(cmd.dest, value)
        return self._pc + cmd.length

    def _op_lt(self, cmd: LessThan) -> int:
        test = self.mem.resolve_read(cmd.a) < self.mem.resolve_read(cmd.b)
        self.mem.resolve_write(cmd.dest, int(test))
        return self._pc + cmd.length

    def _op_eq(self, cmd: Equal) -> int:
        test = self.mem.resolve_read(cmd.a) == self.mem.resolve_read(cmd.b)
        self.mem.resolve_write(cmd.dest, int(test))
        return self._pc + cmd.length

    def _op_in(self, cmd: Input) -> int:
        # A bad target must not consume input
        if not self.mem.in_bounds(cmd.dest.address):
            raise OutOfBounds(cmd.dest.address, len(self.mem))
        try:
            value = self.io.request_input()
        except IOPortError as e:
            raise IOFault(e) from e
        self.mem.write(cmd.dest.address, value)
        return self._pc + cmd.length

    def _op_out(self, cmd: Output) -> int:
        value = self.mem.read(cmd.src.address)
        try:
            self.io.deliver_output(value)
        except IOPortError as e:
            raise IOFault(e) from e
        self._outputs.append(value)
        return self._pc + cmd.length

    def _op_jt(self, cmd: JumpIfTrue) -> int:
        if self.mem.resolve_read(cmd.cond) != 0:
            return self.mem.resolve_read(cmd.target)
        return self._pc + cmd.length

    def _op_jf(self, cmd: JumpIfFalse) -> int:
        if self.mem.resolve_read(cmd.cond) == 0:
            return self.mem.resolve_read(cmd.target)
        return self._pc + cmd.length

    def _op_halt(self, cmd: Halt) -> None:
        return None

    # ══════════════════════════════════════════════
    # Termination
    # ══════════════════════════════════════════════

    def _halt(self) -> Halted:
        self._state = MachineState.HALTED
        self._result = Halted(
            final_value=self.mem.read(0),
            memory=self.mem.snapshot(),
            outputs=self.outputs,
            steps=self._steps,
        )
        log.info("Halted at pc=%d after %d steps, memory[0]=%d, %d output(s)",
                 self._pc, self._steps, self._result.final_value,
                 len(self._outputs))
        return self._result

    def _fault(self, error: IntcodeFault) -> Faulted:
        self._state = MachineState.FAULTED
        self._result = Faulted(
            error=error,
            pc=self._pc,
            memory=self.mem.snapshot(),
            outputs=self.outputs,
            steps=self._steps,
        )
        log.warning("Faulted after %d steps: %s: %s",
                    self._steps, type(error).__name__, error)
        return self._result

    # ══════════════════════════════════════════════
    # Trace
    # ══════════════════════════════════════════════

    def _record_trace(self, pc: int, command: Command):
        raw = ','.join(str(v) for v in self.mem.window(pc, command.length))
        line = f"{pc:5d}: {raw:24s} {command.format()}"
        self._trace_output.append(line)
        log.debug(line)

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()


def execute(machine: Machine) -> Result:
    """Run machine to completion: Halted(...) or Faulted(...)."""
    return machine.run()
