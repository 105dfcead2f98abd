"""
Intcode VM: I/O Port

The engine talks to the outside world only through an IOPort:

    request_input()        IN instruction; may block
    deliver_output(value)  OUT instruction; fire-and-forget

Ports provided here:
    ScriptedIO  inputs from a fixed script, outputs kept in a list
    ConsoleIO   one integer per line on text streams (stdin/stdout)
    QueueIO     thread-safe queues, for a machine fed from another thread

Any port failure is raised as IOPortError; the engine turns it into
an IOFault.
"""

import logging
import queue
import sys
from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, List, Optional, TextIO

log = logging.getLogger(__name__)


class IOPortError(Exception):
    """The port could not serve a request."""


class InputExhausted(IOPortError):
    """No more input is available."""


class IOPort(ABC):
    """Capability interface injected into a Machine."""

    @abstractmethod
    def request_input(self) -> int:
        """Return the next input value. May block."""

    @abstractmethod
    def deliver_output(self, value: int):
        """Consume one output value."""


# ══════════════════════════════════════════════
# Scripted
# ══════════════════════════════════════════════

class ScriptedIO(IOPort):
    """Input from a preset script, output captured in ``outputs``.

    Usage:
        io = ScriptedIO([8])
        execute(Machine(program, io))
        io.outputs   # [1]
    """

    def __init__(self, inputs: Iterable[int] = ()):
        self._inputs: deque = deque(inputs)
        self.outputs: List[int] = []

    def push_input(self, *values: int):
        self._inputs.extend(values)

    @property
    def pending_inputs(self) -> int:
        return len(self._inputs)

    def request_input(self) -> int:
        if not self._inputs:
            raise InputExhausted("input script exhausted")
        return self._inputs.popleft()

    def deliver_output(self, value: int):
        self.outputs.append(value)


# ══════════════════════════════════════════════
# Console
# ══════════════════════════════════════════════

class ConsoleIO(IOPort):
    """Line-oriented integer I/O on text streams."""

    def __init__(self, stdin: Optional[TextIO] = None,
                 stdout: Optional[TextIO] = None,
                 prompt: str = ''):
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._prompt = prompt

    def request_input(self) -> int:
        if self._prompt:
            self._stdout.write(self._prompt)
            self._stdout.flush()
        line = self._stdin.readline()
        if not line:
            raise InputExhausted("end of input stream")
        try:
            return int(line.strip())
        except ValueError:
            raise IOPortError(f"not an integer: {line.strip()!r}") from None

    def deliver_output(self, value: int):
        self._stdout.write(f"{value}\n")
        self._stdout.flush()


# ══════════════════════════════════════════════
# Thread queue
# ══════════════════════════════════════════════

class QueueIO(IOPort):
    """Port backed by two queue.Queue objects.

    A producer thread calls ``send()``; the machine blocks in
    request_input() until a value arrives or ``timeout`` seconds pass.
    Outputs are readable with ``receive()``.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        self.inbox: queue.Queue = queue.Queue()
        self.outbox: queue.Queue = queue.Queue()

    def send(self, value: int):
        self.inbox.put(value)

    def receive(self, timeout: Optional[float] = None) -> int:
        return self.outbox.get(timeout=timeout)

    def request_input(self) -> int:
        try:
            return self.inbox.get(timeout=self.timeout)
        except queue.Empty:
            log.debug("QueueIO input timed out after %ss", self.timeout)
            raise InputExhausted(f"no input within {self.timeout}s") from None

    def deliver_output(self, value: int):
        self.outbox.put(value)
