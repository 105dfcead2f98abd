"""
Intcode VM: Program Loader

Programs are stored as one line of comma-separated signed integers:

    1,9,10,3,2,3,11,0,99,30,40,50

Values may also be split across lines. Whitespace around values, blank
lines and a trailing comma at the end of a line are accepted.
"""

import logging
from pathlib import Path
from typing import List, Union

log = logging.getLogger(__name__)


class ProgramFormatError(ValueError):
    """Program text is not a comma-separated list of integers."""
    pass


def parse_program(text: str) -> List[int]:
    """Parse program text into an initial memory image."""
    tokens = []
    for line in text.splitlines():
        line = line.strip()
        if line.endswith(','):
            line = line[:-1]
        if line:
            tokens.extend(t.strip() for t in line.split(','))

    program = []
    for index, token in enumerate(tokens):
        try:
            program.append(int(token))
        except ValueError:
            raise ProgramFormatError(
                f"Bad value {token!r} at index {index}") from None

    if not program:
        raise ProgramFormatError("Program contains no values")
    return program


def load_program(path: Union[str, Path]) -> List[int]:
    """Read and parse a program file."""
    path = Path(path)
    program = parse_program(path.read_text(encoding='utf-8'))
    log.debug("Loaded %d cells from %s", len(program), path)
    return program
