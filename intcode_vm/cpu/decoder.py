"""
Intcode VM: Instruction Word Decoder

An instruction word is a non-negative decimal integer of at most five
digits, read right to left:

    ABCDE
       DE   two-digit opcode
      C     mode of operand 1
     B      mode of operand 2
    A       mode of operand 3

Missing leading digits are 0. Mode digits:
    0   POSITION   operand is an address into memory
    1   IMMEDIATE  operand is the value itself

Example: 1002 -> opcode 02 (MUL), operand 1 position, operand 2
immediate, operand 3 position.

Words longer than five digits are rejected as MalformedWord rather than
read as extra mode digits. No instruction has a fourth operand for a
sixth digit to describe.
"""

from collections import namedtuple

from ..config import OPCODE_DIGITS, WORD_WIDTH
from ..faults import InvalidAddressingMode, MalformedWord, UnknownOpcode

# ──────────────────────────────────────────────
# Addressing mode digits
# ──────────────────────────────────────────────

POSITION  = 0
IMMEDIATE = 1

MODE_DIGITS = {'0': POSITION, '1': IMMEDIATE}


# ──────────────────────────────────────────────
# Opcode table
# ──────────────────────────────────────────────
# Format: opcode -> (mnemonic, operand_count, length)
# length counts the opcode cell plus operands.

ADD  = 1
MUL  = 2
IN   = 3
OUT  = 4
JT   = 5
JF   = 6
LT   = 7
EQ   = 8
HALT = 99

OPCODES = {
    ADD:  ('ADD',  3, 4),
    MUL:  ('MUL',  3, 4),
    IN:   ('IN',   1, 2),
    OUT:  ('OUT',  1, 2),
    JT:   ('JT',   2, 3),
    JF:   ('JF',   2, 3),
    LT:   ('LT',   3, 4),
    EQ:   ('EQ',   3, 4),
    HALT: ('HALT', 0, 1),
}


DecodedWord = namedtuple('DecodedWord', ['opcode', 'modes'])
DecodedWord.__doc__ = """Opcode plus (mode1, mode2, mode3) of one instruction word."""


def decode(word) -> DecodedWord:
    """Split an instruction word into its opcode and three mode digits.

    All three mode digits are validated whatever the opcode uses, so a
    stray digit never decodes to a default. Raises MalformedWord,
    InvalidAddressingMode or UnknownOpcode.
    """
    if isinstance(word, bool) or not isinstance(word, int) or word < 0:
        raise MalformedWord(word)

    text = str(word)
    if len(text) > WORD_WIDTH:
        raise MalformedWord(word)
    text = text.rjust(WORD_WIDTH, '0')

    mode_text, op_text = text[:-OPCODE_DIGITS], text[-OPCODE_DIGITS:]

    # mode_text is "<mode3><mode2><mode1>"
    modes = []
    for digit in reversed(mode_text):
        if digit not in MODE_DIGITS:
            raise InvalidAddressingMode(digit)
        modes.append(MODE_DIGITS[digit])

    opcode = int(op_text)
    if opcode not in OPCODES:
        raise UnknownOpcode(opcode)

    return DecodedWord(opcode, tuple(modes))


def mnemonic(opcode: int) -> str:
    return OPCODES[opcode][0]


def instruction_length(opcode: int) -> int:
    return OPCODES[opcode][2]
