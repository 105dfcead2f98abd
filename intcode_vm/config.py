"""
Intcode VM: Configuration
=========================

Fixed machine parameters and defaults for the CLI and logging.
Run-time overrides come from intcodekit.py flags.
"""


# =============================================================================
#  INSTRUCTION ENCODING
# =============================================================================
OPCODE_DIGITS = 2          # low-order digits of a word hold the opcode
MODE_DIGITS = 3            # one mode digit per operand, operand 1 rightmost
WORD_WIDTH = OPCODE_DIGITS + MODE_DIGITS

# Cells fetched per cycle: the longest instruction (opcode + 3 operands)
INSTRUCTION_WINDOW = 4


# =============================================================================
#  EXECUTION
# =============================================================================
DEFAULT_MAX_STEPS = None   # None = run until halt or fault


# =============================================================================
#  LOGGING
# =============================================================================
LOG_NAME = "intcode_vm"
LOG_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
)
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
