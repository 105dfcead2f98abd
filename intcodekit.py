#!/usr/bin/env python3
"""
intcodekit: Intcode VM Toolkit
==============================

One CLI for running and inspecting Intcode programs:
    intcodekit run     Run a program with scripted or console input
    intcodekit disasm  List a program as instructions
    intcodekit info    Summarize a program image

Usage:
    python intcodekit.py <command> [options]
    python intcodekit.py <command> --help

Examples:
    python intcodekit.py run diag.txt -i 5
    python intcodekit.py run diag.txt --console
    python intcodekit.py run loop.txt --max-steps 10000 --trace -vv
    python intcodekit.py disasm diag.txt --start 0 --count 20
    python intcodekit.py info diag.txt

Exit status: 0 on HALT, 2 on a machine fault, 1 on usage or file errors.
"""

import argparse
import logging
import sys

from intcode_vm import (
    __version__, ConsoleIO, Disassembler, Faulted, Machine,
    ScriptedIO, execute, load_program,
)
from intcode_vm.config import DEFAULT_MAX_STEPS, LOG_NAME
from intcode_vm.log_setup import setup_logging, verbosity_to_level

log = logging.getLogger(LOG_NAME + ".cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_FAULT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intcodekit",
        description="Intcode VM toolkit: run, disassemble, inspect",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""commands:
  run        Execute a program
  disasm     Disassemble a program to a listing
  info       Summarize a program image
""",
    )
    parser.add_argument("--version", action="version", version=f"intcodekit {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase log verbosity (-v, -vv)")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Only log errors")
    parser.add_argument("--log-file", default=None,
                        help="Also write a DEBUG log to this file")
    sub = parser.add_subparsers(dest="command", metavar="command")

    # ── run ──────────────────────────────────────────────────────────────
    p_run = sub.add_parser("run", help="Execute a program")
    p_run.add_argument("program", help="Program file (comma-separated integers)")
    p_run.add_argument("-i", "--input", dest="inputs", type=int, action="append",
                       default=[], metavar="VALUE",
                       help="Input value (repeat for several, consumed in order)")
    p_run.add_argument("--console", action="store_true",
                       help="Read input from stdin instead of --input values")
    p_run.add_argument("--max-steps", type=int, default=DEFAULT_MAX_STEPS,
                       help="Fault after this many instructions (default: no limit)")
    p_run.add_argument("--trace", action="store_true",
                       help="Print an instruction trace to stderr after the run")
    p_run.add_argument("--dump", action="store_true",
                       help="Print final memory after the run")

    # ── disasm ───────────────────────────────────────────────────────────
    p_dis = sub.add_parser("disasm", help="Disassemble a program")
    p_dis.add_argument("program", help="Program file")
    p_dis.add_argument("--start", type=int, default=0, help="Start address (default: 0)")
    p_dis.add_argument("--count", type=int, default=None,
                       help="Maximum number of listing lines")

    # ── info ─────────────────────────────────────────────────────────────
    p_info = sub.add_parser("info", help="Summarize a program image")
    p_info.add_argument("program", help="Program file")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_ERROR

    setup_logging(console_level=verbosity_to_level(args.verbose, args.quiet),
                  log_file=args.log_file)

    handler = COMMANDS[args.command]
    try:
        return handler(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND IMPLEMENTATIONS
# ═════════════════════════════════════════════════════════════════════════════

# ── run ──────────────────────────────────────────────────────────────────
def cmd_run(args) -> int:
    program = load_program(args.program)

    if args.console:
        io = ConsoleIO(prompt="> " if sys.stdin.isatty() else "")
    else:
        io = _EchoingScriptedIO(args.inputs)

    machine = Machine(program, io, max_steps=args.max_steps, trace=args.trace)
    log.info("Running %s (%d cells)", args.program, len(program))
    result = execute(machine)

    if args.trace:
        print(machine.get_trace(), file=sys.stderr)
    if args.dump:
        print(machine.mem.dump())

    if isinstance(result, Faulted):
        print(f"Fault: {type(result.error).__name__}: {result.error}", file=sys.stderr)
        return EXIT_FAULT

    print(f"Halted after {result.steps} steps; memory[0] = {result.final_value}")
    return EXIT_OK


class _EchoingScriptedIO(ScriptedIO):
    """ScriptedIO that also prints each output as it is produced."""

    def deliver_output(self, value: int):
        super().deliver_output(value)
        print(value)


# ── disasm ───────────────────────────────────────────────────────────────
def cmd_disasm(args) -> int:
    program = load_program(args.program)
    if not 0 <= args.start < len(program):
        raise ValueError(f"--start {args.start} outside program of {len(program)} cells")
    print(Disassembler(program).listing(args.start, args.count))
    return EXIT_OK


# ── info ─────────────────────────────────────────────────────────────────
def cmd_info(args) -> int:
    program = load_program(args.program)
    histogram = Disassembler(program).opcode_histogram()

    print(f"File:   {args.program}")
    print(f"Cells:  {len(program)}")
    print(f"Range:  {min(program)} .. {max(program)}")
    print("Linear-sweep decode:")
    for name, n in sorted(histogram.items(), key=lambda kv: (-kv[1], kv[0])):
        print(f"  {name:5s} {n}")
    return EXIT_OK


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND DISPATCH TABLE
# ═════════════════════════════════════════════════════════════════════════════

COMMANDS = {
    "run": cmd_run,
    "disasm": cmd_disasm,
    "info": cmd_info,
}


if __name__ == "__main__":
    sys.exit(main())
