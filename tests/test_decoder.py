"""
Decoder and Command Resolver Tests for the Intcode VM.

Covers instruction-word splitting (opcode + mode digits), the fault
cases of malformed words, and building typed Commands from an
instruction window.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode_vm.cpu.decoder import decode, OPCODES, POSITION, IMMEDIATE
from intcode_vm.cpu.commands import (
    Add, Multiply, Input, Output, JumpIfTrue, JumpIfFalse, LessThan, Equal,
    Halt, Immediate, Position, resolve_command,
)
from intcode_vm.faults import (
    DecodeFault, InvalidAddressingMode, MalformedWord, TruncatedInstruction,
    UnknownOpcode,
)


# ─── Word decoding ─────────────────────

class TestDecode:
    def test_plain_opcode_defaults_to_position(self):
        assert decode(1) == (1, (POSITION, POSITION, POSITION))
        assert decode(99) == (99, (POSITION, POSITION, POSITION))

    def test_mode_digit_order(self):
        """1002: operand 1 position, operand 2 immediate, operand 3 position."""
        opcode, modes = decode(1002)
        assert opcode == 2
        assert modes == (POSITION, IMMEDIATE, POSITION)

    def test_all_immediate(self):
        assert decode(11101) == (1, (IMMEDIATE, IMMEDIATE, IMMEDIATE))

    def test_operand_one_is_next_to_opcode(self):
        assert decode(105).modes == (IMMEDIATE, POSITION, POSITION)

    def test_every_defined_opcode_decodes(self):
        for opcode in OPCODES:
            assert decode(opcode).opcode == opcode

    @pytest.mark.parametrize("opcode", sorted(OPCODES))
    def test_bad_mode_digit_never_defaults(self, opcode):
        for position in (100, 1000, 10000):
            for digit in range(2, 10):
                with pytest.raises(InvalidAddressingMode) as exc:
                    decode(digit * position + opcode)
                assert exc.value.digit == str(digit)

    @pytest.mark.parametrize("word", [0, 9, 10, 42, 98, 100, 1109])
    def test_unknown_opcode(self, word):
        with pytest.raises(UnknownOpcode) as exc:
            decode(word)
        assert exc.value.opcode == word % 100

    @pytest.mark.parametrize("word", [-1, -1101, 100001, "1", 1.0, None, True])
    def test_malformed_word(self, word):
        with pytest.raises(MalformedWord):
            decode(word)

    def test_decode_faults_share_base(self):
        with pytest.raises(DecodeFault):
            decode(42)


# ─── Command resolution ─────────────────────

class TestResolveCommand:
    def test_add_position(self):
        cmd = resolve_command([1, 9, 10, 3])
        assert cmd == Add(Position(9), Position(10), Position(3))
        assert cmd.length == 4

    def test_multiply_mixed_modes(self):
        cmd = resolve_command([1002, 4, 3, 4])
        assert cmd == Multiply(Position(4), Immediate(3), Position(4))

    def test_compare_commands(self):
        assert resolve_command([1107, -1, 8, 3]) == LessThan(Immediate(-1), Immediate(8), Position(3))
        assert resolve_command([8, 9, 10, 9]) == Equal(Position(9), Position(10), Position(9))

    def test_jumps_have_length_three(self):
        jt = resolve_command([1105, 1, 9])
        jf = resolve_command([6, 12, 15])
        assert jt == JumpIfTrue(Immediate(1), Immediate(9))
        assert jf == JumpIfFalse(Position(12), Position(15))
        assert jt.length == jf.length == 3

    def test_halt_needs_one_cell(self):
        cmd = resolve_command([99])
        assert cmd == Halt()
        assert cmd.length == 1

    def test_input_output_ignore_mode_digit(self):
        """IN/OUT operands are raw addresses even when the mode digit says 1."""
        assert resolve_command([3, 7]) == Input(Position(7))
        assert resolve_command([103, 7]) == Input(Position(7))
        assert resolve_command([104, 999]) == Output(Position(999))

    def test_window_longer_than_instruction(self):
        cmd = resolve_command([4, 5, 99, 0])
        assert cmd == Output(Position(5))
        assert cmd.length == 2

    @pytest.mark.parametrize("window,needed", [
        ([1, 0, 0], 4),
        ([2], 4),
        ([5, 1], 3),
        ([3], 2),
    ])
    def test_truncated_instruction(self, window, needed):
        with pytest.raises(TruncatedInstruction) as exc:
            resolve_command(window)
        assert exc.value.needed == needed
        assert exc.value.available == len(window)

    def test_empty_window(self):
        with pytest.raises(TruncatedInstruction):
            resolve_command([])

    def test_format(self):
        assert resolve_command([1101, 100, -1, 4]).format() == "ADD  #100, #-1, [4]"
        assert resolve_command([99]).format() == "HALT"
