"""
Program Loader and Disassembler Tests for the Intcode VM.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode_vm.loader import ProgramFormatError, load_program, parse_program
from intcode_vm.disasm import Disassembler, disassemble


# ─── Loader ─────────────────────

class TestParseProgram:
    def test_single_line(self):
        assert parse_program("1,9,10,3,2,3,11,0,99,30,40,50\n") == \
            [1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50]

    def test_whitespace_and_trailing_comma(self):
        assert parse_program("  1, -2 ,3,\n") == [1, -2, 3]

    def test_multiple_lines(self):
        assert parse_program("1,0,0\n0,99\n") == [1, 0, 0, 0, 99]

    def test_trailing_comma_per_line(self):
        assert parse_program("1,0,\n0,0,99\n") == [1, 0, 0, 0, 99]
        assert parse_program("1,0,\r\n0,\r\n0,99,\r\n") == [1, 0, 0, 0, 99]

    def test_blank_lines_skipped(self):
        assert parse_program("1,0,0,0\n\n99\n\n") == [1, 0, 0, 0, 99]

    @pytest.mark.parametrize("text,token", [
        ("1,x,3", "'x'"),
        ("1,,3", "''"),
        ("1.5,2", "'1.5'"),
    ])
    def test_bad_token(self, text, token):
        with pytest.raises(ProgramFormatError) as exc:
            parse_program(text)
        assert token in str(exc.value)

    @pytest.mark.parametrize("text", ["", "   \n", ","])
    def test_empty(self, text):
        with pytest.raises(ProgramFormatError):
            parse_program(text)

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_program("nope")

    def test_load_program(self, tmp_path):
        path = tmp_path / "prog.txt"
        path.write_text("1,0,0,0,99\n", encoding="utf-8")
        assert load_program(path) == [1, 0, 0, 0, 99]
        assert load_program(str(path)) == [1, 0, 0, 0, 99]


# ─── Disassembler ─────────────────────

class TestDisassembler:
    def test_listing(self):
        insts = disassemble([1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50])
        assert [i.mnemonic for i in insts] == \
            ['ADD', 'MUL', 'HALT', 'DATA', 'DATA', 'DATA']
        assert [i.address for i in insts] == [0, 4, 8, 9, 10, 11]
        assert insts[0].format().endswith("ADD  [9], [10], [3]")
        assert insts[3].format().endswith("DATA 30")

    def test_immediate_and_io(self):
        insts = disassemble([3, 3, 1108, -1, 8, 3, 4, 3, 99])
        assert [i.command.format() for i in insts] == [
            "IN   [3]",
            "EQ   #-1, #8, [3]",
            "OUT  [3]",
            "HALT",
        ]

    def test_truncated_tail_is_data(self):
        insts = disassemble([99, 1, 0])
        assert [i.mnemonic for i in insts] == ['HALT', 'DATA', 'DATA']

    def test_negative_cell_is_data(self):
        insts = disassemble([-1, 99])
        assert insts[0].mnemonic == 'DATA'
        assert insts[0].raw == [-1]

    def test_start_and_count(self):
        dis = Disassembler([1, 0, 0, 0, 2, 0, 0, 0, 99])
        insts = list(dis.sweep(start=4, count=1))
        assert len(insts) == 1
        assert insts[0].mnemonic == 'MUL'
        assert dis.listing(start=8).endswith("HALT")

    def test_histogram(self):
        hist = Disassembler([1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50]).opcode_histogram()
        assert hist == {'ADD': 1, 'MUL': 1, 'HALT': 1, 'DATA': 3}

    @pytest.mark.parametrize("start", [-1, -12, 12, 100])
    def test_start_outside_program(self, start):
        with pytest.raises(ValueError):
            disassemble([1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50], start=start)

    def test_listing_negative_start(self):
        with pytest.raises(ValueError):
            Disassembler([1, 0, 0, 0, 99]).listing(start=-1, count=2)

    @pytest.mark.parametrize("address", [-1, 5])
    def test_decode_one_outside_program(self, address):
        with pytest.raises(ValueError):
            Disassembler([1, 0, 0, 0, 99]).decode_one(address)
