# =============================================================================
# test_codegen.py - Pass 1 and Pass 2 Unit Tests
# =============================================================================
# Tests for label resolution and instruction encoding, run as separate
# stages with an explicit symbol table.
#
# Test coverage includes:
#   - Label binding to instruction indices
#   - Forward and backward references
#   - A-instruction encoding (literals, predefined, labels, variables)
#   - C-instruction encoding across comp/dest/jump tables
#   - Indirect operand bit
#   - Encoding errors
# =============================================================================

import pytest

from hack_sdk.assembler.codegen import (
    InstructionEncoder,
    ResolvedProgram,
    encode_program,
    resolve_labels,
)
from hack_sdk.assembler.opcodes import COMP_TABLE, DEST_TABLE, JUMP_TABLE
from hack_sdk.assembler.parser import AddressingInstruction, parse_source
from hack_sdk.assembler.symbols import SymbolTable
from hack_sdk.errors import (
    AddressRangeError,
    AssemblerError,
    DuplicateSymbolError,
    EncodingError,
)


def pass1(source: str) -> ResolvedProgram:
    """Helper to run parsing and pass 1 on a fresh table."""
    return resolve_labels(parse_source(source, "<test>"), SymbolTable())


def encode_one(text: str, symbols: SymbolTable | None = None) -> str:
    """Helper to encode a single instruction."""
    program = resolve_labels(parse_source(text, "<test>"), symbols or SymbolTable())
    assert len(program.instructions) == 1
    return InstructionEncoder(program.symbols).encode(program.instructions[0])


# =============================================================================
# Lookup Table Tests
# =============================================================================

class TestTables:
    """Test the fixed encoding tables."""

    def test_comp_table_size(self):
        assert len(COMP_TABLE) == 28

    def test_dest_table_distinct(self):
        assert len(DEST_TABLE) == 8
        assert len(set(DEST_TABLE.values())) == 8

    def test_jump_table_distinct(self):
        assert len(JUMP_TABLE) == 8
        assert len(set(JUMP_TABLE.values())) == 8

    def test_a_and_m_share_code(self):
        for a_form, comp in COMP_TABLE.items():
            if "A" in a_form:
                m_form = a_form.replace("A", "M")
                assert COMP_TABLE[m_form].bits == comp.bits
                assert comp.a_bit == "0"
                assert COMP_TABLE[m_form].a_bit == "1"

    def test_indirect_bit_matches_m_presence(self):
        for mnemonic, comp in COMP_TABLE.items():
            assert (comp.a_bit == "1") == ("M" in mnemonic)


# =============================================================================
# Pass 1 Tests
# =============================================================================

class TestLabelResolution:
    """Test pass 1 label binding."""

    def test_labels_removed_from_stream(self):
        program = pass1("(START)\n@1\n(MID)\nD=A\n(END)\n")
        assert len(program) == 2
        assert [inst.text for inst in program.instructions] == ["@1", "D=A"]

    def test_first_line_label_is_zero(self):
        program = pass1("(START)\n@1\nD=A\n")
        assert program.symbols.lookup("START") == 0

    def test_label_binds_next_instruction(self):
        program = pass1("@1\nD=A\n(HERE)\n@2\n")
        assert program.symbols.lookup("HERE") == 2

    def test_consecutive_labels_share_index(self):
        program = pass1("@1\n(A1)\n(A2)\nD=A\n")
        assert program.symbols.lookup("A1") == 1
        assert program.symbols.lookup("A2") == 1

    def test_trailing_label_points_past_end(self):
        program = pass1("@1\nD=A\n(END)\n")
        assert program.symbols.lookup("END") == 2

    def test_duplicate_label(self):
        with pytest.raises(DuplicateSymbolError):
            pass1("(X)\n@1\n(X)\n@2\n")

    def test_duplicate_label_overwrite(self):
        statements = parse_source("(X)\n@1\n(X)\n@2\n", "<test>")
        program = resolve_labels(statements, SymbolTable(allow_redefinition=True))
        assert program.symbols.lookup("X") == 1

    def test_pass1_allocates_no_variables(self):
        program = pass1("@foo\n@bar\n(L)\n@L\n")
        assert program.symbols.variables == {}

    def test_label_past_address_space(self):
        source = "@0\n" * 32768 + "(TOO_FAR)\n"
        with pytest.raises(AddressRangeError):
            pass1(source)


# =============================================================================
# A-Instruction Encoding
# =============================================================================

class TestAddressingEncoding:
    """Test A-instruction encoding."""

    def test_zero(self):
        assert encode_one("@0") == "0000000000000000"

    def test_literal(self):
        assert encode_one("@17") == "0000000000010001"

    def test_max_literal(self):
        assert encode_one("@32767") == "0111111111111111"

    def test_literal_out_of_range(self):
        with pytest.raises(AddressRangeError):
            encode_one("@32768")

    def test_screen(self):
        assert encode_one("@SCREEN") == "0100000000000000"
        assert encode_one("@16384") == "0100000000000000"

    def test_kbd(self):
        assert encode_one("@KBD") == "0110000000000000"

    def test_stack_pointer(self):
        assert encode_one("@SP") == "0000000000000000"

    def test_register(self):
        assert encode_one("@R15") == "0000000000001111"

    def test_forward_and_backward_reference_match(self):
        forward = pass1("@LOOP\n0;JMP\n(LOOP)\n@LOOP\n0;JMP\n")
        words = encode_program(forward)
        assert words[0] == words[2] == "0000000000000010"

    def test_variables_allocated_in_pass2_order(self):
        program = pass1("@b\nD=A\n@a\nD=A\n@b\n")
        words = encode_program(program)
        assert words[0] == "0000000000010000"  # b -> 16
        assert words[2] == "0000000000010001"  # a -> 17
        assert words[4] == words[0]
        assert program.symbols.variables == {"b": 16, "a": 17}

    def test_label_referenced_before_variable_allocation(self):
        program = pass1("@x\n@END\n(END)\n@y\n")
        words = encode_program(program)
        assert words[1] == "0000000000000010"
        assert program.symbols.variables == {"x": 16, "y": 17}


# =============================================================================
# C-Instruction Encoding
# =============================================================================

class TestComputeEncoding:
    """Test C-instruction encoding."""

    def test_d_plus_one(self):
        assert encode_one("D=D+1") == "1110011111010000"

    def test_d_equals_m(self):
        assert encode_one("D=M") == "1111110000010000"

    def test_d_equals_a(self):
        assert encode_one("D=A") == "1110110000010000"

    def test_m_equals_d(self):
        assert encode_one("M=D") == "1110001100001000"

    def test_unconditional_jump(self):
        assert encode_one("0;JMP") == "1110101010000111"

    def test_conditional_jump(self):
        assert encode_one("D;JGT") == "1110001100000001"

    def test_dest_comp_jump(self):
        assert encode_one("AMD=M+1;JNE") == "1111110111111101"

    def test_no_dest_no_jump(self):
        assert encode_one("D|M") == "1111010101000000"

    def test_m_minus_one(self):
        assert encode_one("M=M-1") == "1111110010001000"

    def test_d_and_a(self):
        assert encode_one("D=D&A") == "1110000000010000"

    def test_all_dest_codes(self):
        for dest, bits in DEST_TABLE.items():
            text = f"{dest}=0" if dest else "0"
            assert encode_one(text)[10:13] == bits

    def test_all_jump_codes(self):
        for jump, bits in JUMP_TABLE.items():
            text = f"0;{jump}" if jump else "0"
            assert encode_one(text)[13:16] == bits

    def test_all_comp_codes(self):
        for mnemonic, comp in COMP_TABLE.items():
            word = encode_one(mnemonic)
            assert word[:3] == "111"
            assert word[3] == comp.a_bit
            assert word[4:10] == comp.bits

    def test_word_length(self):
        for mnemonic in COMP_TABLE:
            assert len(encode_one(f"AMD={mnemonic};JMP")) == 16


# =============================================================================
# Encoding Errors
# =============================================================================

class TestEncodingErrors:
    """Test mnemonics missing from their tables."""

    def test_unknown_computation(self):
        with pytest.raises(EncodingError) as exc_info:
            encode_one("D=D+2")
        assert exc_info.value.field == "computation"
        assert exc_info.value.mnemonic == "D+2"

    def test_unknown_destination(self):
        with pytest.raises(EncodingError) as exc_info:
            encode_one("X=D")
        assert exc_info.value.field == "destination"

    def test_unknown_jump(self):
        with pytest.raises(EncodingError) as exc_info:
            encode_one("0;JMPX")
        assert exc_info.value.field == "jump"

    def test_dest_order_matters(self):
        with pytest.raises(EncodingError):
            encode_one("DM=0")

    def test_commuted_comp_not_accepted(self):
        with pytest.raises(EncodingError):
            encode_one("D=A+D")

    def test_suggestion_in_message(self):
        with pytest.raises(EncodingError) as exc_info:
            encode_one("0;JMQ")
        assert "did you mean" in str(exc_info.value)
        assert "'JMP'" in str(exc_info.value)

    def test_error_names_instruction(self):
        with pytest.raises(EncodingError) as exc_info:
            encode_program(pass1("@1\n\nD=D*A\n"))
        assert exc_info.value.location.line == 3
        assert "D=D*A" in str(exc_info.value)

    def test_encoder_rejects_label(self):
        statements = parse_source("(L)", "<test>")
        with pytest.raises(AssemblerError):
            InstructionEncoder(SymbolTable()).encode(statements[0])

    def test_encoder_uses_given_table(self):
        table = SymbolTable()
        table.define_label("TARGET", 9)
        inst = parse_source("@TARGET", "<test>")[0]
        assert isinstance(inst, AddressingInstruction)
        assert InstructionEncoder(table).encode(inst) == "0000000000001001"
