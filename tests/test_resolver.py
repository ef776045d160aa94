# =============================================================================
# test_resolver.py - Resolver Unit Tests
# =============================================================================
# Tests for the two-pass resolver that fills token payloads.
#
# Test coverage includes:
#   - Pass 1: label line indices and the label side table
#   - Pass 2: opcodes, immediates (hex/octal/decimal), register indices
#   - Non-fatal diagnostics (malformed numbers, unknown mnemonics)
#   - Fatal INVALID tokens and the state they leave behind
#   - Idempotence and side-table release
# =============================================================================

import pytest
from regasm.assembler.config import AssemblerConfig
from regasm.assembler.instructions import InstructionTable
from regasm.assembler.lexer import TokenKind, tokenize
from regasm.assembler.numbers import parse_c_integer
from regasm.assembler.resolver import LabelEntry, Resolver, resolve
from regasm.errors import (
    ConfigError,
    Diagnostics,
    MalformedNumberError,
    UnknownMnemonicError,
    UnknownTokenError,
)


# =============================================================================
# Helper Functions
# =============================================================================

def resolve_source(source: str, max_register: int = 31):
    """Scan and resolve; return (tokens, diagnostics)."""
    tokens = tokenize(source, "<test>")
    diagnostics = resolve(tokens, AssemblerConfig(max_register=max_register))
    return tokens, diagnostics


def memories(tokens) -> list:
    return [t.memory for t in tokens]


def annotations(tokens) -> list:
    return [(t.kind, t.text, t.memory, t.resolved) for t in tokens]


# =============================================================================
# Number Parsing Tests
# =============================================================================

class TestNumberParsing:
    """Test C-style base detection."""

    @pytest.mark.parametrize("text,expected", [
        ("0", 0),
        ("00", 0),
        ("9", 9),
        ("123", 123),
        ("0xFF", 255),
        ("0X1f", 31),
        ("0755", 493),
        ("007", 7),
    ])
    def test_valid(self, text, expected):
        assert parse_c_integer(text) == expected

    @pytest.mark.parametrize("text", ["", "0x", "08", "10abc", "1_000", "-1", "0xG"])
    def test_invalid(self, text):
        assert parse_c_integer(text) is None


# =============================================================================
# Pass 1: Label Address Tests
# =============================================================================

class TestLabelAddresses:
    """Test label line assignment."""

    def test_label_on_first_line(self):
        tokens, diagnostics = resolve_source("start:\nadd r0, r1\n")
        assert tokens[0].kind is TokenKind.LABEL_DECLARE
        assert tokens[0].memory == 0
        assert tokens[0].resolved is True
        assert not diagnostics.has_errors()

    def test_label_after_blank_lines(self):
        tokens, _ = resolve_source("\n\nloop:\n")
        assert tokens.kinds() == [
            TokenKind.NEWLINE,
            TokenKind.NEWLINE,
            TokenKind.LABEL_DECLARE,
            TokenKind.NEWLINE,
            TokenKind.END_OF_INPUT,
        ]
        assert tokens[2].memory == 2

    def test_label_memory_counts_preceding_newlines(self):
        tokens, _ = resolve_source("a:\nnop\nb: nop\n\n\nc:")
        newlines = 0
        for token in tokens:
            if token.kind is TokenKind.LABEL_DECLARE:
                assert token.memory == newlines
            if token.kind is TokenKind.NEWLINE:
                newlines += 1

    def test_side_table(self):
        """Pass 1 records names without the colon."""
        tokens = tokenize("start:\nadd r0, r1\nr3: end:\n")
        labels = Resolver()._assign_label_addresses(tokens)
        assert labels == [
            LabelEntry("start", 0),
            LabelEntry("r3", 2),
            LabelEntry("end", 2),
        ]

    def test_side_table_matches_label_count(self):
        tokens = tokenize("a:\nb:\nc: d:\n")
        labels = Resolver()._assign_label_addresses(tokens)
        assert len(labels) == tokens.kinds().count(TokenKind.LABEL_DECLARE)

    def test_side_table_released(self):
        resolver = Resolver()
        resolver.resolve(tokenize("start:\nnop\n"))
        assert resolver._labels == []

    def test_side_table_released_after_fatal(self):
        resolver = Resolver()
        resolver.resolve(tokenize("start:\n@\n"))
        assert resolver._labels == []

    def test_labels_assigned_even_after_invalid(self):
        """Pass 1 runs over the whole stream before pass 2 can abort."""
        tokens, _ = resolve_source("@\nend:\n")
        assert tokens[2].text == "end:"
        assert tokens[2].memory == 1


# =============================================================================
# Pass 2: Instruction Tests
# =============================================================================

class TestInstructions:
    """Test opcode assignment."""

    def test_known_mnemonics(self):
        tokens, diagnostics = resolve_source("mov\nadd\n")
        assert tokens[0].memory == 2
        assert tokens[2].memory == 5
        assert not diagnostics.has_errors()

    def test_opcode_zero_is_resolved(self):
        """nop resolves to 0 and is marked resolved."""
        tokens, _ = resolve_source("nop")
        assert tokens[0].memory == 0
        assert tokens[0].resolved is True

    def test_unknown_mnemonic(self):
        """Unknown mnemonics stay at 0, unresolved, with a non-fatal diagnostic."""
        tokens, diagnostics = resolve_source("frob r1\n")
        assert tokens[0].memory == 0
        assert tokens[0].resolved is False
        assert diagnostics.error_count() == 1
        assert isinstance(diagnostics.errors[0], UnknownMnemonicError)
        assert not diagnostics.has_fatal()
        # resolution continued
        assert tokens[1].memory == 1

    def test_lookup_is_case_sensitive(self):
        tokens, diagnostics = resolve_source("MOV")
        assert tokens[0].resolved is False
        assert diagnostics.errors[0].hint == "did you mean 'mov'?"

    def test_custom_table(self):
        config = AssemblerConfig(instructions=InstructionTable({"go": 7}))
        tokens = tokenize("go\nmov\n")
        diagnostics = resolve(tokens, config)
        assert tokens[0].memory == 7
        assert tokens[2].resolved is False
        assert diagnostics.error_count() == 1

    def test_label_operand_not_reported(self):
        """A word naming a declared label stays unresolved without a diagnostic."""
        tokens, diagnostics = resolve_source("loop:\njmp loop\n")
        assert tokens[3].text == "loop"
        assert tokens[3].kind is TokenKind.INSTRUCTION
        assert tokens[3].memory == 0
        assert tokens[3].resolved is False
        assert not diagnostics.has_errors()

    def test_forward_label_operand(self):
        """Labels declared later in the source count too."""
        tokens, diagnostics = resolve_source("jmp end\nnop\nend: halt\n")
        assert tokens[1].resolved is False
        assert not diagnostics.has_errors()

    def test_undeclared_operand_still_reported(self):
        tokens, diagnostics = resolve_source("start:\njmp stop\n")
        assert [e.mnemonic for e in diagnostics.errors] == ["stop"]

    def test_label_names_released(self):
        resolver = Resolver()
        resolver.resolve(tokenize("loop:\njmp loop\n"))
        assert resolver._label_names == set()


# =============================================================================
# Pass 2: Immediate Tests
# =============================================================================

class TestImmediates:
    """Test immediate value parsing."""

    @pytest.mark.parametrize("text,value", [
        ("10", 10),
        ("0", 0),
        ("0xFF", 255),
        ("0x1A", 26),
        ("0755", 493),
        ("4294967295", 4294967295),
    ])
    def test_valid_immediates(self, text, value):
        tokens, diagnostics = resolve_source(text)
        assert tokens[0].memory == value
        assert tokens[0].resolved is True
        assert not diagnostics.has_errors()

    @pytest.mark.parametrize("text", ["10abc", "08", "0x", "1_0"])
    def test_malformed_immediates(self, text):
        tokens, diagnostics = resolve_source(text)
        assert tokens[0].memory == 0
        assert tokens[0].resolved is False
        assert diagnostics.error_count() == 1
        error = diagnostics.errors[0]
        assert isinstance(error, MalformedNumberError)
        assert error.kind == "immediate"
        assert error.lexeme == text

    def test_immediate_too_large(self):
        tokens, diagnostics = resolve_source("4294967296")
        assert tokens[0].memory == 0
        assert "32 bits" in diagnostics.errors[0].hint

    def test_malformed_immediate_is_not_fatal(self):
        tokens, diagnostics = resolve_source("mov r1, 10abc\nadd r2, 3\n")
        assert diagnostics.error_count() == 1
        assert memories(tokens)[-6:] == [5, 2, 0, 3, 0, 0]


# =============================================================================
# Pass 2: Register Tests
# =============================================================================

class TestRegisters:
    """Test register index parsing and bounds."""

    def test_register_index(self):
        tokens, _ = resolve_source("r0, r1, R31")
        assert [t.memory for t in tokens if t.kind is TokenKind.REGISTER] == [0, 1, 31]

    def test_register_uses_base_detection(self):
        """The index is parsed like an immediate: r007 is octal 7."""
        tokens, diagnostics = resolve_source("r007")
        assert tokens[0].memory == 7
        assert not diagnostics.has_errors()

    def test_register_bad_octal(self):
        tokens, diagnostics = resolve_source("r08")
        assert tokens[0].memory == 0
        assert diagnostics.errors[0].kind == "register"

    def test_register_above_bound(self):
        tokens, diagnostics = resolve_source("mov r99999, 0\n", max_register=31)
        register = tokens[1]
        assert register.kind is TokenKind.REGISTER
        assert register.memory == 0
        assert register.resolved is False
        assert diagnostics.error_count() == 1
        assert isinstance(diagnostics.errors[0], MalformedNumberError)
        assert str(diagnostics.errors[0]).startswith(
            "<test>:1:5: error: invalid register value 'r99999'"
        )
        # the immediate after it is still resolved
        assert tokens[3].memory == 0
        assert tokens[3].resolved is True

    def test_register_at_bound(self):
        tokens, diagnostics = resolve_source("r15 r16", max_register=15)
        assert tokens[0].memory == 15
        assert tokens[1].resolved is False
        assert diagnostics.error_count() == 1

    def test_zero_bound(self):
        tokens, diagnostics = resolve_source("r0 r1", max_register=0)
        assert tokens[0].resolved is True
        assert tokens[1].resolved is False

    def test_undiagnosed_registers_within_bound(self):
        tokens, diagnostics = resolve_source("r1 r40 r3 r0x2 r99", max_register=31)
        flagged = {
            e.lexeme for e in diagnostics.errors
            if isinstance(e, MalformedNumberError)
        }
        for token in tokens:
            if token.kind is TokenKind.REGISTER and token.text not in flagged:
                assert token.memory <= 31


# =============================================================================
# Fatal Error Tests
# =============================================================================

class TestInvalidTokens:
    """Test that INVALID tokens abort pass 2."""

    def test_invalid_reports_fatal(self):
        tokens, diagnostics = resolve_source("@\n")
        assert tokens.kinds() == [
            TokenKind.INVALID, TokenKind.NEWLINE, TokenKind.END_OF_INPUT,
        ]
        assert diagnostics.error_count() == 1
        error = diagnostics.errors[0]
        assert isinstance(error, UnknownTokenError)
        assert error.lexeme == "@"
        assert diagnostics.has_fatal()

    def test_tokens_after_invalid_untouched(self):
        tokens, diagnostics = resolve_source("mov r1, 1\n@ add r2, 5\n")
        assert memories(tokens)[:4] == [2, 1, 0, 1]
        after = tokens[6:]
        assert [t.text for t in after[:4]] == ["add", "r2", ",", "5"]
        assert all(t.memory == 0 and not t.resolved for t in after)

    def test_diagnostics_after_invalid_not_reported(self):
        _, diagnostics = resolve_source("@ r99 10abc")
        assert diagnostics.error_count() == 1


# =============================================================================
# Scenario and Property Tests
# =============================================================================

class TestScenarios:
    """End-to-end annotation of small programs."""

    def test_mov_line(self):
        tokens, diagnostics = resolve_source("mov r1, 10\n")
        assert memories(tokens) == [2, 1, 0, 10, 0, 0]
        assert not diagnostics.has_errors()

    def test_label_and_add(self):
        tokens, _ = resolve_source("start:\nadd r0, r1\n")
        assert memories(tokens) == [0, 0, 5, 0, 0, 1, 0, 0]

    def test_hex_immediate_line(self):
        tokens, _ = resolve_source("mov r1, 0x1A\n")
        assert tokens[3].text == "0x1A"
        assert tokens[3].memory == 26

    def test_other_kinds_stay_zero(self):
        tokens, _ = resolve_source("a:\nmov r1, 2\n")
        for token in tokens:
            if token.kind in (TokenKind.COMMA, TokenKind.NEWLINE, TokenKind.END_OF_INPUT):
                assert token.memory == 0


class TestIdempotence:
    """Resolving twice gives the same annotations."""

    @pytest.mark.parametrize("source", [
        "mov r1, 10\n",
        "start:\nadd r0, r1\n",
        "frob r99, 10abc\nx:\n",
        "nop\n@\nr1\n",
    ])
    def test_resolve_twice(self, source):
        tokens, _ = resolve_source(source)
        first = annotations(tokens)
        resolve(tokens, AssemblerConfig())
        assert annotations(tokens) == first

    def test_stale_payload_cleared(self):
        tokens = tokenize("mov r1, 10abc\n")
        tokens[2].memory = 99
        tokens[3].memory = 42
        resolve(tokens)
        assert tokens[2].memory == 0
        assert tokens[3].memory == 0


# =============================================================================
# Resolver Setup Tests
# =============================================================================

class TestResolverSetup:
    """Test configuration and diagnostic limits."""

    def test_invalid_config(self):
        with pytest.raises(ConfigError):
            Resolver(AssemblerConfig(max_register=-1))

    def test_error_cap_does_not_stop_resolution(self):
        """Tokens after the last recorded diagnostic still get payloads."""
        diagnostics = Diagnostics(max_errors=2)
        resolver = Resolver(diagnostics=diagnostics)
        tokens = tokenize("a: 1x 2x 3x 7 r4")
        resolver.resolve(tokens)

        assert tokens[0].memory == 0
        assert tokens[0].resolved is True
        assert tokens[4].text == "7"
        assert tokens[4].memory == 7
        assert tokens[5].memory == 4
        assert [e.lexeme for e in diagnostics.errors] == ["1x", "2x"]
        assert resolver._labels == []

    def test_fatal_error_recorded_past_cap(self):
        """An INVALID after the cap is still reported and still aborts."""
        diagnostics = Diagnostics(max_errors=2)
        tokens = tokenize("1x 2x 3x @ 5")
        Resolver(diagnostics=diagnostics).resolve(tokens)

        assert diagnostics.error_count() == 3
        assert isinstance(diagnostics.errors[-1], UnknownTokenError)
        assert diagnostics.has_fatal()
        assert tokens[4].memory == 0
        assert tokens[4].resolved is False

    def test_cap_resets_between_runs(self):
        resolver = Resolver(diagnostics=Diagnostics(max_errors=1))
        resolver.resolve(tokenize("1x 2x"))
        resolver.diagnostics.clear()
        resolver.resolve(tokenize("3x"))
        assert resolver.diagnostics.error_count() == 1

    def test_default_diagnostics(self):
        diagnostics = resolve(tokenize("r40"))
        assert diagnostics.error_count() == 1
