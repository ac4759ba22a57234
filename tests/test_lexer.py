# =============================================================================
# test_lexer.py - Token Classifier Unit Tests
# =============================================================================
# Tests for the pseudo-assembly token classifier.
#
# Test coverage includes:
#   - Classification precedence (register, address, comparator, operator,
#     immediate, label, empty)
#   - Literal forms: 0x, $, h suffix, 0b, leading-zero octal, decimal
#   - mem[...] unwrapping
#   - Register index and numeric value helpers
# =============================================================================

import pytest
from avrpp.lexer import Token, TokenType, classify_token, parse_literal


# =============================================================================
# Classification Precedence Tests
# =============================================================================

class TestClassification:
    """Test that each token text lands in exactly one type."""

    def test_register(self):
        """r5 is a register."""
        assert classify_token("r5") == TokenType.REGISTER

    @pytest.mark.parametrize("text", ["r0", "r9", "r10", "r19", "r29", "r30", "r31", "R16", "r05"])
    def test_register_range(self, text):
        """Registers r0 to r31 are recognised, case-insensitively."""
        assert classify_token(text) == TokenType.REGISTER

    def test_register_out_of_range_is_label(self):
        """r32 is not a register, so it falls through to label."""
        assert classify_token("r32") == TokenType.LABEL

    def test_address(self):
        """mem[...] wrapping a literal is an address."""
        assert classify_token("mem[0x20]") == TokenType.ADDRESS

    @pytest.mark.parametrize("text", ["mem[$20]", "mem[20h]", "mem[0b1]", "mem[040]", "mem[32]"])
    def test_address_literal_forms(self, text):
        """Every literal form is accepted inside mem[...]."""
        assert classify_token(text) == TokenType.ADDRESS

    def test_address_with_label_is_empty(self):
        """mem[...] around a non-literal matches nothing."""
        assert classify_token("mem[buffer]") == TokenType.EMPTY

    @pytest.mark.parametrize("text", [">=", "=<", ">", "<", "<=", "==", "!="])
    def test_comparators(self, text):
        """All seven comparators are recognised."""
        assert classify_token(text) == TokenType.COMPARATOR

    @pytest.mark.parametrize("text", ["+", "-", "*", "&", "|", "/", "^", "!"])
    def test_operators(self, text):
        """All eight operators are recognised."""
        assert classify_token(text) == TokenType.OPERATOR

    @pytest.mark.parametrize("text", ["0x20", "$20", "20h", "0b00100000", "040", "32"])
    def test_immediates(self, text):
        """Each literal form is an immediate, not a label."""
        assert classify_token(text) == TokenType.IMMEDIATE

    def test_hex_suffix_wins_over_label(self):
        """Text made of hex digits and an h suffix is an immediate."""
        assert classify_token("abh") == TokenType.IMMEDIATE

    def test_label(self):
        """LOOP1 is a label."""
        assert classify_token("LOOP1") == TokenType.LABEL

    @pytest.mark.parametrize("text", ["end", "_start", "loop.inner", "a-b", "x$1"])
    def test_label_characters(self, text):
        """Labels may use letters, digits, _, -, $ and ."""
        assert classify_token(text) == TokenType.LABEL

    def test_label_length_limit(self):
        """Labels longer than 16 characters are not labels."""
        assert classify_token("a" * 16) == TokenType.LABEL
        assert classify_token("a" * 17) == TokenType.EMPTY

    @pytest.mark.parametrize("text", ["", "   ", "; comment", "a b", "=>"])
    def test_empty(self, text):
        """Anything else is empty."""
        assert classify_token(text) == TokenType.EMPTY

    def test_classification_is_pure(self):
        """Same text, same type, every time."""
        assert {classify_token("0x20") for _ in range(5)} == {TokenType.IMMEDIATE}


# =============================================================================
# Literal Decoding Tests
# =============================================================================

class TestLiterals:
    """Test numeric decoding of literal forms."""

    @pytest.mark.parametrize("text", ["0x20", "$20", "20h", "0b00100000", "040", "32"])
    def test_same_value(self, text):
        """All spellings of 32 decode to 32."""
        assert parse_literal(text) == 32

    def test_uppercase_forms(self):
        """Prefixes and hex digits are case-insensitive."""
        assert parse_literal("0XFF") == 255
        assert parse_literal("0FFH") == 255

    def test_zero(self):
        """A lone 0 is decimal zero."""
        assert parse_literal("0") == 0

    def test_eight_with_leading_zero_is_decimal(self):
        """08 is not octal, so it is read as decimal 8."""
        assert parse_literal("08") == 8

    def test_not_a_literal(self):
        """Non-literals decode to None."""
        assert parse_literal("loop") is None


# =============================================================================
# Token Construction Tests
# =============================================================================

class TestToken:
    """Test Token.from_text and its helpers."""

    def test_address_unwrapped(self):
        """Address tokens keep only the inner literal."""
        token = Token.from_text("mem[0x20]")
        assert token.type == TokenType.ADDRESS
        assert token.value == "0x20"

    def test_address_numeric_value(self):
        """Address tokens decode their literal."""
        assert Token.from_text("mem[$ff]").numeric_value == 255

    def test_immediate_numeric_value(self):
        """Immediate tokens decode their literal."""
        assert Token.from_text("0b101").numeric_value == 5

    def test_register_index(self):
        """Register tokens expose their index."""
        assert Token.from_text("r17").register_index == 17
        assert Token.from_text("r05").register_index == 5

    def test_helpers_none_for_other_types(self):
        """Helpers return None when they do not apply."""
        label = Token.from_text("loop")
        assert label.register_index is None
        assert label.numeric_value is None
        assert Token.from_text("5").register_index is None

    def test_value_kept_verbatim(self):
        """Token text is never re-encoded."""
        assert Token.from_text("20h").value == "20h"
        assert str(Token.from_text("$20")) == "$20"

    def test_repr(self):
        """repr shows type name and value."""
        assert repr(Token.from_text("r1")) == "Token(REGISTER, 'r1')"
