# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the expression tokenizer.
#
# Test coverage includes:
#   - Numbers, operators and parentheses
#   - Offsets recorded on each token
#   - Whitespace handling and the trailing EOF token
#   - Unrecognized characters and oversized literals
# =============================================================================

import pytest

from arithc.lexer import ArithLexer, ArithToken, ArithTokenType, MAX_LITERAL, tokenize
from arithc.errors import (
    LexError,
    UnrecognizedCharacterError,
    LiteralOverflowError,
)


# =============================================================================
# Helper Function
# =============================================================================

def kinds(source: str) -> list:
    """Return (type, value) pairs for every token except EOF."""
    return [(t.type, t.value) for t in tokenize(source) if t.type != ArithTokenType.EOF]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_input(self):
        """Empty input produces only EOF at offset 0."""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == ArithTokenType.EOF
        assert tokens[0].offset == 0
        assert tokens[0].value is None

    def test_whitespace_only(self):
        """Whitespace-only input produces EOF positioned at the end."""
        tokens = tokenize("  \t ")
        assert [t.type for t in tokens] == [ArithTokenType.EOF]
        assert tokens[0].offset == 4

    def test_single_number(self):
        tokens = tokenize("42")
        assert tokens[0] == ArithToken(ArithTokenType.NUMBER, 42, 0)
        assert tokens[1] == ArithToken(ArithTokenType.EOF, None, 2)

    def test_all_operators(self):
        """Each operator and parenthesis is its own token."""
        assert kinds("+-*/()") == [
            (ArithTokenType.PLUS, "+"),
            (ArithTokenType.MINUS, "-"),
            (ArithTokenType.STAR, "*"),
            (ArithTokenType.SLASH, "/"),
            (ArithTokenType.LPAREN, "("),
            (ArithTokenType.RPAREN, ")"),
        ]

    def test_exactly_one_eof(self):
        tokens = tokenize("1+2")
        eofs = [t for t in tokens if t.type == ArithTokenType.EOF]
        assert len(eofs) == 1
        assert tokens[-1].type == ArithTokenType.EOF

    def test_lexer_is_a_generator(self):
        """ArithLexer.tokenize yields tokens lazily."""
        stream = ArithLexer("7").tokenize()
        assert next(stream).value == 7
        assert next(stream).type == ArithTokenType.EOF


# =============================================================================
# Number Tests
# =============================================================================

class TestNumbers:
    """Test integer literal scanning."""

    def test_multi_digit(self):
        assert kinds("12345") == [(ArithTokenType.NUMBER, 12345)]

    def test_leading_zeros_are_decimal(self):
        """Leading zeros do not mean octal."""
        assert kinds("007") == [(ArithTokenType.NUMBER, 7)]

    def test_zero(self):
        assert kinds("0") == [(ArithTokenType.NUMBER, 0)]

    def test_maximal_munch(self):
        """A run of digits is one literal; whitespace separates literals."""
        assert kinds("12 34") == [
            (ArithTokenType.NUMBER, 12),
            (ArithTokenType.NUMBER, 34),
        ]

    def test_largest_literal(self):
        assert kinds(str(MAX_LITERAL)) == [(ArithTokenType.NUMBER, 2**31 - 1)]

    def test_literal_overflow(self):
        """Literals beyond a signed 32-bit immediate are rejected."""
        with pytest.raises(LiteralOverflowError) as exc_info:
            tokenize("1+2147483648")
        assert exc_info.value.offset == 2
        assert exc_info.value.literal == "2147483648"

    def test_overflow_is_a_lex_error(self):
        with pytest.raises(LexError):
            tokenize("99999999999999999999")

    def test_very_long_literal_overflow(self):
        """Thousands of digits still report an overflow at the first digit."""
        with pytest.raises(LiteralOverflowError) as exc_info:
            tokenize("9" * 5000)
        assert exc_info.value.offset == 0
        assert len(exc_info.value.literal) == 5000

    def test_very_long_run_of_zeros(self):
        """Leading zeros do not count toward the literal's width."""
        assert kinds("0" * 5000 + "42") == [(ArithTokenType.NUMBER, 42)]
        assert kinds("0" * 5000) == [(ArithTokenType.NUMBER, 0)]

    def test_same_width_as_limit_overflow(self):
        with pytest.raises(LiteralOverflowError):
            tokenize("2999999999")


# =============================================================================
# Offset and Whitespace Tests
# =============================================================================

class TestOffsets:
    """Test source offsets recorded on tokens."""

    def test_offsets_with_spaces(self):
        tokens = tokenize("2 + 3*4")
        assert [t.offset for t in tokens] == [0, 2, 4, 5, 6, 7]

    def test_number_offset_is_first_digit(self):
        tokens = tokenize("  123")
        assert tokens[0].offset == 2

    def test_newlines_and_tabs_are_whitespace(self):
        assert kinds("1\n+\t2") == [
            (ArithTokenType.NUMBER, 1),
            (ArithTokenType.PLUS, "+"),
            (ArithTokenType.NUMBER, 2),
        ]

    def test_location_property(self):
        token = tokenize("  9")[0]
        assert token.location.offset == 2


# =============================================================================
# Token Classification Tests
# =============================================================================

class TestTokenClassification:
    """Test the three token kinds."""

    def test_operator_or_paren(self):
        for token in tokenize("+-*/()")[:-1]:
            assert token.is_operator_or_paren()

    def test_number_is_not_operator(self):
        number, eof = tokenize("5")
        assert not number.is_operator_or_paren()
        assert not eof.is_operator_or_paren()

    def test_describe(self):
        plus, eof = tokenize("+")
        assert plus.describe() == "+"
        assert eof.describe() == "end of input"

    def test_repr(self):
        number, plus, _, eof = tokenize("1+2")
        assert repr(number) == "Token(NUMBER, 1, @0)"
        assert repr(plus) == "Token(PLUS, '+', @1)"
        assert repr(eof) == "Token(EOF, @3)"


# =============================================================================
# Error Tests
# =============================================================================

class TestLexerErrors:
    """Test rejection of characters outside the language."""

    def test_letter(self):
        with pytest.raises(UnrecognizedCharacterError) as exc_info:
            tokenize("1+a")
        assert exc_info.value.offset == 2
        assert exc_info.value.char == "a"

    def test_decimal_point(self):
        with pytest.raises(UnrecognizedCharacterError) as exc_info:
            tokenize("1.5")
        assert exc_info.value.offset == 1

    def test_non_ascii_digit(self):
        """Superscript digits are not decimal digits."""
        with pytest.raises(UnrecognizedCharacterError) as exc_info:
            tokenize("²")
        assert exc_info.value.offset == 0

    def test_modulo_not_supported(self):
        with pytest.raises(UnrecognizedCharacterError):
            tokenize("7%2")

    def test_first_error_wins(self):
        """Scanning stops at the first bad character."""
        with pytest.raises(UnrecognizedCharacterError) as exc_info:
            tokenize("1 $ @")
        assert exc_info.value.char == "$"

    def test_diagnostic_text(self):
        """The message echoes the input with a caret under the offset."""
        with pytest.raises(UnrecognizedCharacterError) as exc_info:
            tokenize("1+a")
        assert str(exc_info.value) == "1+a\n  ^ unrecognized character 'a'"
