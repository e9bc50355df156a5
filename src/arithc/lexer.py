"""
arithc Lexer (Tokenizer)
========================

This module converts expression text into a list of tokens for the parser.

Token Categories
----------------
- Numbers: maximal runs of decimal digits (non-negative integers)
- Operators: +, -, *, /
- Delimiters: (, )
- EOF: appended exactly once at the end of input

Whitespace between tokens is skipped. Any other character is an error.

Literal Range
-------------
Literals are pushed with `push imm32`, which sign-extends a 32-bit
immediate on x86-64. The largest literal accepted is therefore
2**31 - 1; anything larger raises LiteralOverflowError.

Example Usage
-------------
>>> from arithc.lexer import tokenize
>>> for token in tokenize("2 + 3*4"):
...     print(token)
Token(NUMBER, 2, @0)
Token(PLUS, '+', @2)
Token(NUMBER, 3, @4)
Token(STAR, '*', @5)
Token(NUMBER, 4, @6)
Token(EOF, @7)
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from arithc.errors import (
    SourceLocation,
    UnrecognizedCharacterError,
    LiteralOverflowError,
)

logger = logging.getLogger(__name__)


# Largest literal `push imm32` can encode without sign-extension surprises
MAX_LITERAL = 2**31 - 1


# =============================================================================
# Token Type Enumeration
# =============================================================================

class ArithTokenType(Enum):
    """Token types for the expression language."""

    # === Structural Tokens ===
    EOF = auto()            # End of input

    # === Literals ===
    NUMBER = auto()         # Integer literal

    # === Arithmetic Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    SLASH = auto()          # /

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )


# Single-character operator and delimiter tokens
OPERATORS: dict[str, ArithTokenType] = {
    "+": ArithTokenType.PLUS,
    "-": ArithTokenType.MINUS,
    "*": ArithTokenType.STAR,
    "/": ArithTokenType.SLASH,
    "(": ArithTokenType.LPAREN,
    ")": ArithTokenType.RPAREN,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class ArithToken:
    """
    A single token from the expression text.

    Attributes:
        type: The ArithTokenType classification
        value: The integer for NUMBER, the character for operators and
               parentheses, None for EOF
        offset: Zero-based character offset in the source
    """
    type: ArithTokenType
    value: str | int | None
    offset: int

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            if isinstance(self.value, int):
                return f"Token({self.type.name}, {self.value}, @{self.offset})"
            return f"Token({self.type.name}, {self.value!r}, @{self.offset})"
        return f"Token({self.type.name}, @{self.offset})"

    __str__ = __repr__

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.offset)

    def is_operator_or_paren(self) -> bool:
        """Return True for +, -, *, /, ( and )."""
        return self.type in OPERATORS.values()

    def describe(self) -> str:
        """Short text for diagnostics: the literal text, or 'end of input'."""
        if self.type == ArithTokenType.EOF:
            return "end of input"
        return str(self.value)


# =============================================================================
# Lexer Implementation
# =============================================================================

class ArithLexer:
    """
    Tokenizes arithmetic expression text in a single left-to-right scan.

    Usage:
        lexer = ArithLexer(source)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The expression being tokenized
    """

    def __init__(self, source: str):
        self.source = source
        self._pos = 0

    def tokenize(self) -> Iterator[ArithToken]:
        """
        Generate tokens from the source.

        Yields:
            ArithToken objects, ending with exactly one EOF token

        Raises:
            UnrecognizedCharacterError: For characters outside the language
            LiteralOverflowError: For literals above MAX_LITERAL
        """
        while not self._at_end():
            char = self._peek()

            if char.isspace():
                self._pos += 1
                continue

            yield self._scan_token()

        yield ArithToken(ArithTokenType.EOF, None, self._pos)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self) -> str:
        """Current character, or empty string at end of source."""
        if self._at_end():
            return ""
        return self.source[self._pos]

    def _advance(self) -> str:
        """Consume and return the current character."""
        char = self.source[self._pos]
        self._pos += 1
        return char

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> ArithToken:
        """Scan one token starting at the current (non-space) character."""
        char = self._peek()

        if _is_digit(char):
            return self._scan_number()

        token_type = OPERATORS.get(char)
        if token_type is not None:
            start = self._pos
            self._advance()
            return ArithToken(token_type, char, start)

        raise UnrecognizedCharacterError(
            char,
            SourceLocation(self._pos),
            source=self.source,
        )

    def _scan_number(self) -> ArithToken:
        """
        Scan a maximal run of decimal digits.

        Only ASCII digits count: str.isdigit() also accepts characters
        such as superscripts, which int() would reject.
        """
        start = self._pos
        while _is_digit(self._peek()):
            self._advance()

        text = self.source[start:self._pos]

        # Compare digit counts first: int() refuses strings past a few
        # thousand digits
        significant = text.lstrip("0") or "0"
        if (
            len(significant) > len(str(MAX_LITERAL))
            or int(significant) > MAX_LITERAL
        ):
            raise LiteralOverflowError(
                text,
                MAX_LITERAL,
                SourceLocation(start),
                source=self.source,
            )

        return ArithToken(ArithTokenType.NUMBER, int(significant), start)


def _is_digit(char: str) -> bool:
    return len(char) == 1 and "0" <= char <= "9"


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: str) -> list[ArithToken]:
    """
    Tokenize expression text into a list ending with an EOF token.

    Args:
        source: The expression text

    Returns:
        Non-empty list of tokens, the last of which is EOF

    Raises:
        LexError: If the text contains an unrecognized character or an
                  oversized literal
    """
    tokens = list(ArithLexer(source).tokenize())
    logger.debug(f"Tokenized {len(source)} characters into {len(tokens)} tokens")
    return tokens
