"""
arithc Error Hierarchy
======================

This module defines the exception hierarchy for the arithc compiler.
All exceptions inherit from ArithError, allowing callers to catch every
compiler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
ArithError (base)
├── ArithSyntaxError - positional errors in the expression text
│   ├── LexError - input that cannot be tokenized
│   │   ├── UnrecognizedCharacterError - character outside the language
│   │   └── LiteralOverflowError - literal too wide for an immediate
│   └── ParseError - grammar violations
│       ├── ExpectedTokenError - required punctuation missing
│       ├── ExpectedNumberError - operand missing
│       ├── TrailingInputError - tokens left after a complete expression
│       └── NestingTooDeepError - parentheses nested past the parser limit
├── CodeGenError - tree the code generator cannot handle
├── EvaluationError - reference evaluator arithmetic fault
└── EmulationError - emulator fault while running generated code

Error Message Format
--------------------
Positional errors render the original input followed by a caret under
the offending offset and the message:

    1+a
      ^ unrecognized character 'a'

There is only ever one line of input, so no filename or line number is
shown.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class ArithError(Exception):
    """
    Base exception for all arithc errors.

        try:
            compile_expression("1+")
        except ArithError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in the expression text.

    Attributes:
        offset: Zero-based character offset into the source
    """
    offset: int

    def __str__(self) -> str:
        return f"offset {self.offset}"


# =============================================================================
# Syntax Errors (Lexer and Parser)
# =============================================================================

class ArithSyntaxError(ArithError):
    """
    Error tied to a position in the expression text.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        source: The full original input, used for the caret diagnostic
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.source = source
        self.hint = hint
        super().__init__(self._format_message())

    @property
    def offset(self) -> Optional[int]:
        """Offset of the error, or None when unknown."""
        return self.location.offset if self.location else None

    def _format_message(self) -> str:
        """
        Format the error as the input line plus a caret line.

        Example output:
            (1+2
                ^ expected ')'
        """
        if self.source is None or self.location is None:
            parts = [f"error: {self.message}"]
        else:
            padding = " " * self.location.offset
            parts = [self.source, f"{padding}^ {self.message}"]

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexError(ArithSyntaxError):
    """Input text that cannot be split into tokens."""
    pass


class UnrecognizedCharacterError(LexError):
    """
    Character that is not whitespace, a digit, an operator or a parenthesis.
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"unrecognized character '{char}'",
            location=location,
            source=source,
        )


class LiteralOverflowError(LexError):
    """
    Integer literal wider than a signed 32-bit immediate.

    x86-64 `push imm32` sign-extends its operand, so larger literals
    cannot be encoded and are rejected rather than wrapped.
    """

    def __init__(
        self,
        literal: str,
        limit: int,
        location: Optional[SourceLocation] = None,
        source: Optional[str] = None,
    ):
        self.literal = literal
        self.limit = limit
        super().__init__(
            f"integer literal {literal} is too large",
            location=location,
            source=source,
            hint=f"literals must not exceed {limit}",
        )


class ParseError(ArithSyntaxError):
    """Token sequence that does not match the expression grammar."""
    pass


class ExpectedTokenError(ParseError):
    """
    Required punctuation token is missing.

    Raised when a parenthesized expression is not closed.
    """

    def __init__(
        self,
        expected: str,
        location: Optional[SourceLocation] = None,
        source: Optional[str] = None,
    ):
        self.expected = expected
        super().__init__(
            f"expected '{expected}'",
            location=location,
            source=source,
        )


class ExpectedNumberError(ParseError):
    """An operand was required but the current token is not a number."""

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source: Optional[str] = None,
    ):
        super().__init__(
            "expected a number",
            location=location,
            source=source,
        )


class TrailingInputError(ParseError):
    """Tokens remain after a complete expression has been parsed."""

    def __init__(
        self,
        found: str,
        location: Optional[SourceLocation] = None,
        source: Optional[str] = None,
    ):
        self.found = found
        super().__init__(
            f"unexpected trailing input '{found}'",
            location=location,
            source=source,
            hint="use --allow-trailing to ignore input after the expression",
        )


class NestingTooDeepError(ParseError):
    """
    Parentheses nested more deeply than the parser supports.

    Each level of parentheses costs several Python stack frames in the
    recursive descent parser, so nesting is capped well below the
    interpreter recursion limit. Operator chains are not affected.
    """

    def __init__(
        self,
        limit: int,
        location: Optional[SourceLocation] = None,
        source: Optional[str] = None,
    ):
        self.limit = limit
        super().__init__(
            "expression nested too deeply",
            location=location,
            source=source,
            hint=f"at most {limit} levels of parentheses are supported",
        )


# =============================================================================
# Back-End Errors
# =============================================================================

class CodeGenError(ArithError):
    """
    Code generation error.

    Only raised when the tree holds a node or operator the generator
    does not know, which means the tree was not built by the parser.
    """
    pass


class EvaluationError(ArithError):
    """Arithmetic fault in the reference evaluator (e.g. division by zero)."""
    pass


class EmulationError(ArithError):
    """
    Fault while interpreting generated assembly.

    Raised for unknown instructions, stack underflow, divide faults and
    listings with no entry label or no return.
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.message = message
        self.line_number = line_number
        if line_number is not None:
            super().__init__(f"line {line_number}: {message}")
        else:
            super().__init__(message)
