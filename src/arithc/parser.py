"""
arithc Recursive Descent Parser
===============================

This module takes the token list produced by the lexer and builds an
Abstract Syntax Tree (AST).

Grammar (EBNF)
--------------
expr    ::= mul (('+' | '-') mul)*
mul     ::= primary (('*' | '/') primary)*
primary ::= '(' expr ')' | NUMBER

Both binary levels are left-associative, so "8-3-2" parses as
"(8-3)-2". Multiplicative operators bind tighter than additive ones.

Error Handling
--------------
The first grammar violation raises immediately. Parentheses nested more
than MAX_NESTING_DEPTH deep raise NestingTooDeepError at the opening
parenthesis that crosses the limit. There is no recovery and
no partial tree. After the top-level expression the parser requires EOF
unless it was created with allow_trailing=True, in which case leftover
tokens are ignored.

Example Usage
-------------
>>> from arithc.parser import parse_source
>>> from arithc.ast import ASTPrinter
>>> print(ASTPrinter().print(parse_source("2+3*4")))
Binary: +
  Number: 2
  Binary: *
    Number: 3
    Number: 4
"""

import logging
from typing import Callable, Optional

from arithc.lexer import ArithToken, ArithTokenType, tokenize
from arithc.ast import (
    Expression,
    BinaryExpression,
    NumberLiteral,
    BinaryOperator,
)
from arithc.errors import (
    ExpectedTokenError,
    ExpectedNumberError,
    TrailingInputError,
    NestingTooDeepError,
)

logger = logging.getLogger(__name__)


ADDITIVE_OPERATORS = {
    ArithTokenType.PLUS: BinaryOperator.ADD,
    ArithTokenType.MINUS: BinaryOperator.SUBTRACT,
}

MULTIPLICATIVE_OPERATORS = {
    ArithTokenType.STAR: BinaryOperator.MULTIPLY,
    ArithTokenType.SLASH: BinaryOperator.DIVIDE,
}

# Deepest parenthesis nesting accepted. A level costs five Python frames
# (primary, expr, binary, mul, binary), which keeps the parse well inside
# the default recursion limit of 1000.
MAX_NESTING_DEPTH = 100


class ArithParser:
    """
    Recursive descent parser for arithmetic expressions.

    The parser owns the token list, its cursor and the original source
    text (used to render diagnostics). It holds no other state.

    Attributes:
        tokens: Tokens from the lexer, ending with EOF
        source: Original expression text for error messages
        allow_trailing: Ignore tokens after a complete expression
    """

    def __init__(
        self,
        tokens: list[ArithToken],
        source: Optional[str] = None,
        allow_trailing: bool = False,
    ):
        if not tokens or tokens[-1].type != ArithTokenType.EOF:
            raise ValueError("token list must end with an EOF token")

        self.tokens = tokens
        self.source = source
        self.allow_trailing = allow_trailing

        # Current position in token list
        self._pos = 0

        # Open parentheses enclosing the cursor
        self._depth = 0

    def parse(self) -> Expression:
        """
        Parse the whole token list into one expression tree.

        Returns:
            Root node of the expression

        Raises:
            ParseError: On the first grammar violation
        """
        expr = self._parse_expr()

        if not self._at_end():
            leftover = self._peek()
            if not self.allow_trailing:
                raise TrailingInputError(
                    leftover.describe(),
                    leftover.location,
                    source=self.source,
                )
            logger.warning(
                f"Ignoring trailing input starting at offset {leftover.offset}"
            )

        return expr

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if the cursor sits on EOF."""
        return self._peek().type == ArithTokenType.EOF

    def _peek(self) -> ArithToken:
        """Look at the token under the cursor."""
        return self.tokens[self._pos]

    def _advance(self) -> ArithToken:
        """Consume and return the current token. EOF is never consumed."""
        token = self._peek()
        if not self._at_end():
            self._pos += 1
        return token

    def _check(self, *types: ArithTokenType) -> bool:
        """Check if current token is one of the given types."""
        return self._peek().type in types

    def _match(self, *types: ArithTokenType) -> Optional[ArithToken]:
        """
        Consume current token if it matches one of the types.

        Returns:
            The consumed token, or None if no match
        """
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: ArithTokenType, text: str) -> ArithToken:
        """
        Expect and consume a specific punctuation token.

        Raises:
            ExpectedTokenError: At the current token when it does not match
        """
        token = self._match(token_type)
        if token is None:
            raise ExpectedTokenError(
                text,
                self._peek().location,
                source=self.source,
            )
        return token

    # =========================================================================
    # Grammar Rules
    # =========================================================================

    def _parse_expr(self) -> Expression:
        """Parse additive expression (+ -)."""
        return self._parse_binary(self._parse_mul, ADDITIVE_OPERATORS)

    def _parse_mul(self) -> Expression:
        """Parse multiplicative expression (* /)."""
        return self._parse_binary(self._parse_primary, MULTIPLICATIVE_OPERATORS)

    def _parse_binary(
        self,
        operand_parser: Callable[[], Expression],
        operators: dict[ArithTokenType, BinaryOperator],
    ) -> Expression:
        """
        Left-fold operands joined by operators of one precedence level.

        Args:
            operand_parser: Parses the next-higher precedence level
            operators: Map of token types to binary operators
        """
        expr = operand_parser()

        while self._check(*operators):
            op_token = self._advance()
            right = operand_parser()
            expr = BinaryExpression(
                location=op_token.location,
                operator=operators[op_token.type],
                left=expr,
                right=right,
            )

        return expr

    def _parse_primary(self) -> Expression:
        """Parse a number or a parenthesized expression."""
        lparen = self._match(ArithTokenType.LPAREN)
        if lparen is not None:
            if self._depth >= MAX_NESTING_DEPTH:
                raise NestingTooDeepError(
                    MAX_NESTING_DEPTH,
                    lparen.location,
                    source=self.source,
                )
            self._depth += 1
            expr = self._parse_expr()
            self._expect(ArithTokenType.RPAREN, ")")
            self._depth -= 1
            return expr

        token = self._match(ArithTokenType.NUMBER)
        if token is None:
            raise ExpectedNumberError(self._peek().location, source=self.source)

        return NumberLiteral(location=token.location, value=token.value)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str, allow_trailing: bool = False) -> Expression:
    """
    Parse expression text into an AST.

    This is a convenience function that combines lexing and parsing.

    Args:
        source: The expression text
        allow_trailing: Ignore tokens after a complete expression

    Returns:
        The root node of the AST

    Raises:
        ArithSyntaxError: If lexing or parsing fails
    """
    tokens = tokenize(source)
    parser = ArithParser(tokens, source, allow_trailing=allow_trailing)
    return parser.parse()
