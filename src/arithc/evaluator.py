"""
Reference Evaluator
===================

Computes the value of an expression tree directly, using the same
integer semantics as the generated x86-64 code:

- 64-bit two's-complement arithmetic; ADD, SUB and IMUL wrap
- IDIV truncates toward zero ("7/2" is 3, "(0-7)/2" is -3)
- Division by zero, and the one quotient that does not fit in 64 bits
  (INT64_MIN / -1), fault on real hardware and raise EvaluationError here

The evaluator is used by `arithc --eval` and by the tests as the oracle
for generated code. It walks the tree bottom-up without recursion, so
chains of any length evaluate.
"""

from arithc.ast import (
    ASTVisitor,
    Expression,
    BinaryExpression,
    NumberLiteral,
    BinaryOperator,
)
from arithc.errors import EvaluationError


INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
_MASK64 = 2**64 - 1


def wrap_int64(value: int) -> int:
    """Reduce an unbounded integer to a signed 64-bit value."""
    value &= _MASK64
    if value > INT64_MAX:
        value -= 2**64
    return value


def truncating_divide(dividend: int, divisor: int) -> int:
    """
    Signed division rounding toward zero, as IDIV does.

    Raises:
        EvaluationError: On division by zero or quotient overflow
    """
    if divisor == 0:
        raise EvaluationError("division by zero")
    if dividend == INT64_MIN and divisor == -1:
        raise EvaluationError("quotient does not fit in 64 bits")

    quotient = abs(dividend) // abs(divisor)
    if (dividend < 0) != (divisor < 0):
        quotient = -quotient
    return quotient


class Evaluator(ASTVisitor):
    """Evaluates expression trees with x86-64 integer semantics."""

    def evaluate(self, node: Expression) -> int:
        return self.visit(node)

    def visit_NumberLiteral(self, node: NumberLiteral) -> int:
        return wrap_int64(node.value)

    def visit_BinaryExpression(self, node: BinaryExpression, left: int, right: int) -> int:
        if node.operator == BinaryOperator.ADD:
            return wrap_int64(left + right)
        if node.operator == BinaryOperator.SUBTRACT:
            return wrap_int64(left - right)
        if node.operator == BinaryOperator.MULTIPLY:
            return wrap_int64(left * right)
        if node.operator == BinaryOperator.DIVIDE:
            return truncating_divide(left, right)

        raise EvaluationError(f"unsupported operator {node.operator!r}")


def evaluate(node: Expression) -> int:
    """Evaluate an expression tree to a signed 64-bit integer."""
    return Evaluator().evaluate(node)
