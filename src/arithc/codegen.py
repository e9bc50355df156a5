"""
x86-64 Code Generator
=====================

This module generates x86-64 assembly (GNU as, Intel syntax) from the
expression tree.

Code Generation Strategy
------------------------
The generator treats the hardware stack as an evaluation stack:

1. A number literal pushes its value
2. A binary node generates its left subtree, then its right subtree,
   pops the right operand into RDI and the left operand into RAX,
   applies the operator and pushes RAX

Every subtree therefore leaves exactly one value on the stack, which is
what lets the post-order walk work without tracking operand locations.
The walk uses an explicit stack (ast.walk_postorder), so long operator
chains do not exhaust the Python call stack.

Register Usage
--------------
| Register | Usage                                         |
|----------|-----------------------------------------------|
| RAX      | Left operand, result, function return value   |
| RDI      | Right operand                                 |
| RDX      | High half of the dividend for IDIV (via CQO)  |
| RSP      | Evaluation stack                              |

Division
--------
IDIV divides RDX:RAX by its operand, so CQO first sign-extends RAX into
RDX. The quotient, truncated toward zero, lands in RAX.

Generated Assembly Format
-------------------------
    .intel_syntax noprefix
    .global main
    main:
        push 2
        push 3
        pop rdi
        pop rax
        add rax, rdi
        push rax
        pop rax
        ret

Usage
-----
>>> from arithc.parser import parse_source
>>> from arithc.codegen import CodeGenerator
>>> asm = CodeGenerator().generate(parse_source("2+3"))
"""

import logging
from typing import Optional

from arithc.ast import (
    Expression,
    BinaryExpression,
    NumberLiteral,
    BinaryOperator,
    walk_postorder,
)
from arithc.errors import CodeGenError

logger = logging.getLogger(__name__)


# Instructions applied after "pop rdi; pop rax" for each operator.
# Each entry is a list of (mnemonic, operand) pairs.
OPERATOR_INSTRUCTIONS: dict[BinaryOperator, list[tuple[str, str]]] = {
    BinaryOperator.ADD: [("add", "rax, rdi")],
    BinaryOperator.SUBTRACT: [("sub", "rax, rdi")],
    BinaryOperator.MULTIPLY: [("imul", "rax, rdi")],
    BinaryOperator.DIVIDE: [("cqo", ""), ("idiv", "rdi")],
}


class CodeGenerator:
    """
    Generates x86-64 assembly from an expression tree.

    Attributes:
        entry_label: Name of the global entry point
        source_comment: Expression text to record in a leading comment,
                        or None for no comment
    """

    def __init__(
        self,
        entry_label: str = "main",
        source_comment: Optional[str] = None,
    ):
        self.entry_label = entry_label
        self.source_comment = source_comment

        # Assembly output lines
        self._output: list[str] = []

    def generate(self, node: Expression) -> str:
        """
        Generate a complete assembly listing for an expression.

        The listing declares the entry point, evaluates the expression
        onto the stack, pops the result into RAX and returns.

        Args:
            node: Root of the expression tree

        Returns:
            Assembly source text ending with a newline
        """
        self._output = []

        self._emit_header()
        self.generate_expression(node)

        # The whole expression's value is on top of the stack
        self._emit_instruction("pop", "rax")
        self._emit_instruction("ret")

        logger.debug(f"Generated {self.instruction_count} instructions")
        return "\n".join(self._output) + "\n"

    def generate_expression(self, node: Expression) -> None:
        """
        Append code that pushes the value of a subtree.

        Raises:
            CodeGenError: For node types or operators the generator
                          does not know
        """
        for current in walk_postorder(node):
            if isinstance(current, NumberLiteral):
                self._emit_instruction("push", str(current.value))
            elif isinstance(current, BinaryExpression):
                self._generate_binary(current)
            else:
                raise CodeGenError(f"cannot generate code for {current!r}")

    @property
    def instruction_count(self) -> int:
        """Number of instructions (not directives or labels) emitted so far."""
        return sum(
            1 for line in self._output
            if line.startswith("    ") and not line.lstrip().startswith("#")
        )

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    def _emit(self, line: str = "") -> None:
        """Emit a line of assembly."""
        self._output.append(line)

    def _emit_instruction(self, mnemonic: str, operand: str = "") -> None:
        """Emit an instruction with optional operand."""
        if operand:
            self._emit(f"    {mnemonic} {operand}")
        else:
            self._emit(f"    {mnemonic}")

    def _emit_header(self) -> None:
        """Emit syntax directive, entry declaration and entry label."""
        self._emit(".intel_syntax noprefix")
        self._emit(f".global {self.entry_label}")
        self._emit(f"{self.entry_label}:")
        if self.source_comment is not None:
            # Collapse newlines so the comment stays on one line
            self._emit(f"    # expr: {' '.join(self.source_comment.split())}")

    # =========================================================================
    # Expression Code Generation
    # =========================================================================

    def _generate_binary(self, node: BinaryExpression) -> None:
        """Combine the two operand values already pushed for a binary node."""
        instructions = OPERATOR_INSTRUCTIONS.get(node.operator)
        if instructions is None:
            raise CodeGenError(f"unsupported operator {node.operator!r}")

        self._emit_instruction("pop", "rdi")
        self._emit_instruction("pop", "rax")
        for mnemonic, operand in instructions:
            self._emit_instruction(mnemonic, operand)
        self._emit_instruction("push", "rax")


def generate_assembly(node: Expression, entry_label: str = "main") -> str:
    """Generate a complete listing for a tree with default settings."""
    return CodeGenerator(entry_label=entry_label).generate(node)
