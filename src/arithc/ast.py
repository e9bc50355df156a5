"""
arithc Abstract Syntax Tree (AST) Definitions
=============================================

This module defines the AST node types produced by the parser and
consumed by the code generator and the reference evaluator.

Node Hierarchy
--------------
ASTNode (base)
└── Expression
    ├── NumberLiteral - integer constant (leaf)
    └── BinaryExpression - one of + - * / over two subtrees

Design Notes
------------
- All nodes are dataclasses for clean representation
- Each node stores its source location for diagnostics
- The node set is closed: consumers dispatch over exactly these two
  classes and raise on anything else
- A BinaryExpression owns its two children; trees are never shared
- Long operator chains produce left-deep trees thousands of levels
  deep, so every walk over a tree uses an explicit stack rather than
  Python recursion
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from arithc.errors import SourceLocation


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node appears
    """
    location: SourceLocation

    def __repr__(self) -> str:
        """Default representation showing node type."""
        return f"{self.__class__.__name__}@{self.location.offset}"


@dataclass(repr=False)
class Expression(ASTNode):
    """Base class for nodes that evaluate to an integer."""
    pass


# =============================================================================
# Operators
# =============================================================================

class BinaryOperator(Enum):
    """Binary operators, valued by their source symbol."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @property
    def symbol(self) -> str:
        return self.value


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class NumberLiteral(Expression):
    """
    Integer literal.

    Attributes:
        value: The non-negative literal value
    """
    value: int = 0

    def __repr__(self) -> str:
        return f"NumberLiteral({self.value})"


@dataclass
class BinaryExpression(Expression):
    """
    Binary operation.

    The location is that of the operator token.

    Attributes:
        operator: The operator
        left: Left operand subtree
        right: Right operand subtree
    """
    operator: BinaryOperator = BinaryOperator.ADD
    left: Expression = None
    right: Expression = None

    def __repr__(self) -> str:
        return _ReprFormatter().visit(self)


# =============================================================================
# Tree Walking
# =============================================================================

def walk_postorder(node: ASTNode) -> Iterator[ASTNode]:
    """
    Yield every node of a tree, children before parents.

    Operands come out left before right, which is the order the stack
    machine evaluates them in. Nodes other than BinaryExpression are
    treated as leaves.
    """
    stack: list[tuple[ASTNode, bool]] = [(node, False)]
    while stack:
        current, expanded = stack.pop()
        if expanded or not isinstance(current, BinaryExpression):
            yield current
        else:
            stack.append((current, True))
            stack.append((current.right, False))
            stack.append((current.left, False))


def count_nodes(node: ASTNode) -> int:
    """Number of nodes in a tree."""
    return sum(1 for _ in walk_postorder(node))


# =============================================================================
# Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for bottom-up AST visitors.

    visit() walks the tree in post-order and calls visit_<ClassName> for
    each node. A binary node's method receives the results already
    computed for its two operands, so subclasses never recurse and trees
    of any depth can be visited.

        class Counter(ASTVisitor):
            def visit_NumberLiteral(self, node):
                return 1
            def visit_BinaryExpression(self, node, left, right):
                return left + right + 1

    Visiting a node type without a visit method raises TypeError, so a
    missing case is reported instead of silently skipped.
    """

    def visit(self, node: ASTNode):
        """
        Visit a tree and return the result computed for its root.

        Args:
            node: Root of the tree to visit

        Returns:
            The result of the root node's visit method
        """
        results: list = []
        for current in walk_postorder(node):
            method_name = f"visit_{current.__class__.__name__}"
            visitor = getattr(self, method_name, self.generic_visit)
            if isinstance(current, BinaryExpression):
                right = results.pop()
                left = results.pop()
                results.append(visitor(current, left, right))
            else:
                results.append(visitor(current))
        return results.pop()

    def generic_visit(self, node: ASTNode, *operands):
        raise TypeError(f"{self.__class__.__name__} cannot visit {node.__class__.__name__}")

    def visit_NumberLiteral(self, node: NumberLiteral):
        return self.generic_visit(node)

    def visit_BinaryExpression(self, node: BinaryExpression, left, right):
        return self.generic_visit(node, left, right)


class _ReprFormatter(ASTVisitor):
    def visit_NumberLiteral(self, node: NumberLiteral) -> str:
        return repr(node)

    def visit_BinaryExpression(self, node: BinaryExpression, left: str, right: str) -> str:
        return f"BinaryExpression({left} {node.operator.symbol} {right})"


class _SourceFormatter(ASTVisitor):
    def visit_NumberLiteral(self, node: NumberLiteral) -> str:
        return str(node.value)

    def visit_BinaryExpression(self, node: BinaryExpression, left: str, right: str) -> str:
        return f"({left} {node.operator.symbol} {right})"


# =============================================================================
# AST Printer
# =============================================================================

class ASTPrinter:
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(ast))

    Output for "2+3*4":
        Binary: +
          Number: 2
          Binary: *
            Number: 3
            Number: 4
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []

        # Parents print before children, so this walk is pre-order
        pending: list[tuple[ASTNode, int]] = [(node, 0)]
        while pending:
            current, self.indent_level = pending.pop()
            if isinstance(current, BinaryExpression):
                self._emit(f"Binary: {current.operator.symbol}")
                pending.append((current.right, self.indent_level + 1))
                pending.append((current.left, self.indent_level + 1))
            elif isinstance(current, NumberLiteral):
                self._emit(f"Number: {current.value}")
            else:
                raise TypeError(f"ASTPrinter cannot print {current.__class__.__name__}")

        self.indent_level = 0
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        """Emit a line with current indentation."""
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")


def expression_to_string(node: Expression) -> str:
    """
    Render a tree back to fully parenthesized text.

    >>> expression_to_string(parse_source("1-2-3"))
    '((1 - 2) - 3)'

    Raises:
        TypeError: For nodes that are not expressions
    """
    return _SourceFormatter().visit(node)
