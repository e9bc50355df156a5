"""
arithc - Arithmetic Expression Compiler
=======================================

This package compiles a single arithmetic expression into x86-64
assembly (GNU as, Intel syntax). The generated function takes no
arguments and returns the expression's value in RAX.

The language:
- Non-negative integer literals
- Binary operators + - * / with the usual precedence
- Left associativity ("8-3-2" is "(8-3)-2")
- Parentheses

Pipeline
--------
    Expression → Lexer → Parser → AST → Code Generator → Assembly

Usage
-----
>>> from arithc import compile_expression
>>> print(compile_expression("2+3*4"))

Or use the command-line tool:
    $ arithc "2+3*4" > expr.s
    $ cc -o expr expr.s && ./expr; echo $?
    14

Components
----------
- **lexer**: text to tokens
- **parser**: recursive descent to an expression tree
- **codegen**: stack-machine x86-64 code generation
- **evaluator**: reference evaluation with x86-64 integer semantics
- **emulator**: interpreter for the generated instruction subset
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Imports
# =============================================================================

from arithc.compiler import (
    ArithCompiler,
    CompilerOptions,
    CompilerResult,
    compile_expression,
)
from arithc.errors import (
    ArithError,
    ArithSyntaxError,
    LexError,
    UnrecognizedCharacterError,
    LiteralOverflowError,
    ParseError,
    ExpectedTokenError,
    ExpectedNumberError,
    TrailingInputError,
    NestingTooDeepError,
    CodeGenError,
    EvaluationError,
    EmulationError,
    SourceLocation,
)
from arithc.lexer import ArithLexer, ArithToken, ArithTokenType, tokenize
from arithc.parser import ArithParser, parse_source
from arithc.codegen import CodeGenerator
from arithc.ast import (
    ASTNode,
    Expression,
    NumberLiteral,
    BinaryExpression,
    BinaryOperator,
    ASTPrinter,
)
from arithc.evaluator import evaluate
from arithc.emulator import StackMachine, run_assembly

__all__ = [
    # Version
    "__version__",
    # Main API
    "ArithCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_expression",
    # Errors
    "ArithError",
    "ArithSyntaxError",
    "LexError",
    "UnrecognizedCharacterError",
    "LiteralOverflowError",
    "ParseError",
    "ExpectedTokenError",
    "ExpectedNumberError",
    "TrailingInputError",
    "NestingTooDeepError",
    "CodeGenError",
    "EvaluationError",
    "EmulationError",
    "SourceLocation",
    # Lexer
    "ArithLexer",
    "ArithToken",
    "ArithTokenType",
    "tokenize",
    # Parser
    "ArithParser",
    "parse_source",
    # Code generation
    "CodeGenerator",
    # AST
    "ASTNode",
    "Expression",
    "NumberLiteral",
    "BinaryExpression",
    "BinaryOperator",
    "ASTPrinter",
    # Back ends
    "evaluate",
    "StackMachine",
    "run_assembly",
]
