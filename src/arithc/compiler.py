"""
arithc Compiler Main Module
===========================

This module orchestrates the complete compilation process:

    Expression text → Lex → Parse → Generate → Assembly

Usage
-----
Command line:
    $ arithc "2+3*4" > expr.s

Programmatic:
    >>> from arithc import compile_expression
    >>> asm = compile_expression("2+3*4")

Error Handling
--------------
Compilation stops at the first error. Lexer and parser errors propagate
unchanged to the caller as ArithSyntaxError subclasses; no assembly is
produced for a failed compilation.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from arithc.lexer import ArithToken, tokenize
from arithc.parser import ArithParser
from arithc.codegen import CodeGenerator
from arithc.ast import Expression, count_nodes

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        entry_label: Global label the generated code is placed under
        allow_trailing: Ignore tokens after a complete expression instead
                        of rejecting them
        output_comments: Record the expression text as a comment in the
                         listing
    """
    entry_label: str = "main"
    allow_trailing: bool = False
    output_comments: bool = False


@dataclass
class CompilerResult:
    """
    Result of a successful compilation.

    Failed compilations raise instead of returning a result.

    Attributes:
        source: The expression text
        assembly: Generated assembly code
        tokens: Tokens produced by the lexer
        ast: Expression tree
    """
    source: str = ""
    assembly: str = ""
    tokens: list[ArithToken] = field(default_factory=list)
    ast: Optional[Expression] = None

    @property
    def token_count(self) -> int:
        return len(self.tokens)


class ArithCompiler:
    """
    Compiler from arithmetic expressions to x86-64 assembly.

    Example:
        compiler = ArithCompiler()
        result = compiler.compile_source("(2+3)*4")
        print(result.assembly)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str) -> CompilerResult:
        """
        Compile expression text to assembly.

        Args:
            source: The expression text

        Returns:
            CompilerResult containing assembly and intermediate stages

        Raises:
            ArithSyntaxError: On the first lexer or parser error
        """
        result = CompilerResult(source=source)

        # Stage 1: Lexical analysis
        result.tokens = tokenize(source)

        # Stage 2: Parsing
        result.ast = self.parse_tokens(result.tokens, source)
        logger.debug(f"Parsed expression tree of {count_nodes(result.ast)} nodes")

        # Stage 3: Code generation
        generator = CodeGenerator(
            entry_label=self.options.entry_label,
            source_comment=source if self.options.output_comments else None,
        )
        result.assembly = generator.generate(result.ast)

        return result

    def parse_tokens(self, tokens: list[ArithToken], source: str) -> Expression:
        """Parse tokens into an AST using this compiler's options."""
        parser = ArithParser(tokens, source, allow_trailing=self.options.allow_trailing)
        return parser.parse()


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_expression(
    source: str,
    entry_label: str = "main",
    allow_trailing: bool = False,
) -> str:
    """
    Compile an arithmetic expression to x86-64 assembly.

    Args:
        source: The expression text
        entry_label: Global label for the generated function
        allow_trailing: Ignore tokens after a complete expression

    Returns:
        Assembly listing text

    Raises:
        ArithSyntaxError: If compilation fails

    Example:
        >>> print(compile_expression("42"))
        .intel_syntax noprefix
        .global main
        main:
            push 42
            pop rax
            ret
    """
    options = CompilerOptions(entry_label=entry_label, allow_trailing=allow_trailing)
    return ArithCompiler(options).compile_source(source).assembly
