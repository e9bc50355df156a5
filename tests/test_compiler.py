"""
Compiler Driver Tests
=====================

End-to-end tests of ArithCompiler: options, intermediate results and
error propagation.
"""

import logging

import pytest

from arithc import (
    ArithCompiler,
    ArithError,
    CompilerOptions,
    compile_expression,
    run_assembly,
)
from arithc.ast import BinaryExpression
from arithc.errors import (
    ExpectedNumberError,
    ExpectedTokenError,
    TrailingInputError,
    UnrecognizedCharacterError,
)


class TestCompileSource:
    """Tests for CompilerResult contents."""

    def test_result_fields(self):
        result = ArithCompiler().compile_source("2+3*4")
        assert result.source == "2+3*4"
        assert result.token_count == 6
        assert isinstance(result.ast, BinaryExpression)
        assert result.assembly.startswith(".intel_syntax noprefix\n")
        assert result.assembly.endswith("    pop rax\n    ret\n")

    def test_default_options(self):
        options = CompilerOptions()
        assert options.entry_label == "main"
        assert not options.allow_trailing
        assert not options.output_comments

    def test_entry_label_option(self):
        compiler = ArithCompiler(CompilerOptions(entry_label="expr"))
        asm = compiler.compile_source("1").assembly
        assert ".global expr" in asm
        assert run_assembly(asm, "expr") == 1

    def test_comments_option(self):
        compiler = ArithCompiler(CompilerOptions(output_comments=True))
        asm = compiler.compile_source("1 +  2").assembly
        assert "    # expr: 1 + 2" in asm.splitlines()

    def test_allow_trailing_option(self):
        compiler = ArithCompiler(CompilerOptions(allow_trailing=True))
        assert run_assembly(compiler.compile_source("1+2)").assembly) == 3

    def test_compiler_is_reusable(self):
        compiler = ArithCompiler()
        first = compiler.compile_source("1+1")
        second = compiler.compile_source("9")
        assert run_assembly(first.assembly) == 2
        assert run_assembly(second.assembly) == 9

    def test_long_chain_with_debug_logging(self, caplog):
        """Debug logging summarizes the tree instead of printing it."""
        caplog.set_level(logging.DEBUG, logger="arithc")
        result = ArithCompiler().compile_source("+".join(["1"] * 5000))
        assert run_assembly(result.assembly) == 5000
        assert "Parsed expression tree of 9999 nodes" in caplog.text


class TestCompileErrors:
    """The first error aborts compilation with no assembly."""

    def test_missing_operand(self):
        with pytest.raises(ExpectedNumberError) as exc_info:
            compile_expression("1+")
        assert exc_info.value.offset == 2

    def test_unrecognized_character(self):
        with pytest.raises(UnrecognizedCharacterError) as exc_info:
            compile_expression("1+a")
        assert exc_info.value.offset == 2

    def test_unbalanced_parenthesis(self):
        with pytest.raises(ExpectedTokenError) as exc_info:
            compile_expression("(1+2")
        assert exc_info.value.offset == 4

    def test_trailing_input_rejected_by_default(self):
        with pytest.raises(TrailingInputError):
            compile_expression("1 2")

    def test_trailing_input_allowed(self):
        assert "push 1" in compile_expression("1 2", allow_trailing=True)

    def test_all_errors_share_a_base(self):
        for source in ("1+", "1+a", "(1+2", "1 2", "4294967296", "(" * 500 + "1"):
            with pytest.raises(ArithError):
                compile_expression(source)
