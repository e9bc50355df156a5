"""
Native Execution Tests
======================

Assembles generated listings with the system C compiler and runs them.
The process exit status is the low byte of RAX returned from main().

Skipped unless running on x86-64 Linux with `cc` on PATH.
"""

import platform
import shutil
import subprocess
import sys

import pytest

from arithc.compiler import compile_expression


pytestmark = pytest.mark.skipif(
    not (
        sys.platform.startswith("linux")
        and platform.machine() in ("x86_64", "AMD64")
        and shutil.which("cc")
    ),
    reason="requires x86-64 Linux with a C compiler",
)


@pytest.fixture
def compile_and_run(tmp_path):
    """Return a helper that assembles an expression and returns its exit status."""

    def _run(expression: str) -> int:
        asm_file = tmp_path / "expr.s"
        asm_file.write_text(compile_expression(expression), encoding="utf-8")
        binary = tmp_path / "expr"

        subprocess.run(
            ["cc", "-o", str(binary), str(asm_file)],
            check=True,
            capture_output=True,
            timeout=60,
        )
        result = subprocess.run([str(binary)], timeout=10)
        return result.returncode

    return _run


class TestNative:
    """Generated code runs on real hardware."""

    def test_single_literal(self, compile_and_run):
        assert compile_and_run("42") == 42

    def test_precedence(self, compile_and_run):
        assert compile_and_run("2+3*4") == 14

    def test_left_associativity(self, compile_and_run):
        assert compile_and_run("8-3-2") == 3

    def test_parentheses(self, compile_and_run):
        assert compile_and_run("(2+3)*4") == 20

    def test_division(self, compile_and_run):
        assert compile_and_run("7/2") == 3

    def test_negative_intermediate(self, compile_and_run):
        assert compile_and_run("(0-7)/2+10") == 7
