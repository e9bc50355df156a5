"""
arithc - Expression Compiler Command-Line Interface
===================================================

Usage Examples
--------------
Compile to stdout:
    $ arithc "2+3*4"

With output file:
    $ arithc "(2+3)*4" -o expr.s

Build and run natively (x86-64):
    $ arithc "7/2" > expr.s && cc -o expr expr.s && ./expr; echo $?
    3

Inspect the pipeline:
    $ arithc --tokens "1 + 2"
    $ arithc --ast "8-3-2"
    $ arithc --eval "8-3-2"
    $ arithc --run "8-3-2"

Expressions that begin with '-' must follow '--':
    $ arithc -- "-1"
"""

import logging
import re
from pathlib import Path
from typing import Optional

import click

from arithc import __version__
from arithc.compiler import ArithCompiler, CompilerOptions
from arithc.lexer import tokenize
from arithc.ast import ASTPrinter
from arithc.evaluator import evaluate
from arithc.emulator import run_assembly
from arithc.cli.errors import handle_cli_exception

logger = logging.getLogger(__name__)


SYMBOL_RE = re.compile(r"^[A-Za-z_.$][\w.$]*$")


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def validate_label(ctx: click.Context, param: click.Parameter, value: str) -> str:
    """Reject entry labels the assembler would not accept as a symbol."""
    if not SYMBOL_RE.match(value):
        raise click.BadParameter(f"'{value}' is not a valid assembler symbol")
    return value


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument("expression")
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write assembly to this file instead of stdout",
)
@click.option(
    "-e", "--entry",
    default="main",
    show_default=True,
    callback=validate_label,
    help="Global label for the generated function",
)
@click.option(
    "--allow-trailing",
    is_flag=True,
    help="Ignore input after a complete expression instead of rejecting it",
)
@click.option(
    "-c", "--comments",
    is_flag=True,
    help="Record the expression as a comment in the listing",
)
@click.option(
    "--tokens", "show_tokens",
    is_flag=True,
    help="Print tokens and exit",
)
@click.option(
    "--ast", "show_ast",
    is_flag=True,
    help="Print the expression tree and exit",
)
@click.option(
    "--eval", "show_value",
    is_flag=True,
    help="Print the value of the expression and exit",
)
@click.option(
    "--run", "run_code",
    is_flag=True,
    help="Compile, execute the listing in the emulator and print RAX",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output on stderr",
)
@click.version_option(version=__version__, prog_name="arithc")
def main(
    expression: str,
    output: Optional[Path],
    entry: str,
    allow_trailing: bool,
    comments: bool,
    show_tokens: bool,
    show_ast: bool,
    show_value: bool,
    run_code: bool,
    verbose: bool,
) -> None:
    """
    Compile an arithmetic expression to x86-64 assembly.

    EXPRESSION uses non-negative integers, + - * / and parentheses.

    The listing defines a global function returning the value in RAX.
    On an error the input is echoed to stderr with a caret under the
    offending position, and nothing is written to stdout.

    \b
    Examples:
        arithc "2+3*4"               # Assembly on stdout
        arithc "2+3*4" -o expr.s     # Assembly to a file
        arithc --run "(2+3)*4"       # Prints 20
    """
    modes = [show_tokens, show_ast, show_value, run_code]
    if sum(modes) > 1:
        raise click.UsageError("--tokens, --ast, --eval and --run are mutually exclusive")

    setup_logging(verbose)

    options = CompilerOptions(
        entry_label=entry,
        allow_trailing=allow_trailing,
        output_comments=comments,
    )
    logger.debug(f"Compiler options: {options}")

    try:
        if verbose:
            click.echo(f"Compiling {expression!r} (entry: {entry})", err=True)

        # Token dump mode
        if show_tokens:
            for token in tokenize(expression):
                click.echo(repr(token))
            return

        compiler = ArithCompiler(options)

        # AST dump and evaluation modes stop after parsing
        if show_ast or show_value:
            tree = compiler.parse_tokens(tokenize(expression), expression)
            if show_ast:
                click.echo(ASTPrinter().print(tree))
            else:
                click.echo(evaluate(tree))
            return

        result = compiler.compile_source(expression)

        if run_code:
            click.echo(run_assembly(result.assembly, entry))
            return

        if output is not None:
            output.write_text(result.assembly)
            click.echo(f"Compiled expression -> {output}")
        else:
            click.echo(result.assembly, nl=False)

        if verbose:
            click.echo(f"Tokenized: {result.token_count} tokens", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
