"""
impc - imp Compiler Command-Line Interface
==========================================

Compiles an imp source file to x86-64 assembly and links it into a
freestanding executable, or steps through the lexer one token at a time.

Usage Examples
--------------
Compile and link (writes output.asm, output.o and a.out):
    $ impc hello.imp

Assembly only:
    $ impc -S hello.imp -o hello.asm

Step through tokens:
    $ impc --step hello.imp
    $ impc --step --show-source --all-tokens hello.imp

Verbose mode:
    $ impc -v hello.imp
"""

import logging
from pathlib import Path
from typing import Optional

import click

from impc import __version__
from impc.cli.errors import handle_cli_exception
from impc.compiler import CompilerOptions, compile_file
from impc.compiler.stepper import LexStepper, StepAction, StepperState, render_source
from impc.toolchain import ToolchainOptions, assemble_and_link

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def run_step_mode(
    source: str,
    filename: str,
    show_source: bool,
    all_tokens: bool,
) -> None:
    """Lex the source one token per step, printing the state after each."""
    stepper = LexStepper(source, filename)
    state = StepperState()
    if all_tokens:
        state = stepper.update(state, StepAction.TOGGLE_HIGHLIGHT)

    while True:
        snapshot = stepper.snapshot(state)
        click.echo(snapshot.status_line())
        if show_source:
            click.echo(render_source(stepper, state))
        if snapshot.finished:
            break
        state = stepper.update(state, StepAction.STEP)

    click.echo("Lexical analysis complete")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "source_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output assembly file (default: output.asm)",
)
@click.option(
    "-S", "--no-link",
    is_flag=True,
    help="Only write the assembly; do not run the assembler and linker",
)
@click.option(
    "-e", "--executable",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Linked executable (default: a.out)",
)
@click.option(
    "-s", "--step",
    is_flag=True,
    help="Step through the lexer one token at a time instead of compiling",
)
@click.option(
    "--show-source",
    is_flag=True,
    help="In step mode, print the highlighted source after each step",
)
@click.option(
    "--all-tokens",
    is_flag=True,
    help="In step mode, highlight every token lexed so far",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="impc")
def main(
    source_file: Path,
    output: Optional[Path],
    no_link: bool,
    executable: Optional[Path],
    step: bool,
    show_source: bool,
    all_tokens: bool,
    verbose: bool,
) -> None:
    """
    Compile an imp program to an x86-64 Linux executable.

    SOURCE_FILE is the imp source file to compile.

    \b
    Examples:
        impc hello.imp               # output.asm + a.out
        impc -S hello.imp            # output.asm only
        impc hello.imp -e hello      # link to ./hello
        impc --step hello.imp        # show each token
    """
    setup_logging(verbose)

    try:
        if step:
            source = source_file.read_text(encoding="utf-8")
            run_step_mode(source, str(source_file), show_source, all_tokens)
            return

        options = CompilerOptions()
        if output is not None:
            options.output_path = str(output)

        if verbose:
            click.echo(f"Compiling {source_file}...")

        result = compile_file(source_file, options=options)

        for warning in result.warnings:
            click.echo(warning, err=True)

        if verbose:
            click.echo(f"Tokenized: {result.token_count} tokens")
            click.echo(f"Procedures: {', '.join(result.procedures.names())}")
            click.echo(f"Wrote {len(result.assembly)} bytes to {result.output_path}")

        if no_link:
            click.echo(f"Compiled {source_file} -> {result.output_path}")
            return

        toolchain = ToolchainOptions.from_env()
        if executable is not None:
            toolchain.executable = str(executable)

        linked = assemble_and_link(result.output_path, toolchain)
        click.echo(f"Compilation successful. Executable '{linked}' created.")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
