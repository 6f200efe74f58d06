"""
Tests for the impc command
==========================

Runs the click command in an isolated directory. The assembler/linker step
is patched out so the tests do not need nasm or ld installed.
"""

from pathlib import Path
from unittest import mock

from click.testing import CliRunner

from impc.cli.errors import ExitCode
from impc.cli.impc import main
from impc.errors import ToolchainError

HELLO = "main :: proc () { greet() }\ngreet :: proc () { }\n"


def run(args, source=HELLO, filename="hello.imp"):
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path(filename).write_text(source)
        result = runner.invoke(main, args + [filename])
        produced = {p.name for p in Path(".").iterdir()}
    return result, produced


class TestCompileMode:
    """Compiling to assembly and handing off to the toolchain."""

    def test_no_link_writes_default_output(self):
        result, produced = run(["-S"])
        assert result.exit_code == ExitCode.SUCCESS
        assert "output.asm" in produced
        assert "Compiled hello.imp -> output.asm" in result.output

    def test_custom_output(self):
        result, produced = run(["-S", "-o", "hello.asm"])
        assert result.exit_code == ExitCode.SUCCESS
        assert "hello.asm" in produced
        assert "output.asm" not in produced

    def test_links_by_default(self):
        with mock.patch("impc.cli.impc.assemble_and_link", return_value=Path("a.out")) as link:
            result, _ = run([])
        assert result.exit_code == ExitCode.SUCCESS
        assert "Compilation successful. Executable 'a.out' created." in result.output
        asm_path, options = link.call_args.args
        assert asm_path == Path("output.asm")
        assert options.executable == "a.out"

    def test_executable_option(self):
        with mock.patch("impc.cli.impc.assemble_and_link", return_value=Path("hello")) as link:
            result, _ = run(["-e", "hello"])
        assert result.exit_code == ExitCode.SUCCESS
        assert link.call_args.args[1].executable == "hello"

    def test_toolchain_failure(self):
        error = ToolchainError("ld failed", command=["ld"], return_code=1)
        with mock.patch("impc.cli.impc.assemble_and_link", side_effect=error):
            result, _ = run([])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Error: Compilation failed" in result.output

    def test_syntax_error(self):
        result, produced = run(["-S"], source="foo :: (")
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "hello.imp:1:8: error: Expected 'proc'" in result.output
        assert "output.asm" not in produced

    def test_dangling_call_warning(self):
        result, _ = run(["-S"], source="main :: proc () { ghost() }")
        assert result.exit_code == ExitCode.SUCCESS
        assert "warning: call to undeclared procedure 'ghost'" in result.output

    def test_verbose(self):
        result, _ = run(["-S", "-v"])
        assert "Procedures: main, greet" in result.output

    def test_missing_source(self):
        result = CliRunner().invoke(main, ["does-not-exist.imp"])
        assert result.exit_code == 2


class TestStepMode:
    """--step prints one status line per token."""

    def test_step_output(self):
        result, produced = run(["--step"], source="main :: proc")
        assert result.exit_code == ExitCode.SUCCESS
        lines = result.output.splitlines()
        assert lines == [
            "Step: 0, Token: main, Line: 1, Col: 5",
            "Step: 1, Token: ::, Line: 1, Col: 8",
            "Step: 2, Token: proc, Line: 1, Col: 13",
            "Step: 3, Token: , Line: 1, Col: 13",
            "Lexical analysis complete",
        ]
        assert "output.asm" not in produced

    def test_step_only_lexes(self):
        # Not a valid program, but every token is lexically fine
        result, _ = run(["--step"], source=") proc (")
        assert result.exit_code == ExitCode.SUCCESS
        assert result.output.endswith("Lexical analysis complete\n")

    def test_step_lexical_error(self):
        result, _ = run(["--step"], source="main : x")
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Expected ':' after ':'" in result.output

    def test_show_source(self):
        result, _ = run(["--step", "--show-source", "--all-tokens"], source="a")
        assert result.exit_code == ExitCode.SUCCESS
        assert "a" in result.output
