"""
imp Compiler Main Module
========================

This module provides the main compiler interface for imp. It owns all the
state of one compilation and runs the pipeline:

    Source → Lex → Parse → Procedure Table → Generate → Assembly

Usage
-----
Command line:
    $ impc hello.imp -o hello.asm

Programmatic:
    >>> from impc.compiler import compile_source
    >>> asm = compile_source('main :: proc () { }')

Error Handling
--------------
The first lexical, syntactic or output error stops the compilation and is
raised as a CompileError subclass. Calls to procedures that are never
declared are not errors; they are reported as warnings in the result and
compiled as procedures with an empty body.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
import logging

from impc.compiler.codegen import CodeGenerator
from impc.compiler.cursor import Cursor
from impc.compiler.lexer import Lexer, Token
from impc.compiler.parser import Parser
from impc.compiler.procedures import ProcedureTable

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "output.asm"


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        output_path: Where compile_file() writes the assembly
        record_history: Keep every lexed token in the lexer history
        report_dangling_calls: Add a warning for each procedure that is
            called but never declared
    """
    output_path: str = DEFAULT_OUTPUT
    record_history: bool = True
    report_dangling_calls: bool = True


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        success: True if compilation succeeded
        assembly: Generated assembly code
        procedures: The populated procedure table
        token_count: Number of tokens lexed (when history is recorded)
        output_path: File the assembly was written to, if any
        warnings: Warning messages
    """
    filename: str = ""
    success: bool = False
    assembly: str = ""
    procedures: Optional[ProcedureTable] = None
    token_count: int = 0
    output_path: Optional[Path] = None
    warnings: list[str] = field(default_factory=list)


class Compiler:
    """
    Context for compiling one imp source text.

    Holds the lexer (and through it the cursor, current token and token
    history) and the procedure table. A Compiler is used for a single
    source; nothing is shared between instances.

    Example:
        compiler = Compiler(source, "hello.imp")
        result = compiler.compile()
        print(result.assembly)
    """

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        options: Optional[CompilerOptions] = None,
    ):
        self.options = options or CompilerOptions()
        self.filename = filename
        self.lexer = Lexer(source, filename, record_history=self.options.record_history)
        self.procedures = ProcedureTable()

    @property
    def cursor(self) -> Cursor:
        return self.lexer.cursor

    @property
    def current_token(self) -> Optional[Token]:
        return self.lexer.current

    @property
    def history(self) -> list[Token]:
        return self.lexer.history

    def lex(self) -> Token:
        """Advance the lexer by one token (used by the step debugger)."""
        return self.lexer.lex()

    def parse(self) -> ProcedureTable:
        return Parser(self.lexer, self.procedures).parse()

    def generate_code(self) -> str:
        return CodeGenerator().generate(self.procedures)

    def compile(self) -> CompilerResult:
        """
        Parse the source and generate assembly.

        Raises:
            CompileError: On the first lexical or syntactic error
        """
        self.parse()
        assembly = self.generate_code()

        result = CompilerResult(
            filename=self.filename,
            success=True,
            assembly=assembly,
            procedures=self.procedures,
            token_count=len(self.history),
        )
        if self.options.report_dangling_calls:
            result.warnings = self._dangling_call_warnings()
        return result

    def _dangling_call_warnings(self) -> list[str]:
        warnings = []
        for procedure in self.procedures.undeclared():
            message = f"{self.filename}: warning: call to undeclared procedure '{procedure.name}'"
            logger.debug(message)
            warnings.append(message)
        return warnings


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(source: str, filename: str = "<input>") -> str:
    """
    Compile imp source code to x86-64 assembly.

    Args:
        source: imp source code
        filename: Source filename for error messages

    Returns:
        Generated assembly text

    Raises:
        CompileError: If compilation fails

    Example:
        >>> asm = compile_source('main :: proc () { }')
    """
    return Compiler(source, filename).compile().assembly


def compile_file(
    filepath: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    options: Optional[CompilerOptions] = None,
) -> CompilerResult:
    """
    Compile an imp source file and write the assembly.

    The output file is only created once the whole source has compiled,
    so a failed compilation leaves no artifact behind.

    Args:
        filepath: Path to the imp source file
        output_path: Where to write the assembly (default: options.output_path)
        options: Compiler configuration

    Raises:
        CompileError: If compilation fails or the output cannot be written
        FileNotFoundError: If the source file does not exist
    """
    options = options or CompilerOptions()
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Source file not found: {filepath}")

    source = path.read_text(encoding="utf-8")
    compiler = Compiler(source, str(path), options)
    result = compiler.compile()

    result.output_path = CodeGenerator().write(
        compiler.procedures, output_path or options.output_path
    )
    return result
