"""
impc - Compiler for the imp Procedure Language
==============================================

This package provides a small ahead-of-time compiler that translates imp
source (named procedures calling each other) into x86-64 NASM assembly,
plus the glue to assemble and link the result into a freestanding Linux
executable.

Main Components
---------------
- **compiler**: lexer, parser, procedure table and code generator
- **toolchain**: hands the assembly to nasm and ld
- **cli**: the ``impc`` command

Quick Start
-----------
Compile a program:
    >>> from impc import compile_source
    >>> asm = compile_source("main :: proc () { }")

Or use the command-line tool:
    $ impc hello.imp            # writes output.asm and links a.out
    $ impc -S hello.imp         # assembly only
    $ impc --step hello.imp     # step through the lexer
"""

__version__ = "1.0.0"

from impc.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_source,
    compile_file,
)
from impc.errors import (
    ImpError,
    CompileError,
    ErrorKind,
    SourceLocation,
    LexicalError,
    InvalidCharacterError,
    ImpSyntaxError,
    MissingTokenError,
    OutputFileError,
    ToolchainError,
)
from impc.toolchain import ToolchainOptions, assemble_and_link

__all__ = [
    # Version info
    "__version__",
    # Compiler
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "compile_file",
    # Toolchain
    "ToolchainOptions",
    "assemble_and_link",
    # Exception hierarchy
    "ImpError",
    "CompileError",
    "ErrorKind",
    "SourceLocation",
    "LexicalError",
    "InvalidCharacterError",
    "ImpSyntaxError",
    "MissingTokenError",
    "OutputFileError",
    "ToolchainError",
]
