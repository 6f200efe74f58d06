"""
imp Compiler
============

This package implements an ahead-of-time compiler for imp, a tiny
procedural language whose only constructs are named procedures and calls
between them:

    helper :: proc () { }
    main :: proc () { helper() helper() }

Pipeline
--------
    Source → Lexer → Parser → Procedure Table → Code Generator → Assembly

The generated NASM assembly targets x86-64 Linux with a raw ``_start``
entry point that calls ``main`` and exits with status 0. It can be turned
into an executable with ``impc.toolchain.assemble_and_link``.

Usage
-----
>>> from impc.compiler import compile_source
>>> asm_output = compile_source('main :: proc () { }')

Language Subset
---------------
Supported:
- Procedure declarations: ``name :: proc () { ... }``
- Calls without arguments: ``name()``
- Forward references: a procedure may be called before it is declared

Not supported:
- Expressions, variables, parameters, return values
- Control flow
- Comments
"""

from impc.compiler.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_source,
    compile_file,
)
from impc.compiler.cursor import Cursor
from impc.compiler.lexer import Lexer, Token, TokenType, tokenize
from impc.compiler.procedures import Procedure, ProcedureTable
from impc.compiler.parser import Parser, parse_source
from impc.compiler.codegen import CodeGenerator
from impc.compiler.stepper import LexStepper, StepperState, StepAction, StepSnapshot

__all__ = [
    # Main API
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "compile_file",
    # Lexer
    "Cursor",
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Parser
    "Procedure",
    "ProcedureTable",
    "Parser",
    "parse_source",
    # Code Generator
    "CodeGenerator",
    # Step debugger
    "LexStepper",
    "StepperState",
    "StepAction",
    "StepSnapshot",
]
