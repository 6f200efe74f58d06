"""
impc Error Hierarchy
====================

This module defines the exception hierarchy for the impc toolchain.
All exceptions inherit from ImpError, allowing callers to catch every
toolchain-related error with a single except clause if desired.

Exception Hierarchy
-------------------
ImpError (base)
├── CompileError (carries kind + location)
│   ├── LexicalError - malformed '::' sequence
│   │   └── InvalidCharacterError - character outside the language
│   ├── ImpSyntaxError - grammar rule mismatch
│   │   └── MissingTokenError - a required token was not found
│   └── OutputFileError - the assembly artifact could not be written
└── ToolchainError - external assembler/linker failed

Compilation stops at the first error. Nothing in the compiler core exits
the process: errors propagate up to the caller (the CLI, a test, or an
embedding tool) which decides what to do with them.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class ImpError(Exception):
    """
    Base exception for all impc errors.

        try:
            compile_source(text)
        except ImpError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


class ErrorKind(Enum):
    """Which stage of compilation an error belongs to."""

    LEXICAL = "lexical"
    SYNTACTIC = "syntactic"
    RESOURCE = "resource"


# =============================================================================
# Compiler Exceptions
# =============================================================================

class CompileError(ImpError):
    """
    Base exception for errors raised while compiling a source text.

    Every compile error has a kind, a message, and (except for some
    resource errors) a source location. The formatted message includes
    the offending source line with a caret under the column.

    Attributes:
        kind: ErrorKind of the failing stage
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text of the offending line (optional)
    """

    kind = ErrorKind.SYNTACTIC

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def row(self) -> Optional[int]:
        return self.location.line if self.location else None

    @property
    def col(self) -> Optional[int]:
        return self.location.column if self.location else None

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            hello.imp:1:8: error: Expected 'proc'
                foo :: (
                       ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexicalError(CompileError):
    """
    Error while splitting the source into tokens.

    Raised when a ':' is not immediately followed by a second ':'.
    """

    kind = ErrorKind.LEXICAL


class InvalidCharacterError(LexicalError):
    """A character that cannot start any token."""

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            "Unexpected character",
            location=location,
            hint=f"'{char}' (0x{ord(char):02X}) cannot start a token",
            source_line=source_line,
        )


class ImpSyntaxError(CompileError):
    """
    Grammar violation found by the parser.

    Examples:
        - a declaration that does not start with a procedure name
        - a call that is not an identifier
        - any of the fixed tokens of a declaration missing
    """

    kind = ErrorKind.SYNTACTIC


class MissingTokenError(ImpSyntaxError):
    """
    Required token is missing.

    The message names the expected token exactly, e.g. "Expected '::'".
    """

    def __init__(
        self,
        expected: str,
        found: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found

        hint = None
        if found is not None:
            hint = f"found {found}"

        super().__init__(
            f"Expected '{expected}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class OutputFileError(CompileError):
    """The assembly output could not be created or written."""

    kind = ErrorKind.RESOURCE

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        self.reason = reason
        super().__init__(
            "Could not create output file",
            hint=f"{path}: {reason}" if reason else path,
        )


# =============================================================================
# Toolchain Exceptions
# =============================================================================

class ToolchainError(ImpError):
    """
    The external assembler or linker failed.

    Attributes:
        message: What went wrong
        command: The command line that was run
        return_code: Process exit status (None if it never ran)
        stdout: Captured standard output
        stderr: Captured standard error
    """

    def __init__(
        self,
        message: str,
        command: Optional[list[str]] = None,
        return_code: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        self.message = message
        self.command = command or []
        self.return_code = return_code
        self.stdout = stdout
        self.stderr = stderr

        parts = [message]
        if self.command:
            parts.append(f"command: {' '.join(self.command)}")
        if return_code is not None:
            parts.append(f"exit status: {return_code}")
        if stderr.strip():
            parts.append(stderr.rstrip())
        super().__init__("\n".join(parts))
