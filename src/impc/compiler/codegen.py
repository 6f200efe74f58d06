"""
x86-64 Code Generator for imp
=============================

This module turns a completed ProcedureTable into NASM assembly for a
freestanding x86-64 Linux executable (raw ``_start`` entry, no C runtime).

The generator is a structural transliteration of the call graph. Each
procedure becomes a labelled block with a frame-pointer prologue, one
``call`` per entry of its call list, and the matching epilogue. Calls are
emitted by callee name. A procedure that is only ever called, never
declared, is still in the table and gets a block with an empty body.

Generated Assembly Format
-------------------------
    global _start

    section .text

    main:
        push rbp
        mov rbp, rsp
        call helper
        mov rsp, rbp
        pop rbp
        ret

    _start:
        call main
        mov rax, 60
        xor rdi, rdi
        syscall

Procedures appear in table order (first-seen order), so the same source
always produces the same text.
"""

from pathlib import Path
from typing import Union
import logging

from impc.errors import OutputFileError
from impc.compiler.procedures import Procedure, ProcedureTable

logger = logging.getLogger(__name__)

ENTRY_LABEL = "_start"
MAIN_PROCEDURE = "main"

# Linux x86-64 exit(2)
SYS_EXIT = 60


class CodeGenerator:
    """
    Generates x86-64 assembly from a ProcedureTable.

    Usage:
        generator = CodeGenerator()
        asm = generator.generate(table)
        generator.write(table, "output.asm")
    """

    INDENT = "    "

    def __init__(self):
        self._output: list[str] = []

    def generate(self, procedures: ProcedureTable) -> str:
        """
        Generate the complete assembly text.

        Args:
            procedures: The table produced by the parser

        Returns:
            Assembly source, newline-terminated
        """
        self._output = []

        self._emit_header()
        for procedure in procedures:
            self._generate_procedure(procedure)
        self._emit_entry_point()

        logger.debug(f"Generated {len(procedures)} procedures, {len(self._output)} lines")
        return "\n".join(self._output) + "\n"

    def write(self, procedures: ProcedureTable, path: Union[str, Path]) -> Path:
        """
        Generate assembly and write it to a file.

        The text is generated before the file is opened, so nothing is
        written if generation fails.

        Raises:
            OutputFileError: If the file cannot be created or written
        """
        path = Path(path)
        assembly = self.generate(procedures)
        try:
            path.write_text(assembly, encoding="utf-8")
        except OSError as e:
            raise OutputFileError(str(path), e.strerror or str(e)) from e
        logger.debug(f"Wrote {len(assembly)} bytes to {path}")
        return path

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    def _emit(self, line: str = "") -> None:
        self._output.append(line)

    def _emit_label(self, label: str) -> None:
        self._emit(f"{label}:")

    def _emit_instruction(self, mnemonic: str, operand: str = "") -> None:
        if operand:
            self._emit(f"{self.INDENT}{mnemonic} {operand}")
        else:
            self._emit(f"{self.INDENT}{mnemonic}")

    # =========================================================================
    # Sections
    # =========================================================================

    def _emit_header(self) -> None:
        self._emit(f"global {ENTRY_LABEL}")
        self._emit()
        self._emit("section .text")
        self._emit()

    def _generate_procedure(self, procedure: Procedure) -> None:
        self._emit_label(procedure.name)

        # Prologue
        self._emit_instruction("push", "rbp")
        self._emit_instruction("mov", "rbp, rsp")

        for callee in procedure.calls:
            self._emit_instruction("call", callee.name)

        # Epilogue
        self._emit_instruction("mov", "rsp, rbp")
        self._emit_instruction("pop", "rbp")
        self._emit_instruction("ret")
        self._emit()

    def _emit_entry_point(self) -> None:
        self._emit_label(ENTRY_LABEL)
        self._emit_instruction("call", MAIN_PROCEDURE)
        self._emit_instruction("mov", f"rax, {SYS_EXIT}")
        self._emit_instruction("xor", "rdi, rdi")
        self._emit_instruction("syscall")
