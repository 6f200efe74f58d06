"""
Assembler and Linker Handoff
============================

Turns the generated assembly into a freestanding x86-64 executable by
running the external NASM assembler and the ``ld`` linker:

    output.asm ──nasm -f elf64──▶ output.o ──ld -o a.out──▶ a.out

The tools are located on PATH unless overridden through ToolchainOptions
or the environment:

    IMPC_NASM           assembler executable (default: nasm)
    IMPC_LD             linker executable (default: ld)
    IMPC_OBJECT_FORMAT  NASM output format (default: elf64)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
import logging
import os
import subprocess

from impc.errors import ToolchainError

logger = logging.getLogger(__name__)


@dataclass
class ToolchainOptions:
    """
    External toolchain configuration.

    Attributes:
        assembler: Assembler executable
        linker: Linker executable
        object_format: Assembler output format
        executable: Path of the linked program
        timeout: Seconds allowed for each tool
    """
    assembler: str = "nasm"
    linker: str = "ld"
    object_format: str = "elf64"
    executable: str = "a.out"
    timeout: float = 60.0

    @classmethod
    def from_env(cls) -> "ToolchainOptions":
        """Create ToolchainOptions with environment variable overrides."""
        options = cls()

        if assembler := os.environ.get("IMPC_NASM"):
            options.assembler = assembler
        if linker := os.environ.get("IMPC_LD"):
            options.linker = linker
        if object_format := os.environ.get("IMPC_OBJECT_FORMAT"):
            options.object_format = object_format

        return options


def run_tool(command: list[str], timeout: float) -> subprocess.CompletedProcess:
    """
    Run one toolchain command.

    Raises:
        ToolchainError: If the tool is missing, times out or exits non-zero
    """
    logger.debug(f"Running: {' '.join(command)}")
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise ToolchainError(f"{command[0]} timed out after {timeout}s", command=command) from e
    except FileNotFoundError as e:
        raise ToolchainError(f"{command[0]} not found - is it installed?", command=command) from e

    if result.returncode != 0:
        raise ToolchainError(
            f"{command[0]} failed",
            command=command,
            return_code=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result


def assemble_and_link(
    asm_path: Union[str, Path],
    options: Optional[ToolchainOptions] = None,
) -> Path:
    """
    Assemble and link a generated assembly file.

    Args:
        asm_path: Path to the .asm file
        options: Toolchain configuration (environment defaults if None)

    Returns:
        Path to the linked executable

    Raises:
        ToolchainError: If either step fails
    """
    options = options or ToolchainOptions.from_env()
    asm_path = Path(asm_path)
    object_path = asm_path.with_suffix(".o")
    executable = Path(options.executable)

    run_tool(
        [options.assembler, "-f", options.object_format, str(asm_path)],
        options.timeout,
    )
    run_tool(
        [options.linker, "-o", str(executable), str(object_path)],
        options.timeout,
    )

    logger.debug(f"Linked {executable}")
    return executable
