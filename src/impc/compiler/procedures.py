"""
Procedure Table
===============

The procedure table is the single structure shared by the parser and the
code generator. It holds one Procedure per distinct name, in the order the
names were first seen (as a declaration or as a call target). That order
is the emission order of the generated assembly.

A call to a procedure that has not been declared yet creates a placeholder
entry through ``find_or_create``; a later declaration of the same name
fills in the same entry. Call lists hold references to entries owned by
the table, never copies.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional
import logging

from impc.errors import SourceLocation

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Procedure:
    """
    A named procedure and the procedures it calls.

    Procedures compare by identity: two lookups of the same name in one
    table return the very same object.

    Attributes:
        name: Procedure name (unique within its table)
        calls: Callees in call order; duplicates are kept
        declared_at: Location of the most recent declaration, or None if the
            procedure has only ever been a call target
    """
    name: str
    calls: list["Procedure"] = field(default_factory=list)
    declared_at: Optional[SourceLocation] = None

    def __repr__(self) -> str:
        callees = ", ".join(callee.name for callee in self.calls)
        return f"Procedure({self.name!r}, calls=[{callees}])"

    @property
    def is_declared(self) -> bool:
        return self.declared_at is not None

    def add_call(self, callee: "Procedure") -> None:
        self.calls.append(callee)

    def clear_calls(self) -> None:
        self.calls.clear()

    def callee_names(self) -> list[str]:
        return [callee.name for callee in self.calls]


class ProcedureTable:
    """
    Owns every Procedure of one compilation, keyed by name.

    Iteration yields procedures in first-seen order.
    """

    def __init__(self):
        self._procedures: dict[str, Procedure] = {}

    def __len__(self) -> int:
        return len(self._procedures)

    def __iter__(self) -> Iterator[Procedure]:
        return iter(self._procedures.values())

    def __contains__(self, name: str) -> bool:
        return name in self._procedures

    def __repr__(self) -> str:
        return f"ProcedureTable({list(self._procedures)})"

    def find(self, name: str) -> Optional[Procedure]:
        """Return the procedure with this exact name, or None."""
        return self._procedures.get(name)

    def find_or_create(self, name: str) -> Procedure:
        """
        Return the procedure with this name, registering a new one with an
        empty call list if it does not exist yet.
        """
        procedure = self._procedures.get(name)
        if procedure is None:
            procedure = Procedure(name)
            self._procedures[name] = procedure
            logger.debug(f"New procedure '{name}' (#{len(self._procedures)})")
        return procedure

    def names(self) -> list[str]:
        return list(self._procedures)

    def undeclared(self) -> list[Procedure]:
        """Procedures that were called but never declared, in table order."""
        return [proc for proc in self if not proc.is_declared]
