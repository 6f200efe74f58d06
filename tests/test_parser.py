"""
Parser and Procedure Table Tests
================================

Covers declarations, forward references, redeclaration, call lists and
every syntax error the parser can raise.
"""

import pytest
from impc.compiler.lexer import Lexer
from impc.compiler.parser import Parser, parse_source
from impc.compiler.procedures import Procedure, ProcedureTable
from impc.errors import (
    ErrorKind,
    ImpSyntaxError,
    LexicalError,
    MissingTokenError,
)


# =============================================================================
# Procedure Table Tests
# =============================================================================

class TestProcedureTable:
    """find / find_or_create semantics."""

    def test_find_missing(self):
        assert ProcedureTable().find("main") is None

    def test_find_or_create_registers(self):
        table = ProcedureTable()
        proc = table.find_or_create("main")
        assert proc.name == "main"
        assert proc.calls == []
        assert table.find("main") is proc
        assert "main" in table
        assert len(table) == 1

    def test_same_name_same_entry(self):
        table = ProcedureTable()
        assert table.find_or_create("a") is table.find_or_create("a")
        assert len(table) == 1

    def test_first_seen_order(self):
        table = ProcedureTable()
        for name in ["c", "a", "b", "a"]:
            table.find_or_create(name)
        assert table.names() == ["c", "a", "b"]
        assert [p.name for p in table] == ["c", "a", "b"]

    def test_procedures_compare_by_identity(self):
        assert Procedure("x") != Procedure("x")

    def test_repr_of_recursive_procedure(self):
        proc = Procedure("loop")
        proc.add_call(proc)
        assert repr(proc) == "Procedure('loop', calls=[loop])"


# =============================================================================
# Declaration Tests
# =============================================================================

class TestDeclarations:
    """Well-formed programs."""

    def test_empty_program(self):
        assert len(parse_source("")) == 0

    def test_single_empty_procedure(self):
        table = parse_source("main :: proc () { }")
        assert table.names() == ["main"]
        assert table.find("main").calls == []
        assert table.find("main").is_declared

    def test_forward_reference_creates_placeholder(self):
        table = parse_source("main :: proc () { helper() }")
        assert table.names() == ["main", "helper"]
        main = table.find("main")
        helper = table.find("helper")
        assert main.calls == [helper]
        assert main.calls[0] is helper
        assert helper.calls == []
        assert not helper.is_declared

    def test_later_declaration_fills_placeholder(self):
        table = parse_source(
            "main :: proc () { helper() }\n"
            "helper :: proc () { leaf() }\n"
            "leaf :: proc () { }\n"
        )
        main = table.find("main")
        helper = table.find("helper")
        assert main.calls[0] is helper
        assert helper.callee_names() == ["leaf"]
        assert table.undeclared() == []
        assert table.names() == ["main", "helper", "leaf"]

    def test_duplicate_calls_preserved_in_order(self):
        table = parse_source("main :: proc () { a() b() a() a() }")
        assert table.find("main").callee_names() == ["a", "b", "a", "a"]
        assert table.names() == ["main", "a", "b"]

    def test_recursive_call(self):
        table = parse_source("main :: proc () { main() }")
        main = table.find("main")
        assert main.calls == [main]
        assert len(table) == 1

    def test_redeclaration_replaces_calls(self):
        table = parse_source(
            "main :: proc () { a() b() }\n"
            "main :: proc () { c() }\n"
        )
        main = table.find("main")
        assert main.callee_names() == ["c"]
        # Procedures discovered by the first body stay in the table
        assert table.names() == ["main", "a", "b", "c"]
        assert main.declared_at.line == 2

    def test_redeclaration_with_empty_body(self):
        table = parse_source("f :: proc () { g() } f :: proc () { }")
        assert table.find("f").calls == []

    def test_declaration_spanning_lines(self):
        source = "main\n::\nproc\n(\n)\n{\n  a\n  (\n  )\n}\n"
        assert parse_source(source).find("main").callee_names() == ["a"]

    def test_parser_fills_given_table(self):
        table = ProcedureTable()
        result = Parser(Lexer("main :: proc () { }"), table).parse()
        assert result is table

    def test_parse_declaration_returns_procedure(self):
        lexer = Lexer("main :: proc () { x() }")
        parser = Parser(lexer)
        lexer.lex()
        proc = parser.parse_declaration()
        assert proc.name == "main"
        assert proc.callee_names() == ["x"]


# =============================================================================
# Syntax Error Tests
# =============================================================================

class TestSyntaxErrors:
    """Every grammar violation is fatal and located at the offending token."""

    def test_missing_proc_keyword(self):
        with pytest.raises(MissingTokenError, match="Expected 'proc'") as exc:
            parse_source("foo :: (")
        assert exc.value.kind == ErrorKind.SYNTACTIC
        assert (exc.value.row, exc.value.col) == (1, 8)

    @pytest.mark.parametrize(
        "source, message",
        [
            ("main proc () { }", "Expected '::'"),
            ("main :: () { }", "Expected 'proc'"),
            ("main :: proc ) { }", "Expected '\\('"),
            ("main :: proc ( { }", "Expected '\\)'"),
            ("main :: proc () }", "Expected '\\{'"),
            ("main :: proc () { a ) }", "Expected '\\('"),
            ("main :: proc () { a ( }", "Expected '\\)'"),
        ],
    )
    def test_missing_tokens(self, source, message):
        with pytest.raises(MissingTokenError, match=message):
            parse_source(source)

    def test_missing_procedure_name(self):
        with pytest.raises(ImpSyntaxError, match="Expected procedure name") as exc:
            parse_source(":: proc () { }")
        assert (exc.value.row, exc.value.col) == (1, 1)

    def test_keyword_as_procedure_name(self):
        with pytest.raises(ImpSyntaxError, match="Expected procedure name"):
            parse_source("proc :: proc () { }")

    def test_non_identifier_call(self):
        with pytest.raises(ImpSyntaxError, match="Expected procedure call") as exc:
            parse_source("main :: proc () { ( }")
        assert (exc.value.row, exc.value.col) == (1, 19)

    def test_unterminated_body(self):
        with pytest.raises(ImpSyntaxError, match="Expected procedure call"):
            parse_source("main :: proc () {")

    def test_truncated_declaration(self):
        with pytest.raises(MissingTokenError) as exc:
            parse_source("main")
        assert exc.value.expected == "::"
        assert exc.value.found == "end of input"

    def test_error_reports_source_line(self):
        with pytest.raises(MissingTokenError) as exc:
            parse_source("a :: proc () { }\nb :: proc ( { }", "prog.imp")
        assert exc.value.source_line == "b :: proc ( { }"
        assert str(exc.value.location) == "prog.imp:2:13"

    def test_lexical_error_propagates(self):
        with pytest.raises(LexicalError):
            parse_source("main :: proc () { a() : }")

    def test_first_error_wins(self):
        with pytest.raises(MissingTokenError, match="Expected '::'"):
            parse_source("a proc () { }\nb :: () { }")
