"""
imp Recursive Descent Parser
============================

This module implements the parser for the imp language. It pulls tokens
from the lexer one at a time and fills a ProcedureTable with every
declared or called procedure and the call list of each declaration.

Grammar (EBNF)
--------------
program      ::= declaration* EOF
declaration  ::= IDENTIFIER '::' 'proc' '(' ')' '{' call* '}'
call         ::= IDENTIFIER '(' ')'

Error Policy
------------
The first grammar violation raises an ImpSyntaxError located at the
offending token. There is no error recovery.

Redeclaring a procedure replaces its call list: the last declaration of
a name wins.

Example Usage
-------------
>>> from impc.compiler.parser import parse_source
>>> table = parse_source('main :: proc () { helper() }')
>>> table.names()
['main', 'helper']
"""

from typing import Optional
import logging

from impc.errors import ImpSyntaxError, MissingTokenError
from impc.compiler.lexer import Lexer, Token, TokenType
from impc.compiler.procedures import Procedure, ProcedureTable

logger = logging.getLogger(__name__)


class Parser:
    """
    Recursive descent parser for imp.

    Attributes:
        lexer: Token source, advanced by the parser
        procedures: Table receiving declarations and call targets
    """

    def __init__(self, lexer: Lexer, procedures: Optional[ProcedureTable] = None):
        """
        Initialize the parser.

        Args:
            lexer: A lexer positioned at the start of the source
            procedures: Table to populate (a new one is created if None)
        """
        self.lexer = lexer
        self.procedures = procedures if procedures is not None else ProcedureTable()

    def parse(self) -> ProcedureTable:
        """
        Parse declarations until the end of input.

        Returns:
            The populated procedure table

        Raises:
            LexicalError: If the lexer rejects the input
            ImpSyntaxError: On the first grammar violation
        """
        self._advance()

        while not self._check(TokenType.EOF):
            self.parse_declaration()

        logger.debug(
            f"{self.lexer.filename}: parsed {len(self.procedures)} procedures "
            f"({len(self.procedures.undeclared())} undeclared)"
        )
        return self.procedures

    def parse_declaration(self) -> Procedure:
        """
        Parse one declaration:

            name :: proc () { callee() ... }
        """
        name_token = self._current()
        if name_token.type != TokenType.IDENTIFIER:
            raise self._error("Expected procedure name", name_token)

        procedure = self.procedures.find_or_create(name_token.lexeme)
        self._advance()

        self._expect(TokenType.DOUBLE_COLON, "::")
        self._expect(TokenType.PROC, "proc")
        self._expect(TokenType.LPAREN, "(")
        self._expect(TokenType.RPAREN, ")")
        self._expect(TokenType.LBRACE, "{")

        if procedure.is_declared:
            logger.debug(
                f"'{procedure.name}' redeclared at {name_token.location}, "
                f"replacing declaration at {procedure.declared_at}"
            )
        procedure.clear_calls()
        procedure.declared_at = name_token.location

        while not self._check(TokenType.RBRACE):
            self._parse_call(procedure)

        self._advance()
        return procedure

    def _parse_call(self, caller: Procedure) -> None:
        """Parse 'callee ( )' and append callee to the caller's call list."""
        token = self._current()
        if token.type != TokenType.IDENTIFIER:
            raise self._error("Expected procedure call", token)

        caller.add_call(self.procedures.find_or_create(token.lexeme))
        self._advance()

        self._expect(TokenType.LPAREN, "(")
        self._expect(TokenType.RPAREN, ")")

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _current(self) -> Token:
        return self.lexer.current

    def _advance(self) -> Token:
        return self.lexer.lex()

    def _check(self, token_type: TokenType) -> bool:
        return self.lexer.current.type == token_type

    def _expect(self, token_type: TokenType, text: str) -> Token:
        """
        Require the current token to be of the given type and consume it.

        Raises:
            MissingTokenError: If the current token is of another type
        """
        token = self._current()
        if token.type != token_type:
            raise MissingTokenError(
                text,
                found=token.describe(),
                location=token.location,
                source_line=self.lexer.cursor.line_text(token.row),
            )
        self._advance()
        return token

    def _error(self, message: str, token: Token) -> ImpSyntaxError:
        return ImpSyntaxError(
            message,
            token.location,
            hint=f"found {token.describe()}",
            source_line=self.lexer.cursor.line_text(token.row),
        )


def parse_source(source: str, filename: str = "<input>") -> ProcedureTable:
    """Parse a source text into a new procedure table."""
    return Parser(Lexer(source, filename)).parse()
