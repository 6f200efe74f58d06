"""
imp Lexer (Tokenizer)
=====================

This module implements the lexer for the imp language. Unlike a batch
tokenizer, it is pull-based: each call to ``Lexer.lex()`` produces exactly
one token and makes it the current token. The parser drives it one token
at a time, and the step debugger can observe the lexer between calls.

Token Categories
----------------
- Keyword: proc
- Identifiers: procedure names (letter or '_' followed by letters,
  digits and '_')
- Punctuation: ::, (, ), {, }
- End of input

Once the end of input is reached, every further call to ``lex()`` keeps
returning an end-of-input token at the same position.

Example Usage
-------------
>>> from impc.compiler.lexer import Lexer
>>> lexer = Lexer('main :: proc () { }', "test.imp")
>>> for token in lexer.tokenize():
...     print(token)
Token(IDENTIFIER, 'main', 1:1)
Token(DOUBLE_COLON, '::', 1:6)
Token(PROC, 'proc', 1:9)
Token(LPAREN, '(', 1:14)
Token(RPAREN, ')', 1:15)
Token(LBRACE, '{', 1:17)
Token(RBRACE, '}', 1:19)
Token(EOF, 1:20)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import logging
import string

from impc.errors import SourceLocation, LexicalError, InvalidCharacterError
from impc.compiler.cursor import Cursor

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for the imp language."""

    IDENTIFIER = auto()     # Procedure names
    DOUBLE_COLON = auto()   # ::
    PROC = auto()           # proc
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    EOF = auto()            # End of input


KEYWORDS: dict[str, TokenType] = {
    "proc": TokenType.PROC,
}

PUNCTUATION: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}

# Matches C isspace() in the "C" locale
WHITESPACE = " \t\n\v\f\r"


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from imp source code.

    The lexeme is always a string of its own (empty for end of input), so
    a token stays valid however far the cursor moves afterwards.

    Attributes:
        type: The TokenType classification
        lexeme: The matched text
        row: Line where the token starts (1-indexed)
        col: Column where the token starts (1-indexed)
        start: Offset of the first character of the token
        end: Offset one past the last character of the token
        filename: Name of the source file
    """
    type: TokenType
    lexeme: str
    row: int
    col: int
    start: int
    end: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.lexeme:
            return f"Token({self.type.name}, {self.lexeme!r}, {self.row}:{self.col})"
        return f"Token({self.type.name}, {self.row}:{self.col})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.row, self.col)

    @property
    def span(self) -> tuple[int, int]:
        """The half-open offset range [start, end) the token covers."""
        return (self.start, self.end)

    def describe(self) -> str:
        """Human-readable description used in error hints."""
        if self.type == TokenType.EOF:
            return "end of input"
        return f"'{self.lexeme}'"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Produces imp tokens one at a time.

    Usage:
        lexer = Lexer(source_text, filename)
        token = lexer.lex()          # first token
        token = lexer.lex()          # next token
        tokens = list(lexer.tokenize())

    Attributes:
        cursor: Read position in the source
        current: The most recently produced token (None before the first lex)
        history: Every token produced so far, in order (observational only)
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters + "_"

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        record_history: bool = True,
    ):
        """
        Initialize the lexer with source code.

        Args:
            source: The imp source code to tokenize
            filename: Name of the source file (for error messages)
            record_history: Append every produced token to ``history``
        """
        self.source = source
        self.filename = filename
        self.cursor = Cursor(source)
        self.current: Optional[Token] = None
        self.history: list[Token] = []
        self._record_history = record_history

    def lex(self) -> Token:
        """
        Produce the next token and make it the current one.

        Returns:
            The new current token

        Raises:
            LexicalError: On a lone ':' or a character that cannot start
                a token
        """
        self._skip_whitespace()

        if self.cursor.is_at_end():
            token = self._make_token(
                TokenType.EOF, "", self.cursor.row, self.cursor.col, self.cursor.point
            )
        else:
            token = self._scan_token()

        self.current = token
        if self._record_history:
            self.history.append(token)
        return token

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens up to and including the end-of-input token.

        Raises:
            LexicalError: If invalid input is encountered
        """
        while True:
            token = self.lex()
            yield token
            if token.type == TokenType.EOF:
                logger.debug(f"{self.filename}: lexed {len(self.history)} tokens")
                return

    # =========================================================================
    # Scanning
    # =========================================================================

    def _skip_whitespace(self) -> None:
        while self.cursor.peek() in WHITESPACE:
            self.cursor.advance()

    def _scan_token(self) -> Token:
        start_row = self.cursor.row
        start_col = self.cursor.col
        start = self.cursor.point

        char = self.cursor.peek()

        if char in self.IDENT_START:
            return self._scan_identifier(start_row, start_col, start)

        if char == ":":
            self.cursor.advance()
            if self.cursor.peek() != ":":
                raise self._error("Expected ':' after ':'", hint="use '::' to declare a procedure")
            self.cursor.advance()
            return self._make_token(TokenType.DOUBLE_COLON, "::", start_row, start_col, start)

        if char in PUNCTUATION:
            self.cursor.advance()
            return self._make_token(PUNCTUATION[char], char, start_row, start_col, start)

        raise InvalidCharacterError(
            char,
            SourceLocation(self.filename, self.cursor.row, self.cursor.col),
            self.cursor.line_text(self.cursor.row),
        )

    def _scan_identifier(self, start_row: int, start_col: int, start: int) -> Token:
        """
        Scan an identifier or the 'proc' keyword.

        Keyword matching is case-sensitive: 'Proc' is an identifier.
        """
        chars = []
        while self.cursor.peek() in self.IDENT_CHARS:
            chars.append(self.cursor.advance())

        name = "".join(chars)
        token_type = KEYWORDS.get(name, TokenType.IDENTIFIER)
        return self._make_token(token_type, name, start_row, start_col, start)

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        lexeme: str,
        row: int,
        col: int,
        start: int,
    ) -> Token:
        return Token(
            type=token_type,
            lexeme=lexeme,
            row=row,
            col=col,
            start=start,
            end=self.cursor.point,
            filename=self.filename,
        )

    def _error(self, message: str, hint: Optional[str] = None) -> LexicalError:
        """Create a lexical error at the current cursor position."""
        location = SourceLocation(self.filename, self.cursor.row, self.cursor.col)
        return LexicalError(
            message,
            location,
            hint=hint,
            source_line=self.cursor.line_text(self.cursor.row),
        )


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """Tokenize a whole source text, end-of-input token included."""
    return list(Lexer(source, filename).tokenize())
