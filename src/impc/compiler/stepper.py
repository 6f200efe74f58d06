"""
Lexer Step Debugger
===================

Drives a lexer one token at a time and exposes, after each step, what a
viewer needs to show: the current token, the cursor position and the
offset span of every token for highlighting.

The viewer never writes back into the lexer. Its own settings (single
token highlight vs. all tokens) live in an immutable StepperState that is
passed into ``update`` and returned as a new value.

Example:
    stepper = LexStepper('main :: proc () { }')
    state = StepperState()
    while not stepper.finished:
        state = stepper.update(state, StepAction.STEP)
        print(stepper.snapshot(state).status_line())
"""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional

import click

from impc.compiler.lexer import Lexer, Token, TokenType


# =============================================================================
# Faces
# =============================================================================

class Face(Enum):
    """Highlight roles, one per token category."""

    TEXT = "text"
    VARIABLE = "variable"
    FUNCTION = "function"
    KEYWORD = "keyword"
    PREPROCESSOR = "preprocessor"
    TYPE = "type"


TOKEN_FACES: dict[TokenType, Face] = {
    TokenType.IDENTIFIER: Face.VARIABLE,
    TokenType.DOUBLE_COLON: Face.FUNCTION,
    TokenType.PROC: Face.KEYWORD,
    TokenType.LPAREN: Face.PREPROCESSOR,
    TokenType.RPAREN: Face.PREPROCESSOR,
    TokenType.LBRACE: Face.TYPE,
    TokenType.RBRACE: Face.TYPE,
}

# Terminal colours used by render_source()
FACE_STYLES: dict[Face, dict] = {
    Face.TEXT: {},
    Face.VARIABLE: {"fg": "cyan"},
    Face.FUNCTION: {"fg": "yellow"},
    Face.KEYWORD: {"fg": "magenta", "bold": True},
    Face.PREPROCESSOR: {"fg": "green"},
    Face.TYPE: {"fg": "blue"},
}


def face_for(token_type: TokenType) -> Face:
    return TOKEN_FACES.get(token_type, Face.TEXT)


# =============================================================================
# Viewer State
# =============================================================================

class StepAction(Enum):
    """Inputs the viewer can send to the stepper."""

    STEP = auto()
    TOGGLE_HIGHLIGHT = auto()


@dataclass(frozen=True)
class StepperState:
    """
    Viewer-side state.

    Attributes:
        single_highlight: Highlight only the current token (False: every
            token lexed so far)
        step_count: Number of lex steps taken after the first token
    """
    single_highlight: bool = True
    step_count: int = 0


@dataclass(frozen=True)
class StepSnapshot:
    """Read-only view of the lexer after a step."""
    step: int
    token_type: TokenType
    lexeme: str
    row: int
    col: int
    span: tuple[int, int]
    finished: bool

    def status_line(self) -> str:
        return f"Step: {self.step}, Token: {self.lexeme}, Line: {self.row}, Col: {self.col}"


# =============================================================================
# Stepper
# =============================================================================

class LexStepper:
    """
    Lexes a source one token per step.

    The first token is lexed on construction. Stepping once the current
    token is end-of-input does nothing.
    """

    def __init__(self, source: str, filename: str = "<input>"):
        self._lexer = Lexer(source, filename)
        self._lexer.lex()

    @property
    def source(self) -> str:
        return self._lexer.source

    @property
    def current(self) -> Token:
        return self._lexer.current

    @property
    def history(self) -> tuple[Token, ...]:
        return tuple(self._lexer.history)

    @property
    def cursor_point(self) -> int:
        return self._lexer.cursor.point

    @property
    def finished(self) -> bool:
        return self._lexer.current.type == TokenType.EOF

    def update(self, state: StepperState, action: StepAction) -> StepperState:
        """
        Apply a viewer action and return the new viewer state.

        Raises:
            LexicalError: If the next token cannot be lexed
        """
        if action == StepAction.TOGGLE_HIGHLIGHT:
            return replace(state, single_highlight=not state.single_highlight)

        if self.finished:
            return state
        self._lexer.lex()
        return replace(state, step_count=state.step_count + 1)

    def snapshot(self, state: StepperState) -> StepSnapshot:
        token = self._lexer.current
        cursor = self._lexer.cursor
        return StepSnapshot(
            step=state.step_count,
            token_type=token.type,
            lexeme=token.lexeme,
            row=cursor.row,
            col=cursor.col,
            span=token.span,
            finished=self.finished,
        )

    def face_at(self, offset: int, state: StepperState) -> Optional[Face]:
        """Face of the token covering a source offset, if highlighted."""
        if state.single_highlight:
            tokens = (self._lexer.current,)
        else:
            tokens = self._lexer.history
        for token in tokens:
            if token.start <= offset < token.end:
                return face_for(token.type)
        return None


def render_source(stepper: LexStepper, state: StepperState) -> str:
    """
    Render the source with highlighted tokens for a terminal.

    The character under the cursor is shown in reverse video.
    """
    parts = []
    for offset, char in enumerate(stepper.source):
        if char == "\n":
            parts.append(char)
            continue
        if offset == stepper.cursor_point:
            parts.append(click.style(char, reverse=True))
            continue
        face = stepper.face_at(offset, state)
        style = FACE_STYLES[face] if face else {}
        parts.append(click.style(char, **style) if style else char)
    return "".join(parts)
