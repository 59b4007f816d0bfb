"""Token types, token values, and position helpers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Language-independent token classes.

    Values are short stable codes that renderers use as style keys.
    """

    PLAIN = "text"

    # Strings
    STRING = "s0"
    STRING_ALT = "s1"
    TEMPLATE = "s2"
    INTERPOLATION = "s3"  # ${...} inside a template
    ESCAPE = "s4"  # \n, \x41, é inside a string

    # Keywords
    KEYWORD = "k0"
    KEYWORD_CONTROL = "k1"  # if, while, return
    KEYWORD_TYPE = "k2"  # declarations and storage modifiers
    KEYWORD_OPERATOR = "k3"  # new, typeof, delete
    KEYWORD_SPECIAL = "k9"  # this, super, global objects

    # Literal expressions
    BOOLEAN = "e0"
    NULL = "e1"
    REGEX = "e2"

    # Calls and members
    FUNCTION_CALL = "m0"
    METHOD_CALL = "m1"
    PROPERTY = "m3"

    # Numbers
    NUMBER = "n0"  # floats
    NUMBER_INT = "n1"
    NUMBER_HEX = "n2"
    NUMBER_BIN = "n3"
    NUMBER_OCT = "n4"

    OPERATOR = "o0"
    BRACKET = "g1"
    COMMENT = "c0"
    COMMENT_BLOCK = "c1"


@dataclass(frozen=True, slots=True)
class Token:
    """A classified piece of source text."""

    text: str
    type: TokenType


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


def join_text(tokens: Iterable[Token]) -> str:
    """Concatenate token texts; equals the tokenized source."""
    return "".join(t.text for t in tokens)


def spans(tokens: Iterable[Token]) -> Iterator[tuple[Token, Span]]:
    """Yield each token with the source span it covers.

    Positions are derived from the running text, so the stream must start
    at offset 0 of the source it came from.
    """
    line, column, offset = 1, 1, 0
    for tok in tokens:
        start = Position(line, column, offset)
        for ch in tok.text:
            if ch == "\n":
                line += 1
                column = 1
            else:
                column += 1
        offset += len(tok.text)
        yield tok, Span(start, Position(line, column, offset))
