"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from microlex.engine import tokenize
from microlex.languages import get_language
from microlex.rules import RuleTable
from microlex.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source with a named language or a table."""

    def _lex(
        source: str, language: str | RuleTable = "generic", validate: bool = True
    ) -> list[Token]:
        table = get_language(language) if isinstance(language, str) else language
        return tokenize(source, table, validate=validate)

    return _lex


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_texts(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token texts match the expected list."""
    actual = [t.text for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def type_of(tokens: list[Token], text: str) -> TokenType:
    """Return the type of the first token whose text is exactly ``text``."""
    for t in tokens:
        if t.text == text:
            return t.type
    raise AssertionError(f"no token {text!r} in {[t.text for t in tokens]}")


def find_tokens(tokens: list[Token], tt: TokenType) -> list[Token]:
    """Return all tokens of the given type."""
    return [t for t in tokens if t.type == tt]
