"""Property-based tests for tokenizer invariants using Hypothesis.

These hold for any input and every shipped language: the token stream
covers the source exactly, no token is empty, and unclaimed text is
merged into single PLAIN runs.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from microlex.engine import tokenize
from microlex.languages import available_languages, get_language
from microlex.rules import RuleTable
from microlex.tokens import Token, TokenType, join_text

LANGUAGES = available_languages()

# Characters that drive the shipped rules: quotes, escapes, comment and
# regex delimiters, brackets, digits and keyword letters
syntax_text = st.text(
    alphabet=st.sampled_from(list("'\"`\\/*#${}()[].,;=+-<>!&|? \n\t0x1b9eifnrtul_")),
    max_size=200,
)


class TestCoverage:
    @pytest.mark.parametrize("language", LANGUAGES)
    @given(source=st.text(max_size=500))
    @settings(max_examples=100)
    def test_round_trip_any_text(self, language: str, source: str) -> None:
        tokens = tokenize(source, get_language(language), validate=True)
        assert join_text(tokens) == source

    @pytest.mark.parametrize("language", LANGUAGES)
    @given(source=syntax_text)
    @settings(max_examples=200)
    def test_round_trip_syntax_heavy_text(self, language: str, source: str) -> None:
        tokens = tokenize(source, get_language(language), validate=True)
        assert join_text(tokens) == source

    @pytest.mark.parametrize("language", LANGUAGES)
    @given(source=syntax_text)
    @settings(max_examples=200)
    def test_no_empty_tokens(self, language: str, source: str) -> None:
        tokens = tokenize(source, get_language(language))
        assert all(t.text for t in tokens)

    @pytest.mark.parametrize("language", LANGUAGES)
    @given(source=syntax_text)
    @settings(max_examples=200)
    def test_plain_runs_are_maximal(self, language: str, source: str) -> None:
        tokens = tokenize(source, get_language(language))
        for prev, cur in zip(tokens, tokens[1:]):
            assert not (prev.type == TokenType.PLAIN and cur.type == TokenType.PLAIN)


class TestDeterminism:
    @given(source=syntax_text)
    @settings(max_examples=100)
    def test_same_input_same_output(self, source: str) -> None:
        table = get_language("javascript")
        assert tokenize(source, table) == tokenize(source, table)

    @given(source=st.text(min_size=1, max_size=200))
    @settings(max_examples=100)
    def test_empty_table_yields_one_plain_token(self, source: str) -> None:
        assert tokenize(source, RuleTable("empty")) == [Token(source, TokenType.PLAIN)]
