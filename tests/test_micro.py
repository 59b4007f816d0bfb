"""Test the stage-2 micro-tokenizer and the shared refiners."""

from __future__ import annotations

import re

import pytest

from microlex.errors import RuleError
from microlex.micro import classify_as, micro_tokenize, refiner
from microlex.rulesets import ESCAPE, escape_sequences, template_parts
from microlex.tokens import Token, TokenType, join_text

from .conftest import assert_texts, assert_types

S = TokenType.STRING
E = TokenType.ESCAPE


class TestMicroTokenize:
    def test_gaps_keep_outer_type(self) -> None:
        tok = Token("'ab\\ncd'", S)
        parts = micro_tokenize(tok, ESCAPE, classify_as(E))
        assert_texts(parts, ["'ab", "\\n", "cd'"])
        assert_types(parts, [S, E, S])

    def test_escapes_at_start_and_end_of_body(self) -> None:
        tok = Token("'\\tabc\\n'", S)
        parts = micro_tokenize(tok, ESCAPE, classify_as(E))
        assert_texts(parts, ["'", "\\t", "abc", "\\n", "'"])
        assert_types(parts, [S, E, S, E, S])
        assert join_text(parts) == tok.text

    def test_escaped_closing_quote_stays_inside(self) -> None:
        tok = Token("'a\\''", S)
        parts = micro_tokenize(tok, ESCAPE, classify_as(E))
        assert_texts(parts, ["'a", "\\'", "'"])

    def test_no_inner_match_returns_equal_token(self) -> None:
        tok = Token("'plain'", S)
        assert micro_tokenize(tok, ESCAPE, classify_as(E)) == [tok]

    def test_whole_text_matched(self) -> None:
        assert micro_tokenize(Token("\\n", S), ESCAPE, classify_as(E)) == [Token("\\n", E)]

    def test_hex_and_unicode_escapes(self) -> None:
        tok = Token('"\\x41\\u00e9\\u{1F600}"', S)
        parts = micro_tokenize(tok, ESCAPE, classify_as(E))
        assert_texts(parts, ['"', "\\x41", "\\u00e9", "\\u{1F600}", '"'])

    def test_zero_length_matches_ignored(self) -> None:
        parts = micro_tokenize(Token("axb", S), r"x*", classify_as(E))
        assert_texts(parts, ["a", "x", "b"])
        assert_types(parts, [S, E, S])

    def test_classifier_may_return_several_tokens(self) -> None:
        def split(match: re.Match[str]) -> list[Token]:
            return [
                Token("${", TokenType.INTERPOLATION),
                Token(match.group(1), TokenType.PLAIN),
                Token("}", TokenType.INTERPOLATION),
            ]

        parts = micro_tokenize(Token("`a${b}c`", TokenType.TEMPLATE), r"\$\{([^}]*)\}", split)
        assert_texts(parts, ["`a", "${", "b", "}", "c`"])
        assert parts[2].type == TokenType.PLAIN

    def test_sub_tokens_never_cross_outer_boundary(self) -> None:
        tok = Token("'\\", S)
        parts = micro_tokenize(tok, ESCAPE, classify_as(E))
        assert join_text(parts) == tok.text
        assert all(p.text for p in parts)

    def test_empty_token_yields_nothing(self) -> None:
        assert micro_tokenize(Token("", S), ESCAPE, classify_as(E)) == []

    def test_invalid_pattern_raises_rule_error(self) -> None:
        with pytest.raises(RuleError):
            micro_tokenize(Token("x", S), r"(", classify_as(E))


class TestRefiner:
    def test_refiner_rejects_bad_pattern_when_built(self) -> None:
        with pytest.raises(RuleError):
            refiner(r"[a-", classify_as(E))

    def test_refiner_applies_pattern(self) -> None:
        refine = refiner(r"\d", classify_as(TokenType.NUMBER_INT))
        parts = refine(Token("a1b", S))
        assert_texts(parts, ["a", "1", "b"])
        assert_types(parts, [S, TokenType.NUMBER_INT, S])


class TestSharedRefiners:
    def test_escape_sequences(self) -> None:
        parts = escape_sequences(Token('"say \\"hi\\""', S))
        assert_texts(parts, ['"say ', '\\"', "hi", '\\"', '"'])

    def test_template_interpolation_is_one_token(self) -> None:
        parts = template_parts(Token("`a${b}c`", TokenType.TEMPLATE))
        assert_texts(parts, ["`a", "${b}", "c`"])
        assert_types(
            parts, [TokenType.TEMPLATE, TokenType.INTERPOLATION, TokenType.TEMPLATE]
        )

    def test_template_escapes_and_escaped_dollar(self) -> None:
        parts = template_parts(Token("`\\${a}${b}`", TokenType.TEMPLATE))
        assert_texts(parts, ["`", "\\$", "{a}", "${b}", "`"])
        assert_types(
            parts,
            [
                TokenType.TEMPLATE,
                E,
                TokenType.TEMPLATE,
                TokenType.INTERPOLATION,
                TokenType.TEMPLATE,
            ],
        )
