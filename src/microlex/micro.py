"""Stage-2 micro-tokenizer: re-tokenize the interior of one matched token.

Used by rules whose coarse match needs finer structure, such as escape
sequences inside a string or ``${...}`` inside a template literal. Text
between inner matches keeps the outer token's type, so an untouched string
body still renders as a string. Sub-tokens never cross the outer token's
boundaries, and their texts concatenate back to the outer text.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from microlex.rules import Refine, compile_pattern
from microlex.tokens import Token, TokenType

Classify = Callable[[re.Match[str]], Sequence[Token]]


def micro_tokenize(
    token: Token, pattern: str | re.Pattern[str], classify: Classify
) -> list[Token]:
    """Split ``token`` at every match of ``pattern``.

    Each non-empty match is replaced by ``classify(match)``; gaps become
    tokens of ``token.type``. Zero-length matches are ignored.
    """
    regex = compile_pattern(pattern)
    text = token.text
    result: list[Token] = []
    pos = 0
    for match in regex.finditer(text):
        start, end = match.span()
        if start == end:
            continue
        if start > pos:
            result.append(Token(text[pos:start], token.type))
        result.extend(classify(match))
        pos = end
    if pos < len(text):
        result.append(Token(text[pos:], token.type))
    return result


def refiner(pattern: str | re.Pattern[str], classify: Classify) -> Refine:
    """Build a ``refine`` callable for a Rule, compiling ``pattern`` once."""
    regex = compile_pattern(pattern)

    def refine(token: Token) -> list[Token]:
        return micro_tokenize(token, regex, classify)

    return refine


def classify_as(tt: TokenType) -> Classify:
    """Classifier emitting the whole inner match as one token of type ``tt``."""

    def classify(match: re.Match[str]) -> list[Token]:
        return [Token(match.group(0), tt)]

    return classify
