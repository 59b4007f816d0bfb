"""Stage-1 engine: apply a rule table to a buffer and emit the token stream.

Rules run one at a time in table order and only claim text no earlier
rule has claimed. A rule first searches the whole buffer, so anchors, word
boundaries and lookbehinds see real context. When a match runs into an
existing claim, the rule searches again inside the unclaimed run before
that claim, so a greedy pattern still claims the part that fits.
Unclaimed runs come out as PLAIN tokens, which makes unknown syntax
degrade to text instead of failing.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterator

from microlex.errors import RefinementError
from microlex.rules import Rule, RuleTable
from microlex.tokens import Token, TokenType, join_text


class _Claims:
    """Sorted, non-overlapping (start, end, rule index) spans."""

    def __init__(self) -> None:
        self._starts: list[int] = []
        self._spans: list[tuple[int, int, int]] = []

    def blocking(self, start: int, end: int) -> int | None:
        """Return the start of the leftmost claim overlapping the span, if any."""
        i = bisect_right(self._starts, start)
        if i > 0 and self._spans[i - 1][1] > start:
            return self._starts[i - 1]
        if i < len(self._starts) and self._starts[i] < end:
            return self._starts[i]
        return None

    def add(self, start: int, end: int, rule_index: int) -> None:
        i = bisect_right(self._starts, start)
        self._starts.insert(i, start)
        self._spans.insert(i, (start, end, rule_index))

    def __iter__(self) -> Iterator[tuple[int, int, int]]:
        return iter(self._spans)


def _scan(source: str, rule: Rule, rule_index: int, claims: _Claims) -> None:
    pattern = rule.pattern
    length = len(source)
    pos = 0
    # A match running into a later claim is retried inside the unclaimed run
    # before that claim; ``limit`` ends the run and the full search resumes there.
    limit = length
    while True:
        match = pattern.search(source, pos, limit) if pos <= limit else None
        if match is None:
            if limit == length:
                return
            pos, limit = limit, length
            continue
        start, end = rule.claim(match)
        if start == end:
            pos = match.start() + 1
            continue
        blocker = claims.blocking(start, end)
        if blocker is None:
            claims.add(start, end, rule_index)
            pos = match.end()
        elif blocker > start and limit == length:
            pos, limit = match.start(), blocker
        else:
            pos = match.start() + 1


def _refine(rule: Rule, token: Token, validate: bool) -> list[Token]:
    parts = list(rule.refine(token))
    if validate:
        actual = join_text(parts)
        if actual != token.text:
            raise RefinementError(rule.name, token.text, actual)
        if any(not p.text for p in parts):
            raise RefinementError(
                rule.name, token.text, actual, reason="produced an empty token"
            )
    return parts


def tokenize(source: str, table: RuleTable, *, validate: bool = False) -> list[Token]:
    """Tokenize ``source`` with ``table``.

    The result covers the source exactly: joining the token texts gives
    back ``source``. With ``validate`` set, every refinement is checked
    for that property and RefinementError is raised on the first breach.
    """
    claims = _Claims()
    rules = table.rules
    for index, r in enumerate(rules):
        _scan(source, r, index, claims)

    tokens: list[Token] = []
    pos = 0
    for start, end, index in claims:
        if start > pos:
            tokens.append(Token(source[pos:start], TokenType.PLAIN))
        r = rules[index]
        token = Token(source[start:end], r.type)
        if r.refine is None:
            tokens.append(token)
        else:
            tokens.extend(_refine(r, token, validate))
        pos = end
    if pos < len(source):
        tokens.append(Token(source[pos:], TokenType.PLAIN))
    return tokens
