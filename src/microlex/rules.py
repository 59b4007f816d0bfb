"""Rules and rule tables: the declarative half of a language definition."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, replace

from microlex.errors import RuleError
from microlex.tokens import Token, TokenType

Refine = Callable[[Token], Sequence[Token]]


def compile_pattern(
    pattern: str | re.Pattern[str], flags: int = 0, rule_name: str = ""
) -> re.Pattern[str]:
    """Compile a regex, turning ``re.error`` into a positioned RuleError."""
    if isinstance(pattern, re.Pattern):
        if flags:
            raise RuleError("flags cannot be applied to a compiled pattern", rule_name=rule_name)
        return pattern
    if not isinstance(pattern, str):
        raise RuleError(
            f"pattern must be a string, got {type(pattern).__name__}", rule_name=rule_name
        )
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise RuleError(f"invalid pattern: {exc.msg}", pattern, exc.pos, rule_name) from None


@dataclass(frozen=True, slots=True)
class Rule:
    """A pattern, the type it assigns, and an optional refinement.

    When the pattern has capturing groups, only group 1 is claimed; the
    rest of the match is context. A rule with ``refine`` hands each
    claimed token to it and emits the returned tokens instead.
    """

    pattern: re.Pattern[str]
    type: TokenType
    refine: Refine | None = None
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", compile_pattern(self.pattern, rule_name=self.name))
        if not isinstance(self.type, TokenType):
            raise RuleError(f"type must be a TokenType, got {self.type!r}", rule_name=self.name)
        if self.refine is not None and not callable(self.refine):
            raise RuleError("refine must be callable", rule_name=self.name)

    def claim(self, match: re.Match[str]) -> tuple[int, int]:
        """Return the (start, end) offsets this rule claims for a match."""
        if self.pattern.groups and match.start(1) >= 0:
            return match.span(1)
        return match.span()


def rule(
    pattern: str | re.Pattern[str],
    type: TokenType,
    refine: Refine | None = None,
    *,
    flags: int = 0,
    name: str = "",
) -> Rule:
    """Build a Rule, compiling a string pattern with ``flags``."""
    return Rule(compile_pattern(pattern, flags, name), type, refine, name)


@dataclass(frozen=True, slots=True)
class RuleTable:
    """An ordered, immutable rule list for one language.

    Order is precedence: a span claimed by an earlier rule cannot be
    claimed, even partly, by a later one.
    """

    name: str
    rules: tuple[Rule, ...] = ()
    aliases: tuple[str, ...] = ()
    extensions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", tuple(self.rules))
        object.__setattr__(self, "aliases", tuple(self.aliases))
        object.__setattr__(self, "extensions", tuple(self.extensions))
        for i, r in enumerate(self.rules):
            if not isinstance(r, Rule):
                raise RuleError(f"entry {i} of table '{self.name}' is not a Rule: {r!r}")

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def extend(self, *rules: Rule, first: bool = False) -> RuleTable:
        """Return a table with ``rules`` appended, or prepended when ``first``."""
        combined = rules + self.rules if first else self.rules + rules
        return replace(self, rules=combined)

    def override(self, name: str, new: Rule) -> RuleTable:
        """Return a table with the rule called ``name`` replaced in place."""
        index = self._index(name)
        return replace(self, rules=self.rules[:index] + (new,) + self.rules[index + 1 :])

    def without(self, name: str) -> RuleTable:
        """Return a table with the rule called ``name`` removed."""
        index = self._index(name)
        return replace(self, rules=self.rules[:index] + self.rules[index + 1 :])

    def _index(self, name: str) -> int:
        for i, r in enumerate(self.rules):
            if r.name == name:
                return i
        raise KeyError(f"no rule named '{name}' in table '{self.name}'")
