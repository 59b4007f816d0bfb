"""Concrete rule tables and the language registry.

Each builder is a pure function from a shared rule library to a RuleTable.
Table order is precedence, and the order used here is deliberate:

- line comments first, claiming only the text after any code and quoted
  strings on their line, so quotes inside a comment stay in it;
- then strings and the remaining comments, so nothing inside them is
  reclassified;
- method calls before properties, so ``a.b()`` is a call;
- properties before literals and keywords, so ``obj.if``, ``obj.true`` and
  ``obj.delete`` stay members;
- keyword classes before function calls, so ``if (`` is a keyword;
- numbers before operators, so ``-1`` keeps its sign.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from functools import lru_cache
from pathlib import PurePath

from microlex.errors import UnknownLanguageError
from microlex.rules import Rule, RuleTable, rule
from microlex.rulesets import COMMON_RULES
from microlex.tokens import TokenType

logger = logging.getLogger(__name__)

_NUMBERS = ("octal", "bin", "hex", "floats", "int")


def _words(*words: str) -> str:
    return r"\b(?:" + "|".join(words) + r")\b"


def generic(common: Mapping[str, Rule] = COMMON_RULES) -> RuleTable:
    """Fallback table for unknown C-like languages."""
    return RuleTable(
        "generic",
        (
            common["slash_comments"],
            common["hash_comments"],
            common["sq_strings"],
            common["dq_strings"],
            common["loose_slash_comments"],
            common["loose_hash_comments"],
            common["block_comments"],
            common["method_calls"],
            common["prop"],
            common["boolean"],
            common["null"],
            common["function_calls"],
            common["brackets"],
            *(common[n] for n in _NUMBERS),
            common["operators"],
        ),
        aliases=("text", "plain"),
    )


def javascript(common: Mapping[str, Rule] = COMMON_RULES) -> RuleTable:
    return RuleTable(
        "javascript",
        (
            common["slash_comments"],
            common["sq_strings"],
            common["dq_strings"],
            common["template_strings"],
            common["loose_slash_comments"],
            common["block_comments"],
            common["method_calls"],
            common["prop"],
            common["boolean"],
            common["null"],
            rule(_words("undefined", "NaN", "Infinity"), TokenType.NULL, name="js_null"),
            rule(
                _words(
                    "if", "else", "for", "while", "do", "switch", "case", "default",
                    "break", "continue", "return", "throw", "try", "catch", "finally",
                    "yield", "await",
                ),
                TokenType.KEYWORD_CONTROL,
                name="js_control",
            ),
            rule(
                _words(
                    "var", "let", "const", "function", "class", "extends", "static",
                    "async", "import", "export", "from", "as", "with", "debugger",
                ),
                TokenType.KEYWORD,
                name="js_keywords",
            ),
            rule(
                _words("this", "super", "arguments", "globalThis", "window", "document", "console"),
                TokenType.KEYWORD_SPECIAL,
                name="js_special",
            ),
            rule(
                _words("instanceof", "new", "delete", "typeof", "void", "in", "of"),
                TokenType.KEYWORD_OPERATOR,
                name="js_operators",
            ),
            common["function_calls"],
            common["regex_literals"],
            common["brackets"],
            *(common[n] for n in _NUMBERS),
            common["operators"],
        ),
        aliases=("js", "ecmascript", "node"),
        extensions=(".js", ".mjs", ".cjs"),
    )


def solidity(common: Mapping[str, Rule] = COMMON_RULES) -> RuleTable:
    return RuleTable(
        "solidity",
        (
            common["slash_comments"],
            common["sq_strings"],
            common["dq_strings"],
            common["template_strings"],
            common["loose_slash_comments"],
            common["block_comments"],
            common["method_calls"],
            common["prop"],
            common["boolean"],
            common["null"],
            # variable types and storage locations
            rule(
                r"\b(?:enum|memory|storage|calldata|pure|view|payable|address|mapping|bool"
                r"|string|bytes\d{0,2}|u?int\d{0,3}|u?fixed(?:\d+x\d+)?)\b",
                TokenType.KEYWORD_TYPE,
                name="sol_types",
            ),
            # global objects and functions
            rule(
                _words(
                    "abi", "block", "msg", "now", "tx", "assert", "require", "revert",
                    "blockhash", "keccak256", "sha256", "ripemd160", "ecrecover", "gasleft",
                ),
                TokenType.KEYWORD_SPECIAL,
                name="sol_globals",
            ),
            rule(
                _words(
                    "if", "while", "else", "do", "for", "continue", "break", "return",
                    "throw", "emit", "try", "catch",
                ),
                TokenType.KEYWORD_CONTROL,
                name="sol_control",
            ),
            rule(
                _words(
                    "pragma", "import", "contract", "library", "interface", "is", "public",
                    "internal", "private", "external", "constant", "immutable", "using",
                    "struct", "function", "modifier", "constructor", "returns", "event",
                    "error", "anonymous", "indexed", "virtual", "override", "assembly",
                    "selfdestruct",
                ),
                TokenType.KEYWORD,
                name="sol_keywords",
            ),
            rule(_words("super", "this"), TokenType.KEYWORD_SPECIAL, name="sol_special"),
            rule(
                _words("instanceof", "new", "delete", "typeof", "void", "in"),
                TokenType.KEYWORD_OPERATOR,
                name="sol_operators",
            ),
            # ether and time units
            rule(
                _words(
                    "wei", "gwei", "szabo", "finney", "ether",
                    "seconds", "minutes", "hours", "days", "weeks",
                ),
                TokenType.KEYWORD_OPERATOR,
                name="sol_units",
            ),
            common["function_calls"],
            common["brackets"],
            *(common[n] for n in _NUMBERS),
            common["operators"],
        ),
        aliases=("sol",),
        extensions=(".sol",),
    )


_BUILDERS: dict[str, Callable[[Mapping[str, Rule]], RuleTable]] = {
    "generic": generic,
    "javascript": javascript,
    "solidity": solidity,
}


@lru_cache(maxsize=None)
def _registry() -> tuple[dict[str, RuleTable], dict[str, str], dict[str, str]]:
    """Build every table once; return (tables, alias index, extension index)."""
    tables: dict[str, RuleTable] = {}
    aliases: dict[str, str] = {}
    extensions: dict[str, str] = {}
    for name, build in _BUILDERS.items():
        table = build(COMMON_RULES)
        tables[name] = table
        aliases[name] = name
        for alias in table.aliases:
            aliases[alias.lower()] = name
        for ext in table.extensions:
            extensions[ext.lower()] = name
        logger.debug("built rule table %r with %d rules", name, len(table))
    return tables, aliases, extensions


def available_languages() -> list[str]:
    """Canonical language names, sorted."""
    return sorted(_BUILDERS)


def get_language(name: str) -> RuleTable:
    """Return the table for a language name or alias (case-insensitive)."""
    tables, aliases, _ = _registry()
    canonical = aliases.get(name.strip().lower())
    if canonical is None:
        raise UnknownLanguageError(name, available_languages())
    return tables[canonical]


def language_for_path(path: str | PurePath, extra: Mapping[str, str] | None = None) -> str | None:
    """Guess a language from a file extension; ``extra`` maps extensions first."""
    suffix = PurePath(path).suffix.lower()
    if not suffix:
        return None
    if extra:
        for ext, language in extra.items():
            if "." + ext.lower().lstrip(".") == suffix:
                return language
    _, _, extensions = _registry()
    return extensions.get(suffix)
