"""Shared rule library for C-family languages.

``COMMON_RULES`` is a read-only mapping from rule name to Rule. Language
builders receive it as an argument and pick rules by name, so a table can
be assembled from shared pieces or from a substitute library in tests.
"""

from __future__ import annotations

import re
from types import MappingProxyType

from microlex.micro import classify_as, refiner
from microlex.rules import Rule, rule
from microlex.tokens import Token, TokenType

# \x41, \u00e9, \u{1F600}, or any single escaped character (newline included)
ESCAPE = r"\\(?:x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|u\{[0-9a-fA-F]+\}|[\s\S])"

escape_sequences = refiner(ESCAPE, classify_as(TokenType.ESCAPE))


def _template_part(match: re.Match[str]) -> list[Token]:
    text = match.group(0)
    if text.startswith("\\"):
        return [Token(text, TokenType.ESCAPE)]
    return [Token(text, TokenType.INTERPOLATION)]


template_parts = refiner(r"\$\{[^}]*\}|" + ESCAPE, _template_part)

# Code a line comment may follow on its line: quoted strings and closed
# block comments are skipped whole, so quotes inside the comment stay in it
_CODE_STRING = r"'(?:[^'\\\n]|\\.)*'|" + r'"(?:[^"\\\n]|\\.)*"'
_CODE_BLOCK = r"/\*(?:[^*\n]|\*(?!/))*\*/"

# Numbers must not start inside an identifier or right after a dot
_NUM_START = r"(?<![\w$.])"

_rules: list[Rule] = [
    # strings
    rule(r"'(?:[^'\\\n]|\\[\s\S])*'", TokenType.STRING, escape_sequences, name="sq_strings"),
    rule(r'"(?:[^"\\\n]|\\[\s\S])*"', TokenType.STRING, escape_sequences, name="dq_strings"),
    rule(r"`(?:[^`\\]|\\[\s\S])*`", TokenType.TEMPLATE, template_parts, name="template_strings"),
    # literals
    rule(r"\b(?:true|false)\b", TokenType.BOOLEAN, name="boolean"),
    rule(r"\bnull\b", TokenType.NULL, name="null"),
    # members and calls
    rule(r"\.([A-Za-z_$][\w$]*)", TokenType.PROPERTY, name="prop"),
    rule(r"\.([A-Za-z_$][\w$]*)\s*\(", TokenType.METHOD_CALL, name="method_calls"),
    rule(r"(?<![\w$])([A-Za-z_$][\w$]*)\s*\(", TokenType.FUNCTION_CALL, name="function_calls"),
    # comments; the line rules claim only group 1, after the code before it
    rule(
        r"^(?:[^'\"`/\n]|" + _CODE_STRING + "|" + _CODE_BLOCK + r"|/(?![/*]))*"
        r"((?<!\\)//[^\r\n]*)",
        TokenType.COMMENT,
        flags=re.MULTILINE,
        name="slash_comments",
    ),
    rule(
        r"^(?:[^'\"`#\n]|" + _CODE_STRING + r")*(#[^\r\n]*)",
        TokenType.COMMENT,
        flags=re.MULTILINE,
        name="hash_comments",
    ),
    # for lines the rules above cannot parse, such as an unclosed quote
    rule(r"(?<!\\)//[^\r\n]*", TokenType.COMMENT, name="loose_slash_comments"),
    rule(r"#[^\r\n]*", TokenType.COMMENT, name="loose_hash_comments"),
    rule(r"/\*[\s\S]*?\*/", TokenType.COMMENT_BLOCK, name="block_comments"),
    # /pattern/flags after something that cannot end an expression,
    # including the keywords that take an operand
    rule(
        r"(?:^|[=(,:;!&|?{}\[]|\b(?:return|typeof|yield)\b)[ \t]*"
        r"(/(?![*/])(?:[^/\\\n\[]|\\.|\[(?:[^\]\\\n]|\\.)*\])+/[a-z]*)",
        TokenType.REGEX,
        flags=re.MULTILINE,
        name="regex_literals",
    ),
    rule(r"[{}()\[\]]", TokenType.BRACKET, name="brackets"),
    rule(r"[-+*/%=<>!&|^~?:]+", TokenType.OPERATOR, name="operators"),
    # numbers
    rule(_NUM_START + r"-?0[xX][0-9a-fA-F_]+n?\b", TokenType.NUMBER_HEX, name="hex"),
    rule(_NUM_START + r"-?0[bB][01_]+n?\b", TokenType.NUMBER_BIN, name="bin"),
    rule(_NUM_START + r"-?0[oO][0-7_]+n?\b", TokenType.NUMBER_OCT, name="octal"),
    rule(
        _NUM_START
        + r"-?(?:\d[\d_]*\.\d[\d_]*|\.\d[\d_]*|\d[\d_]*(?=[eE][+-]?\d))(?:[eE][+-]?\d+)?(?![\w$.])",
        TokenType.NUMBER,
        name="floats",
    ),
    rule(_NUM_START + r"-?\d[\d_]*n?(?![\w$.])", TokenType.NUMBER_INT, name="int"),
]

COMMON_RULES: MappingProxyType[str, Rule] = MappingProxyType({r.name: r for r in _rules})

del _rules
