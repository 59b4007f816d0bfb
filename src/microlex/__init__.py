"""Priority-ordered, rule-based tokenizer for syntax highlighting."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from microlex.tokens import Token

__version__ = "0.1.0"


def tokenize(source: str, language: str = "generic", *, validate: bool = False) -> list[Token]:
    """Tokenize source text with the rule table registered for ``language``."""
    from microlex.engine import tokenize as run
    from microlex.languages import get_language

    return run(source, get_language(language), validate=validate)
