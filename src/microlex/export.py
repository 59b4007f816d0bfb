"""Serialize a token stream for consumers outside Python."""

from __future__ import annotations

import json
from collections.abc import Iterable

from microlex.tokens import Token


def to_json(tokens: Iterable[Token], *, indent: int | None = None) -> str:
    """Encode tokens as a JSON list of ``{"text", "type"}`` objects."""
    payload = [{"text": t.text, "type": t.type.value} for t in tokens]
    return json.dumps(payload, ensure_ascii=False, indent=indent)


def to_text(tokens: Iterable[Token]) -> str:
    """One line per token: type code, a tab, and the quoted text."""
    return "".join(f"{t.type.value}\t{t.text!r}\n" for t in tokens)
