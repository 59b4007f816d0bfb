"""--debug token dump to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from microlex.tokens import Token, spans


def dump_tokens(tokens: Iterable[Token], *, file: TextIO = sys.stderr) -> None:
    """Print each token with its start position and type to *file*."""
    for tok, span in spans(tokens):
        start = span.start
        file.write(f"{start.line:>4}:{start.column:<4} {tok.type.name:<16} {tok.text!r}\n")
