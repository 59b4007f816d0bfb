"""Minimal LSP server for microlex: semantic tokens only."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from lsprotocol.types import (
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
    SemanticTokens,
    SemanticTokensLegend,
    SemanticTokensParams,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from microlex import __version__
from microlex.engine import tokenize
from microlex.errors import UnknownLanguageError
from microlex.languages import get_language, language_for_path
from microlex.rules import RuleTable
from microlex.tokens import Token, TokenType

logger = logging.getLogger(__name__)

TOKEN_TYPES = [
    "string",
    "keyword",
    "number",
    "comment",
    "operator",
    "regexp",
    "function",
    "method",
    "property",
    "variable",
    "macro",
]

_LSP_TYPES: dict[TokenType, str] = {
    TokenType.STRING: "string",
    TokenType.STRING_ALT: "string",
    TokenType.TEMPLATE: "string",
    TokenType.INTERPOLATION: "variable",
    TokenType.ESCAPE: "macro",
    TokenType.KEYWORD: "keyword",
    TokenType.KEYWORD_CONTROL: "keyword",
    TokenType.KEYWORD_TYPE: "keyword",
    TokenType.KEYWORD_OPERATOR: "keyword",
    TokenType.KEYWORD_SPECIAL: "keyword",
    TokenType.BOOLEAN: "keyword",
    TokenType.NULL: "keyword",
    TokenType.REGEX: "regexp",
    TokenType.FUNCTION_CALL: "function",
    TokenType.METHOD_CALL: "method",
    TokenType.PROPERTY: "property",
    TokenType.NUMBER: "number",
    TokenType.NUMBER_INT: "number",
    TokenType.NUMBER_HEX: "number",
    TokenType.NUMBER_BIN: "number",
    TokenType.NUMBER_OCT: "number",
    TokenType.OPERATOR: "operator",
    TokenType.COMMENT: "comment",
    TokenType.COMMENT_BLOCK: "comment",
}

_TYPE_INDEX = {tt: TOKEN_TYPES.index(name) for tt, name in _LSP_TYPES.items()}

LEGEND = SemanticTokensLegend(token_types=TOKEN_TYPES, token_modifiers=[])

_LINE = re.compile(r"([^\r\n]*)(\r\n|\r|\n)?")

server = LanguageServer(
    "microlex-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _utf16_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def _lines(text: str) -> Iterator[tuple[str, bool]]:
    """Yield (segment, ends_with_line_break) pieces of text."""
    for match in _LINE.finditer(text):
        segment, brk = match.group(1), match.group(2)
        if not segment and brk is None:
            # finditer's trailing empty match
            continue
        yield segment, brk is not None


def encode_semantic_tokens(tokens: Iterable[Token]) -> list[int]:
    """Encode a token stream as LSP relative semantic token data.

    Tokens spanning several lines are split per line; PLAIN tokens and
    tokens with no legend entry are skipped. Columns count UTF-16 units.
    """
    data: list[int] = []
    line = col = 0
    prev_line = prev_col = 0
    pending_cr = False
    for tok in tokens:
        index = _TYPE_INDEX.get(tok.type)
        text = tok.text
        if pending_cr and text.startswith("\n"):
            # second half of a CRLF split across tokens
            text = text[1:]
        pending_cr = tok.text.endswith("\r")
        for segment, has_break in _lines(text):
            length = _utf16_len(segment)
            if index is not None and length:
                delta_line = line - prev_line
                delta_col = col - prev_col if delta_line == 0 else col
                data.extend([delta_line, delta_col, length, index, 0])
                prev_line, prev_col = line, col
            if has_break:
                line += 1
                col = 0
            else:
                col += length
    return data


def _table_for(language_id: str | None, uri: str) -> RuleTable:
    """Pick a rule table from the document language, then the URI extension."""
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    for candidate in (language_id, language_for_path(filename)):
        if not candidate:
            continue
        try:
            return get_language(candidate)
        except UnknownLanguageError:
            logger.debug("no rule table for language %r", candidate)
    logger.debug("using generic rule table for %s", uri)
    return get_language("generic")


def _semantic_tokens(ls: LanguageServer, uri: str) -> SemanticTokens:
    """Tokenize the open document and encode it for the client."""
    doc = ls.workspace.get_text_document(uri)
    table = _table_for(doc.language_id, uri)
    return SemanticTokens(data=encode_semantic_tokens(tokenize(doc.source, table)))


@server.feature(TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, LEGEND)
def semantic_tokens_full(ls: LanguageServer, params: SemanticTokensParams) -> SemanticTokens:
    return _semantic_tokens(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
