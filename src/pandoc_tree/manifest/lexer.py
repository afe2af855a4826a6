"""Tokenizer for build manifest text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from pandoc_tree.errors import ManifestParseError


class TokenKind(Enum):
    """Lexical category of a manifest token."""

    IDENT = "identifier"
    STRING = "string literal"
    INT = "integer literal"
    PUNCT = "punctuation"
    EOF = "end of input"


@dataclass(frozen=True)
class Token:
    """Single lexical token with its source position.

    ``value`` holds the unescaped contents for string literals, the raw
    digits (with sign) for integer literals and the verbatim text otherwise.
    """

    kind: TokenKind
    value: str
    line: int
    column: int

    def describe(self) -> str:
        """Return a short description used in error messages."""
        if self.kind is TokenKind.EOF:
            return "end of input"
        if self.kind is TokenKind.STRING:
            return f'string literal "{self.value}"'
        return f"`{self.value}`"


_TOKEN_RE = re.compile(
    r"""
    (?P<ws>[ \t\r\n]+)
  | (?P<comment>//[^\n]*)
  | (?P<string>"(?:[^"\\]|\\[\s\S])*")
  | (?P<int>-?[0-9][0-9_]*)
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<punct>[=,:\[\](){}])
    """,
    re.VERBOSE,
)

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


def _unescape(body: str, line: int, column: int) -> str:
    out: list[str] = []
    chars = iter(body)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        escaped = next(chars, "")
        if escaped not in _ESCAPES:
            raise ManifestParseError(
                f"Unknown escape sequence '\\{escaped}' in string literal",
                line=line,
                column=column,
            )
        out.append(_ESCAPES[escaped])
    return "".join(out)


def tokenize(text: str) -> list[Token]:
    """Split manifest text into tokens.

    Parameters
    ----------
    text : str
        Manifest source.

    Returns
    -------
    list[Token]
        Tokens in source order, terminated by a single ``EOF`` token.

    Raises
    ------
    ManifestParseError
        If the text contains a character that starts no valid token.
    """
    tokens: list[Token] = []
    pos = 0
    line = 1
    line_start = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        column = pos - line_start + 1
        if match is None:
            snippet = text[pos]
            if snippet == '"':
                raise ManifestParseError(
                    "Unterminated string literal", line=line, column=column
                )
            raise ManifestParseError(
                f"Unexpected character {snippet!r}", line=line, column=column
            )
        kind = match.lastgroup
        raw = match.group()
        if kind == "string":
            tokens.append(
                Token(
                    TokenKind.STRING,
                    _unescape(raw[1:-1], line, column),
                    line,
                    column,
                )
            )
        elif kind == "int":
            tokens.append(Token(TokenKind.INT, raw.replace("_", ""), line, column))
        elif kind == "ident":
            tokens.append(Token(TokenKind.IDENT, raw, line, column))
        elif kind == "punct":
            tokens.append(Token(TokenKind.PUNCT, raw, line, column))
        newlines = raw.count("\n")
        if newlines:
            line += newlines
            line_start = pos + raw.rindex("\n") + 1
        pos = match.end()
    column = pos - line_start + 1
    tokens.append(Token(TokenKind.EOF, "", line, column))
    return tokens
