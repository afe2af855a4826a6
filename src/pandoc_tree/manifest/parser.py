"""Recursive-descent parser for build manifests.

A manifest looks like::

    mod_name = docs, tree_name = DOCS,
    content = [
        compile_from_path(path: "docs", route: "guide"),
        special(ty: "index"),
    ],
    options = [Standalone, Meta { "lang", "en" }],
    nproc = 4
"""

from __future__ import annotations

from typing import TypeAlias

import logging

from pydantic import ValidationError

from pandoc_tree.application.options import BuildConfig
from pandoc_tree.errors import ManifestParseError
from pandoc_tree.manifest.lexer import Token, TokenKind, tokenize
from pandoc_tree.manifest.options import ConverterOption, RawOption, decode_options
from pandoc_tree.schemas import ManifestSchema

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("mod_name", "tree_name", "content")
OPTIONAL_FIELDS = ("options", "nproc")

RawElement: TypeAlias = dict[str, str | None]


class _Cursor:
    """Forward-only view over a token list."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def peek(self) -> Token:
        return self._tokens[self._pos]

    def advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.kind is not TokenKind.EOF:
            self._pos += 1
        return token

    def at_punct(self, value: str) -> bool:
        token = self.peek()
        return token.kind is TokenKind.PUNCT and token.value == value

    def at_end(self) -> bool:
        return self.peek().kind is TokenKind.EOF

    def accept(self, value: str) -> bool:
        if self.at_punct(value):
            self.advance()
            return True
        return False

    def expect(self, value: str) -> Token:
        token = self.peek()
        if not self.at_punct(value):
            raise error_at(token, f"Expected `{value}`, found {token.describe()}")
        return self.advance()

    def expect_kind(self, kind: TokenKind, what: str) -> Token:
        token = self.peek()
        if token.kind is not kind:
            raise error_at(token, f"Expected {what}, found {token.describe()}")
        return self.advance()


def error_at(token: Token, message: str) -> ManifestParseError:
    return ManifestParseError(message, line=token.line, column=token.column)


def _parse_ident(cur: _Cursor, field: str) -> str:
    return cur.expect_kind(TokenKind.IDENT, f"an identifier for `{field}`").value


def _parse_nproc(cur: _Cursor) -> int:
    token = cur.peek()
    if token.kind is not TokenKind.INT:
        raise error_at(
            token,
            f"`nproc` must be a positive integer literal, found {token.describe()}",
        )
    cur.advance()
    value = int(token.value)
    if value < 1:
        raise error_at(
            token, f"`nproc` must be a positive integer literal, got {value}"
        )
    return value


def _parse_element_field(cur: _Cursor, element: str, field: str) -> str:
    token = cur.peek()
    if token.kind is TokenKind.PUNCT and token.value == ")":
        raise error_at(token, f"Missing required field `{field}` in `{element}`")
    if token.kind is not TokenKind.IDENT or token.value != field:
        raise error_at(
            token, f"Expected field `{field}` in `{element}`, found {token.describe()}"
        )
    cur.advance()
    cur.expect(":")
    value = cur.peek()
    if value.kind is not TokenKind.STRING:
        raise error_at(
            value,
            f"Field `{field}` of `{element}` expects a string literal, "
            f"found {value.describe()}",
        )
    cur.advance()
    return value.value


def _parse_element(cur: _Cursor) -> RawElement:
    keyword = cur.expect_kind(TokenKind.IDENT, "a content element")
    if keyword.value == "special":
        cur.expect("(")
        ty = _parse_element_field(cur, "special", "ty")
        cur.expect(")")
        return {"element": "special", "ty": ty}
    if keyword.value == "compile_from_path":
        cur.expect("(")
        path = _parse_element_field(cur, "compile_from_path", "path")
        route = None
        if cur.accept(","):
            route = _parse_element_field(cur, "compile_from_path", "route")
        cur.expect(")")
        return {"element": "compile_from_path", "path": path, "route": route}
    raise error_at(
        keyword,
        f"Unknown content element `{keyword.value}`; "
        "expected `special` or `compile_from_path`",
    )


def _parse_content(cur: _Cursor) -> list[RawElement]:
    open_token = cur.expect("[")
    elements: list[RawElement] = []
    while not cur.at_punct("]"):
        elements.append(_parse_element(cur))
        if not cur.accept(","):
            break
    cur.expect("]")
    if not elements:
        raise error_at(open_token, "`content` must contain at least one element")
    return elements


def _parse_option_args(cur: _Cursor) -> tuple[Token, ...]:
    cur.expect("{")
    args: list[Token] = []
    while not cur.at_punct("}"):
        token = cur.peek()
        if token.kind not in (TokenKind.STRING, TokenKind.INT, TokenKind.IDENT):
            raise error_at(token, f"Expected option argument, found {token.describe()}")
        args.append(cur.advance())
        if not cur.accept(","):
            break
    cur.expect("}")
    return tuple(args)


def _parse_option_items(cur: _Cursor, closing: str | None) -> list[RawOption]:
    def done() -> bool:
        return cur.at_end() if closing is None else cur.at_punct(closing)

    items: list[RawOption] = []
    while not done():
        name = cur.expect_kind(TokenKind.IDENT, "an option name")
        args = _parse_option_args(cur) if cur.at_punct("{") else None
        items.append(RawOption(name, args))
        if not cur.accept(","):
            break
    return items


def _parse_options(cur: _Cursor) -> tuple[ConverterOption, ...]:
    cur.expect("[")
    items = _parse_option_items(cur, "]")
    cur.expect("]")
    return decode_options(items)


def parse_options(text: str) -> tuple[ConverterOption, ...]:
    """Parse and decode a bare option list such as ``Smart, TabStop { 4 }``.

    Raises
    ------
    ManifestParseError
        If the text is malformed or an option cannot be decoded.
    """
    cur = _Cursor(tokenize(text))
    items = _parse_option_items(cur, None)
    if not cur.at_end():
        token = cur.peek()
        raise error_at(token, f"Expected `,` or end of input, found {token.describe()}")
    return decode_options(items)


def parse_manifest(text: str) -> BuildConfig:
    """Parse manifest text into a validated build configuration.

    Parameters
    ----------
    text : str
        Manifest source.

    Returns
    -------
    BuildConfig
        Immutable configuration value.

    Raises
    ------
    ManifestParseError
        If the manifest is malformed, references unknown elements or
        options, or fails validation.
    """
    cur = _Cursor(tokenize(text))
    fields: dict[str, object] = {}
    while not cur.at_end():
        name = cur.expect_kind(TokenKind.IDENT, "a manifest field")
        if name.value not in REQUIRED_FIELDS + OPTIONAL_FIELDS:
            raise error_at(name, f"Unknown manifest field `{name.value}`")
        if name.value in fields:
            raise error_at(name, f"Duplicate manifest field `{name.value}`")
        cur.expect("=")
        if name.value in ("mod_name", "tree_name"):
            fields[name.value] = _parse_ident(cur, name.value)
        elif name.value == "content":
            fields["content"] = _parse_content(cur)
        elif name.value == "options":
            fields["options"] = list(_parse_options(cur))
        else:
            fields["nproc"] = _parse_nproc(cur)
        if not cur.accept(","):
            break

    if not cur.at_end():
        token = cur.peek()
        raise error_at(token, f"Expected `,` or end of input, found {token.describe()}")

    for required in REQUIRED_FIELDS:
        if required not in fields:
            raise ManifestParseError(f"Missing required field `{required}`")

    try:
        config = ManifestSchema.model_validate(fields).to_config()
    except ValidationError as exc:
        raise ManifestParseError(f"Invalid manifest: {exc}") from exc

    logger.debug(
        "parsed manifest %s::%s with %d elements, %d options, nproc=%d",
        config.mod_name,
        config.tree_name,
        len(config.content),
        len(config.converter_options),
        config.nproc,
    )
    return config
