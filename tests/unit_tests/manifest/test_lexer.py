"""Unit tests for the manifest tokenizer."""

from __future__ import annotations

import pytest

from pandoc_tree.errors import ManifestParseError
from pandoc_tree.manifest.lexer import TokenKind, tokenize


def test_tokenize_kinds_and_positions() -> None:
    """Classify tokens and track 1-based line/column positions."""
    tokens = tokenize('nproc = 4,\n  path: "docs"')
    kinds = [token.kind for token in tokens]
    assert kinds == [
        TokenKind.IDENT,
        TokenKind.PUNCT,
        TokenKind.INT,
        TokenKind.PUNCT,
        TokenKind.IDENT,
        TokenKind.PUNCT,
        TokenKind.STRING,
        TokenKind.EOF,
    ]
    string = tokens[6]
    assert string.value == "docs"
    assert (string.line, string.column) == (2, 9)


def test_tokenize_skips_line_comments() -> None:
    """Ignore `//` comments up to end of line."""
    tokens = tokenize("// header\nSmart // trailing\n")
    assert [token.value for token in tokens[:-1]] == ["Smart"]


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        (r'"a\"b"', 'a"b'),
        (r'"tab\tnew\nline"', "tab\tnew\nline"),
        (r'"back\\slash"', "back\\slash"),
    ],
)
def test_tokenize_unescapes_strings(source: str, expected: str) -> None:
    """Decode the supported escape sequences."""
    assert tokenize(source)[0].value == expected


def test_tokenize_integers_allow_sign_and_underscores() -> None:
    """Keep the sign and drop digit separators."""
    tokens = tokenize("-2 1_000")
    assert [token.value for token in tokens[:-1]] == ["-2", "1000"]


def test_tokenize_rejects_unknown_character() -> None:
    """Report unexpected characters with their position."""
    with pytest.raises(ManifestParseError, match="Unexpected character") as info:
        tokenize("mod_name = #")
    assert (info.value.line, info.value.column) == (1, 12)


def test_tokenize_rejects_unterminated_string() -> None:
    """Reject strings without a closing quote."""
    with pytest.raises(ManifestParseError, match="Unterminated string"):
        tokenize('"docs')


def test_tokenize_rejects_unknown_escape() -> None:
    """Reject escape sequences outside the supported set."""
    with pytest.raises(ManifestParseError, match="Unknown escape"):
        tokenize(r'"\q"')


def test_tokenize_strings_may_span_lines() -> None:
    """Keep raw newlines in string literals and track lines past them."""
    tokens = tokenize('"first\nsecond" route')
    assert tokens[0].value == "first\nsecond"
    assert (tokens[1].line, tokens[1].column) == (2, 9)
