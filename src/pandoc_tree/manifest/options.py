"""Typed decoder for the converter option list.

Each option is written as an identifier, optionally followed by a braced,
positional argument list::

    options = [Standalone, TabStop { 4 }, Meta { "lang", "en" }, TrackChanges { All }]

Names and argument kinds come from a fixed table; every decoded option maps
to exactly one pandoc command-line flag.
"""

from __future__ import annotations

from typing import TypeAlias

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pandoc_tree.errors import ManifestParseError, OptionNotSupportedError
from pandoc_tree.manifest.lexer import Token, TokenKind


class ArgKind(Enum):
    """Kind of a positional option argument."""

    STRING = "string literal"
    PATH = "path string literal"
    UINT = "unsigned integer literal"
    INT = "integer literal"
    TRACK_CHANGES = "one of Accept|Reject|All"


class TrackChanges(Enum):
    """Change-tracking mode accepted by ``TrackChanges``."""

    ACCEPT = "accept"
    REJECT = "reject"
    ALL = "all"


_TRACK_CHANGES_IDENTS = {
    "Accept": TrackChanges.ACCEPT,
    "Reject": TrackChanges.REJECT,
    "All": TrackChanges.ALL,
}

_INT_RANGES = {
    ArgKind.UINT: (0, 2**32 - 1),
    ArgKind.INT: (-(2**31), 2**31 - 1),
}

OptionArg: TypeAlias = str | int | Path | TrackChanges | None


@dataclass(frozen=True)
class OptionSpec:
    """Decoding rule for one option name.

    ``required`` is the number of leading parameters that must be present;
    the remaining ones are optional.
    """

    name: str
    flag: str
    params: tuple[ArgKind, ...] = ()
    required: int | None = None

    @property
    def min_args(self) -> int:
        return len(self.params) if self.required is None else self.required

    @property
    def is_flag(self) -> bool:
        return not self.params


def _flag(name: str, flag: str) -> OptionSpec:
    return OptionSpec(name, flag)


def _one(name: str, flag: str, kind: ArgKind) -> OptionSpec:
    return OptionSpec(name, flag, (kind,))


def _pair(name: str, flag: str) -> OptionSpec:
    return OptionSpec(name, flag, (ArgKind.STRING, ArgKind.STRING), required=1)


OPTION_SPECS: dict[str, OptionSpec] = {
    spec.name: spec
    for spec in (
        # bare flags
        _flag("Strict", "--strict"),
        _flag("ParseRaw", "--parse-raw"),
        _flag("Smart", "--smart"),
        _flag("OldDashes", "--old-dashes"),
        _flag("Normalize", "--normalize"),
        _flag("PreserveTabs", "--preserve-tabs"),
        _flag("Standalone", "--standalone"),
        _flag("NoWrap", "--no-wrap"),
        _flag("TableOfContents", "--toc"),
        _flag("NoHighlight", "--no-highlight"),
        _flag("SelfContained", "--self-contained"),
        _flag("Offline", "--offline"),
        _flag("Html5", "--html5"),
        _flag("HtmlQTags", "--html-q-tags"),
        _flag("Ascii", "--ascii"),
        _flag("ReferenceLinks", "--reference-links"),
        _flag("AtxHeaders", "--atx-headers"),
        _flag("NumberSections", "--number-sections"),
        _flag("NoTexLigatures", "--no-tex-ligatures"),
        _flag("Listings", "--listings"),
        _flag("Incremental", "--incremental"),
        _flag("SectionDivs", "--section-divs"),
        _flag("Citeproc", "--citeproc"),
        _flag("Natbib", "--natbib"),
        _flag("Biblatex", "--biblatex"),
        _flag("GladTex", "--gladtex"),
        _flag("Trace", "--trace"),
        _flag("DumpArgs", "--dump-args"),
        _flag("IgnoreArgs", "--ignore-args"),
        _flag("Verbose", "--verbose"),
        _flag("Sandbox", "--sandbox"),
        # path-valued
        _one("DataDir", "--data-dir", ArgKind.PATH),
        _one("Defaults", "--defaults", ArgKind.PATH),
        _one("Filter", "--filter", ArgKind.PATH),
        _one("LuaFilter", "--lua-filter", ArgKind.PATH),
        _one("ExtractMedia", "--extract-media", ArgKind.PATH),
        _one("Template", "--template", ArgKind.PATH),
        _one("PrintDefaultDataFile", "--print-default-data-file", ArgKind.PATH),
        _one("IncludeInHeader", "--include-in-header", ArgKind.PATH),
        _one("IncludeBeforeBody", "--include-before-body", ArgKind.PATH),
        _one("IncludeAfterBody", "--include-after-body", ArgKind.PATH),
        _one("PdfEngine", "--pdf-engine", ArgKind.PATH),
        _one("Bibliography", "--bibliography", ArgKind.PATH),
        _one("Csl", "--csl", ArgKind.PATH),
        _one("CitationAbbreviations", "--citation-abbreviations", ArgKind.PATH),
        _one("ReferenceDoc", "--reference-doc", ArgKind.PATH),
        # string-valued
        _one("IndentedCodeClasses", "--indented-code-classes", ArgKind.STRING),
        _one("PrintDefaultTemplate", "--print-default-template", ArgKind.STRING),
        _one("HighlightStyle", "--highlight-style", ArgKind.STRING),
        _one("DefaultImageExtension", "--default-image-extension", ArgKind.STRING),
        _one("IdPrefix", "--id-prefix", ArgKind.STRING),
        _one("TitlePrefix", "--title-prefix", ArgKind.STRING),
        _one("PdfEngineOpt", "--pdf-engine-opt", ArgKind.STRING),
        _one("EOL", "--eol", ArgKind.STRING),
        # integer-valued
        _one("BaseHeaderLevel", "--base-header-level", ArgKind.UINT),
        _one("TabStop", "--tab-stop", ArgKind.UINT),
        _one("Columns", "--columns", ArgKind.UINT),
        _one("TableOfContentsDepth", "--toc-depth", ArgKind.UINT),
        _one("SlideLevel", "--slide-level", ArgKind.UINT),
        _one("EpubChapterLevel", "--epub-chapter-level", ArgKind.UINT),
        _one("ShiftHeadingLevelBy", "--shift-heading-level-by", ArgKind.INT),
        # key + optional value
        _pair("Meta", "--metadata"),
        _pair("Var", "--variable"),
        # enum
        _one("TrackChanges", "--track-changes", ArgKind.TRACK_CHANGES),
    )
}

UNSUPPORTED_OPTIONS = frozenset(
    {
        "NumberOffset",
        "EmailObfuscation",
        "Css",
        "Chapters",
        "ReferenceOdt",
        "ReferenceDocx",
        "EpubStylesheet",
        "EpubCoverImage",
        "EpubMetadata",
        "EpubEmbedFont",
        "LatexMathML",
        "AsciiMathML",
        "MathML",
        "MimeTeX",
        "WebTeX",
        "JsMath",
        "MathJax",
        "ResourcePath",
        "RuntimeSystem",
    }
)


@dataclass(frozen=True)
class RawOption:
    """Undecoded option as written in the manifest.

    ``args`` is ``None`` for a bare identifier and a (possibly empty) tuple
    when a braced argument list follows it.
    """

    name: Token
    args: tuple[Token, ...] | None = None


@dataclass(frozen=True)
class ConverterOption:
    """Decoded converter option."""

    name: str
    args: tuple[OptionArg, ...] = ()

    @property
    def spec(self) -> OptionSpec:
        return OPTION_SPECS[self.name]

    def to_flag(self) -> str:
        """Render this option as a single pandoc command-line flag.

        Returns
        -------
        str
            Flag such as ``--standalone``, ``--tab-stop=4`` or
            ``--metadata=title:Guide``.
        """
        spec = self.spec
        if spec.is_flag:
            return spec.flag
        values = [_render_arg(arg) for arg in self.args if arg is not None]
        return f"{spec.flag}={':'.join(values)}"


def _render_arg(arg: OptionArg) -> str:
    if isinstance(arg, TrackChanges):
        return arg.value
    return str(arg)


def to_flags(options: Sequence[ConverterOption]) -> list[str]:
    """Render options as pandoc flags, preserving order."""
    return [option.to_flag() for option in options]


def _error(
    message: str, token: Token, *, unsupported: bool = False
) -> ManifestParseError:
    cls = OptionNotSupportedError if unsupported else ManifestParseError
    return cls(message, line=token.line, column=token.column)


def _decode_arg(spec: OptionSpec, kind: ArgKind, token: Token, idx: int) -> OptionArg:
    if kind in (ArgKind.STRING, ArgKind.PATH):
        if token.kind is not TokenKind.STRING:
            raise _error(
                f"Option `{spec.name}` expects {kind.value} at index {idx}, "
                f"found {token.describe()}",
                token,
            )
        return Path(token.value) if kind is ArgKind.PATH else token.value

    if kind in _INT_RANGES:
        if token.kind is not TokenKind.INT:
            raise _error(
                f"Option `{spec.name}` expects {kind.value} at index {idx}, "
                f"found {token.describe()}",
                token,
            )
        value = int(token.value)
        low, high = _INT_RANGES[kind]
        if not low <= value <= high:
            raise _error(
                f"Option `{spec.name}` argument at index {idx} is out of range "
                f"({low}..{high}): {value}",
                token,
            )
        return value

    if token.kind is not TokenKind.IDENT or token.value not in _TRACK_CHANGES_IDENTS:
        raise _error(
            f"Invalid `{spec.name}` variant at index {idx}: expected "
            f"{kind.value}, found {token.describe()}",
            token,
        )
    return _TRACK_CHANGES_IDENTS[token.value]


def decode_option(raw: RawOption) -> ConverterOption:
    """Decode one option against the option table.

    Raises
    ------
    OptionNotSupportedError
        If the name is a known pandoc option this decoder does not handle.
    ManifestParseError
        If the name is unknown or the arguments do not match its signature.
    """
    name = raw.name.value
    if name in UNSUPPORTED_OPTIONS:
        raise _error(
            f"Option `{name}` with complex/custom type not yet supported",
            raw.name,
            unsupported=True,
        )
    spec = OPTION_SPECS.get(name)
    if spec is None:
        raise _error(f"Unsupported or unknown option `{name}`", raw.name)

    if raw.args is None:
        if not spec.is_flag:
            raise _error(
                f"Option `{name}` requires arguments "
                f"({', '.join(kind.value for kind in spec.params)})",
                raw.name,
            )
        return ConverterOption(name)
    if spec.is_flag:
        raise _error(f"Option `{name}` takes no arguments", raw.name)

    args = raw.args
    if len(args) < spec.min_args:
        raise _error(
            f"Option `{name}` is missing {spec.params[len(args)].value} "
            f"at index {len(args)}",
            raw.name,
        )
    if len(args) > len(spec.params):
        raise _error(
            f"Option `{name}` got unexpected argument at index {len(spec.params)}",
            args[len(spec.params)],
        )

    decoded: list[OptionArg] = [
        _decode_arg(spec, kind, token, idx)
        for idx, (kind, token) in enumerate(zip(spec.params, args))
    ]
    # Pad optional trailing parameters so equal options compare equal.
    decoded.extend([None] * (len(spec.params) - len(decoded)))
    return ConverterOption(name, tuple(decoded))


def decode_options(raw_options: Sequence[RawOption]) -> tuple[ConverterOption, ...]:
    """Decode an option list, preserving order."""
    return tuple(decode_option(raw) for raw in raw_options)
