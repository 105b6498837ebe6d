# links_toggler/core/tokenizer.py

from __future__ import annotations

import re
from typing import Iterator, Union
from urllib.parse import unquote

from .models import Direction, LinkToken, TokenKind
from .paths import is_uri


# [[target]]
# [[target|alias]]
# [[target#heading|alias]]
# ![[embed.png]]
WIKILINK_RE = re.compile(r"(?P<bang>!?)\[\[(?P<inner>[^\[\]]+)\]\]")

# [text](path)
# [text](path "title")
# ![alt](image.png)
MDLINK_RE = re.compile(
    r'(?P<bang>!?)\[(?P<text>[^\]]+?)\]'
    r'\((?P<path>(?:\\.|[^\\\s)])+)(?:\s+"[^"]*")?\)'
)

_UNESCAPED_PIPE_RE = re.compile(r"(?<!\\)\|")
_PATH_ESCAPE_RE = re.compile(r"\\([\s()])")

Segment = Union[str, LinkToken]


class TokenStream:
    """
    Restartable view over the segments of one text.

    Iterating yields literal strings and LinkTokens in document order;
    "".join(seg if isinstance(seg, str) else seg.raw for seg in stream)
    is always the original text.
    """

    def __init__(self, text: str, direction: Direction):
        self.text = text or ""
        self.direction = Direction(direction)

    def __iter__(self) -> Iterator[Segment]:
        if self.direction is Direction.WIKI_TO_MD:
            return _scan(self.text, WIKILINK_RE, _wiki_token)
        return _scan(self.text, MDLINK_RE, _markdown_token)

    def tokens(self) -> Iterator[LinkToken]:
        for seg in self:
            if isinstance(seg, LinkToken):
                yield seg


def scan(text: str, direction: Direction) -> TokenStream:
    return TokenStream(text, direction)


# ───────────────────────── helpers ─────────────────────────


def _scan(text: str, pattern: re.Pattern, build) -> Iterator[Segment]:
    pos = 0
    for match in pattern.finditer(text):
        if match.start() > pos:
            yield text[pos:match.start()]
        token = build(match)
        yield token if token is not None else match.group(0)
        pos = match.end()
    if pos < len(text):
        yield text[pos:]


def _wiki_token(match: re.Match) -> LinkToken | None:
    raw = match.group(0)
    if match.group("bang"):
        return LinkToken(match.start(), match.end(), TokenKind.IMAGE, raw, target=match.group("inner"))

    parts = _UNESCAPED_PIPE_RE.split(match.group("inner"), maxsplit=1)
    target_and_fragment = parts[0].strip()
    alias = parts[1].strip() if len(parts) > 1 else None

    base, fragment = _split_fragment(target_and_fragment)
    if not base:
        return None

    return LinkToken(
        start=match.start(),
        end=match.end(),
        kind=TokenKind.WIKI,
        raw=raw,
        target=base,
        alias=alias,
        fragment=fragment,
    )


def _markdown_token(match: re.Match) -> LinkToken | None:
    raw = match.group(0)
    text = match.group("text")
    path = _PATH_ESCAPE_RE.sub(r"\1", match.group("path"))

    if match.group("bang"):
        return LinkToken(match.start(), match.end(), TokenKind.IMAGE, raw, target=path, alias=text)

    link_path, fragment = _split_fragment(path)
    if not link_path or is_uri(link_path):
        return None

    return LinkToken(
        start=match.start(),
        end=match.end(),
        kind=TokenKind.MARKDOWN,
        raw=raw,
        target=unquote(link_path),
        alias=text,
        fragment=unquote(fragment) if fragment is not None else None,
    )


def _split_fragment(value: str) -> tuple[str, str | None]:
    """
    'Note#Heading' -> ('Note', 'Heading')
    'Note#^block'  -> ('Note', '^block')
    """
    if "#" not in value:
        return value.strip(), None
    base, fragment = value.split("#", 1)
    fragment = fragment.strip()
    return base.strip(), fragment or None
