# links_toggler/core/converter.py

from __future__ import annotations

import logging

from .formatter import encode_link_path, format_markdown_path, is_excluded
from .models import ConversionSettings, Direction, LinkToken, TokenKind
from .resolver import TargetResolver
from .tokenizer import scan
from ..settings import APP_NAME


log = logging.getLogger(APP_NAME)


def convert_links(
    text: str,
    direction: Direction,
    current_path: str,
    resolver: TargetResolver,
    settings: ConversionSettings,
) -> str:
    """
    Rewrite every link of the source notation found in `text`.

    Tokens that cannot be resolved, point at an excluded extension or are
    images are copied through untouched, so a text without convertible
    links comes back equal to the input.
    """
    if not text:
        return text

    direction = Direction(direction)
    if direction is Direction.WIKI_TO_MD:
        rewrite = _wiki_to_markdown
    else:
        rewrite = _markdown_to_wiki

    out: list[str] = []
    rewritten = 0
    for seg in scan(text, direction):
        if isinstance(seg, str):
            out.append(seg)
            continue

        new = seg.raw
        if seg.kind is not TokenKind.IMAGE:
            try:
                new = rewrite(seg, current_path, resolver, settings)
            except Exception:
                log.exception("Failed to rewrite link %r in %s", seg.raw, current_path)
                new = seg.raw

        if new != seg.raw:
            rewritten += 1
        out.append(new)

    if not rewritten:
        return text

    log.debug("Rewrote %d link(s) in %s (%s)", rewritten, current_path, direction.value)
    return "".join(out)


# ───────────────────────── helpers ─────────────────────────


def _wiki_to_markdown(
    token: LinkToken,
    current_path: str,
    resolver: TargetResolver,
    settings: ConversionSettings,
) -> str:
    target = resolver.resolve_wikilink(token.target, current_path)
    if not target.resolved:
        return token.raw

    if is_excluded(target.path, settings.excluded_extensions):
        return token.raw

    path = format_markdown_path(target.path, current_path, settings.link_style)
    if token.fragment:
        path = f"{path}#{token.fragment}"

    return f"[{token.label}]({encode_link_path(path)})"


def _markdown_to_wiki(
    token: LinkToken,
    current_path: str,
    resolver: TargetResolver,
    settings: ConversionSettings,
) -> str:
    doc = resolver.document_for(token.target, current_path)
    if doc is None or is_excluded(doc.path, settings.excluded_extensions):
        return token.raw

    target = resolver.resolve_markdown_link(token.target, current_path)
    if not target.resolved:
        return token.raw

    display = target.path
    core = f"{display}#{token.fragment}" if token.fragment else display

    text = token.alias or ""
    if text in (_strip_extension(display, resolver.default_extension), display, core):
        return f"[[{core}]]"
    return f"[[{core}|{text}]]"


def _strip_extension(name: str, extension: str) -> str:
    suffix = "." + extension
    if name.lower().endswith(suffix):
        return name[: -len(suffix)]
    return name
