# links_toggler/core/formatter.py

from __future__ import annotations

from urllib.parse import quote

from .models import LinkStyle
from .paths import extension_of, is_uri, relative_path


# encodeURI keeps these; "(" and ")" are dropped so the destination
# cannot close the markdown link early, "^" is kept for block references.
_LINK_PATH_SAFE = "/#;,?:@&=+$!*'^"


def format_markdown_path(resolved_path: str, current_path: str | None, style: LinkStyle | str) -> str:
    """
    Render a corpus path as a markdown-link destination.

      absolute: Folder/Note.md -> /Folder/Note.md
      relative: Folder/Note.md from Folder/Sub/Current.md -> ../Note.md
    """
    if is_uri(resolved_path):
        return resolved_path

    if LinkStyle(style) is LinkStyle.RELATIVE and current_path:
        return relative_path(current_path, resolved_path.lstrip("/"))

    if resolved_path.startswith("/"):
        return resolved_path
    return "/" + resolved_path


def is_excluded(path: str, excluded_extensions) -> bool:
    if not excluded_extensions:
        return False
    ext = extension_of(path)
    return bool(ext) and ext in excluded_extensions


def encode_link_path(path: str) -> str:
    """'/My Notes/a b.md#^x' -> '/My%20Notes/a%20b.md#^x'"""
    return quote(path, safe=_LINK_PATH_SAFE)
