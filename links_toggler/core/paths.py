# links_toggler/core/paths.py

from __future__ import annotations

import re


URI_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")


def is_uri(value: str) -> bool:
    return bool(URI_RE.match(value or ""))


def normalize_folder_path(path: str | None) -> str:
    """
    "/Templates/" -> "Templates"
    """
    if not path:
        return ""
    p = str(path).strip().replace("\\", "/")
    if p.startswith("/"):
        p = p[1:]
    if p.endswith("/"):
        p = p[:-1]
    return p


def is_in_folder(path: str, folders) -> bool:
    for folder in folders or ():
        if not folder:
            continue
        if path == folder or path.startswith(folder + "/"):
            return True
    return False


def folder_of(path: str) -> str:
    return path.rsplit("/", 1)[0] if "/" in path else ""


def folder_parts(path: str) -> list[str]:
    """Folder segments of a file path: "A/B/C.md" -> ["A", "B"]."""
    return path.split("/")[:-1] if path else []


def extension_of(path: str) -> str:
    name = path.rsplit("/", 1)[-1]
    if "." not in name.lstrip("."):
        return ""
    return name.rsplit(".", 1)[-1].lower()


def join_relative(current_path: str, link_path: str) -> str:
    """
    Resolve link_path against the folder of current_path.

    "."  is skipped, ".." pops one folder (no-op at the root).
    """
    stack = folder_parts(current_path)
    for segment in link_path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if stack:
                stack.pop()
        else:
            stack.append(segment)
    return "/".join(stack)


def relative_path(from_path: str, to_path: str) -> str:
    """
    Path from the folder of from_path to to_path.

    relative_path("Folder/Sub/Current.md", "Folder/Note.md") -> "../Note.md"
    """
    from_parts = folder_parts(from_path)
    to_parts = to_path.split("/")

    common = 0
    while (
        common < len(from_parts)
        and common < len(to_parts)
        and from_parts[common] == to_parts[common]
    ):
        common += 1

    segments = [".."] * (len(from_parts) - common) + to_parts[common:]
    if not segments:
        return to_parts[-1]
    return "/".join(segments)
