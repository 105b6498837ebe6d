# links_toggler/core/config.py

from __future__ import annotations

from typing import Any, Mapping

from .models import DEFAULT_EXCLUDED_EXTENSIONS, ConversionSettings, LinkStyle
from .paths import normalize_folder_path


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_extensions(value: Any, default: str = "") -> frozenset[str]:
    """
    "png, .JPG,pdf" -> {"png", "jpg", "pdf"}
    """
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = [str(x) for x in value]
    else:
        items = default.split(",")
    out = set()
    for item in items:
        ext = item.strip().lstrip(".").lower()
        if ext:
            out.add(ext)
    return frozenset(out)


def parse_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in _TRUE:
            return True
        if v in _FALSE:
            return False
    return default


def parse_link_style(value: Any) -> LinkStyle:
    try:
        return LinkStyle(str(value).strip().lower())
    except ValueError:
        return LinkStyle.ABSOLUTE


def parse_folders(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    out: list[str] = []
    for item in value:
        if not isinstance(item, str):
            continue
        folder = normalize_folder_path(item)
        if folder and folder not in out:
            out.append(folder)
    return tuple(out)


def settings_from_mapping(data: Mapping[str, Any] | None) -> ConversionSettings:
    """
    Build settings from a persisted record, falling back to defaults for
    anything missing or malformed.
    """
    if not isinstance(data, Mapping):
        data = {}
    return ConversionSettings(
        excluded_extensions=parse_extensions(
            data.get("excludedExtensions"), DEFAULT_EXCLUDED_EXTENSIONS
        ),
        safe_mode=parse_bool(data.get("safeMode"), True),
        link_style=parse_link_style(data.get("linkStyle", LinkStyle.ABSOLUTE.value)),
        ignored_folders=parse_folders(data.get("ignoredFolders")),
    )


def settings_to_mapping(settings: ConversionSettings) -> dict[str, Any]:
    return {
        "excludedExtensions": ",".join(sorted(settings.excluded_extensions)),
        "safeMode": settings.safe_mode,
        "linkStyle": settings.link_style.value,
        "ignoredFolders": list(settings.ignored_folders),
    }
