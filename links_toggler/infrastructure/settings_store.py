# links_toggler/infrastructure/settings_store.py

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from PySide6.QtCore import QSettings

from links_toggler.core.config import settings_from_mapping, settings_to_mapping
from links_toggler.core.models import ConversionSettings
from links_toggler.core.paths import normalize_folder_path
from links_toggler.settings import APP_NAME


log = logging.getLogger(APP_NAME)


@dataclass(frozen=True)
class SettingsKeys:
    EXCLUDED_EXTENSIONS: str = "conversion/excludedExtensions"
    SAFE_MODE: str = "conversion/safeMode"
    LINK_STYLE: str = "conversion/linkStyle"
    IGNORED_FOLDERS: str = "conversion/ignoredFolders"


_KEY_FIELDS = {
    SettingsKeys.EXCLUDED_EXTENSIONS: "excludedExtensions",
    SettingsKeys.SAFE_MODE: "safeMode",
    SettingsKeys.LINK_STYLE: "linkStyle",
    SettingsKeys.IGNORED_FOLDERS: "ignoredFolders",
}


def default_qsettings() -> QSettings:
    return QSettings(APP_NAME, APP_NAME)


class SettingsStore:
    """
    Loads and saves ConversionSettings through QSettings.

    Whatever is stored, load() returns usable settings: unreadable or
    malformed values fall back to defaults.
    """

    def __init__(self, settings: QSettings | None = None):
        self._settings = settings if settings is not None else default_qsettings()

    def load(self) -> ConversionSettings:
        raw: dict = {}
        for key, name in _KEY_FIELDS.items():
            try:
                if not self._settings.contains(key):
                    continue
                raw[name] = self._settings.value(key)
            except Exception:
                log.exception("Failed to read setting %s", key)
        return settings_from_mapping(raw)

    def save(self, settings: ConversionSettings) -> None:
        data = settings_to_mapping(settings)
        for key, name in _KEY_FIELDS.items():
            self._settings.setValue(key, data[name])
        self._settings.sync()

    def toggle_safe_mode(self) -> ConversionSettings:
        settings = self.load()
        settings = replace(settings, safe_mode=not settings.safe_mode)
        self.save(settings)
        log.info("Safe mode toggled: safe_mode=%s", settings.safe_mode)
        return settings

    def add_ignored_folder(self, folder: str) -> ConversionSettings:
        settings = self.load()
        normalized = normalize_folder_path(folder)
        if normalized and normalized not in settings.ignored_folders:
            settings = replace(settings, ignored_folders=settings.ignored_folders + (normalized,))
            self.save(settings)
        return settings

    def remove_ignored_folder(self, folder: str) -> ConversionSettings:
        settings = self.load()
        normalized = normalize_folder_path(folder)
        if normalized in settings.ignored_folders:
            settings = replace(
                settings,
                ignored_folders=tuple(f for f in settings.ignored_folders if f != normalized),
            )
            self.save(settings)
        return settings


def describe_safe_mode(settings: ConversionSettings) -> str:
    return "ON (Dry Run)" if settings.safe_mode else "OFF (Writes Enabled)"
