# links_toggler/main.py
"""Command-line entrypoint.

Converts links of a vault directory:
- wiki-to-md / md-to-wiki over the whole vault (safe mode = dry run)
- --file for a single note
- persisted options live in QSettings
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from PySide6.QtCore import QCoreApplication, QSettings, QThreadPool

from links_toggler.core.config import parse_extensions, parse_folders
from links_toggler.core.models import ConversionSettings, Direction, LinkStyle
from links_toggler.infrastructure.settings_store import SettingsStore, describe_safe_mode
from links_toggler.infrastructure.store import DocumentStoreError, FsDocumentStore
from links_toggler.logging_setup import install_global_exception_hooks, setup_logging
from links_toggler.services.conversion_service import ConversionService
from links_toggler.services.orchestrator import (
    ConversionOrchestrator,
    describe_document_outcome,
    describe_summary,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="links-toggler",
        description="Convert between [[wikilinks]] and [markdown](links) in a vault",
    )
    p.add_argument(
        "--vault",
        type=Path,
        default=Path.cwd(),
        help="Path to the vault folder (default: current directory)",
    )
    p.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="INI file holding persisted settings (default: per-user QSettings)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug output on the console")

    sub = p.add_subparsers(dest="command", required=True)

    for direction in Direction:
        c = sub.add_parser(direction.value, help=f"Convert links ({direction.value})")
        c.add_argument("--file", type=Path, default=None, help="Convert only this note")
        mode = c.add_mutually_exclusive_group()
        mode.add_argument("--apply", action="store_true", help="Write changes even if safe mode is on")
        mode.add_argument("--dry-run", action="store_true", help="Only report what would change")
        c.add_argument("--style", choices=[s.value for s in LinkStyle], default=None)
        c.add_argument("--exclude", default=None, help="Comma-separated extensions to leave alone")
        c.add_argument("--ignore", action="append", default=None, metavar="FOLDER",
                       help="Folder to skip in vault-wide runs (repeatable)")

    sub.add_parser("toggle-safe-mode", help="Toggle safe mode for vault-wide conversions")
    sub.add_parser("show-settings", help="Print the persisted settings")

    ig = sub.add_parser("ignore-folder", help="Manage folders skipped by vault-wide conversions")
    ig.add_argument("action", choices=["add", "remove"])
    ig.add_argument("folder")

    return p.parse_args(argv)


def open_settings(path: Path | None) -> SettingsStore:
    if path is None:
        return SettingsStore()
    return SettingsStore(QSettings(str(path), QSettings.Format.IniFormat))


def effective_settings(args: argparse.Namespace, stored: ConversionSettings) -> ConversionSettings:
    settings = stored
    if args.apply:
        settings = replace(settings, safe_mode=False)
    elif args.dry_run:
        settings = replace(settings, safe_mode=True)
    if args.style:
        settings = replace(settings, link_style=LinkStyle(args.style))
    if args.exclude is not None:
        settings = replace(settings, excluded_extensions=parse_extensions(args.exclude))
    if args.ignore:
        settings = replace(settings, ignored_folders=settings.ignored_folders + parse_folders(args.ignore))
    return settings


def run_file(orchestrator: ConversionOrchestrator, vault: Path, file: Path,
             direction: Direction, settings: ConversionSettings, *, dry_run: bool) -> int:
    rel = file
    if file.is_absolute():
        try:
            rel = file.resolve().relative_to(vault.resolve())
        except ValueError:
            print(f"{file} is not inside {vault}", file=sys.stderr)
            return 1
    try:
        outcome = orchestrator.convert_document(rel.as_posix(), direction, settings, dry_run=dry_run)
    except DocumentStoreError as exc:
        print(f"Failed to convert {rel.as_posix()}: {exc}", file=sys.stderr)
        return 1
    print(describe_document_outcome(outcome))
    return 0


def run_vault(orchestrator: ConversionOrchestrator, direction: Direction,
              settings: ConversionSettings, log) -> int:
    app = QCoreApplication.instance() or QCoreApplication([])
    state: dict = {}

    def on_progress(req_id: int, done: int, total: int, path: str) -> None:
        log.debug("Converting %d/%d %s", done, total, path)

    def on_finished(req_id: int, result: dict) -> None:
        state["result"] = result
        app.quit()

    def on_failed(req_id: int, err: str) -> None:
        state["error"] = err
        app.quit()

    service = ConversionService(
        orchestrator=orchestrator,
        thread_pool=QThreadPool.globalInstance(),
        on_progress=on_progress,
        on_finished=on_finished,
        on_failed=on_failed,
    )
    service.start(direction=direction, settings=settings)
    app.exec()

    if "error" in state:
        print(f"Conversion failed: {state['error']}", file=sys.stderr)
        return 1

    summary = state.get("result")
    if summary is None:
        return 1
    print(describe_summary(summary))
    for path, error in summary.get("errors", {}).items():
        print(f"  {path}: {error}", file=sys.stderr)
    return 1 if summary.get("error_files") else 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    log = setup_logging(verbose=args.verbose)
    install_global_exception_hooks(log)

    store_settings = open_settings(args.settings)

    if args.command == "toggle-safe-mode":
        settings = store_settings.toggle_safe_mode()
        print(f"Safe Mode is now {describe_safe_mode(settings)}")
        return 0

    if args.command == "ignore-folder":
        if args.action == "add":
            settings = store_settings.add_ignored_folder(args.folder)
        else:
            settings = store_settings.remove_ignored_folder(args.folder)
        print("Ignored folders: " + (", ".join(settings.ignored_folders) or "(none)"))
        return 0

    if args.command == "show-settings":
        settings = store_settings.load()
        print(f"Safe mode: {describe_safe_mode(settings)}")
        print(f"Link style: {settings.link_style.value}")
        print("Excluded extensions: " + (",".join(sorted(settings.excluded_extensions)) or "(none)"))
        print("Ignored folders: " + (", ".join(settings.ignored_folders) or "(none)"))
        return 0

    direction = Direction(args.command)
    settings = effective_settings(args, store_settings.load())
    orchestrator = ConversionOrchestrator(FsDocumentStore(args.vault))

    if args.file is not None:
        return run_file(orchestrator, args.vault, args.file, direction, settings, dry_run=args.dry_run)
    return run_vault(orchestrator, direction, settings, log)


if __name__ == "__main__":
    raise SystemExit(main())
