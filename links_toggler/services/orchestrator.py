# links_toggler/services/orchestrator.py

from __future__ import annotations

import logging
import threading
from typing import Callable

from PySide6.QtCore import QRunnable, QThreadPool

from links_toggler.core.converter import convert_links
from links_toggler.core.models import (
    DEFAULT_EXTENSION,
    ConversionResult,
    ConversionSettings,
    Direction,
    Document,
    DocumentOutcome,
    OutcomeStatus,
)
from links_toggler.core.paths import is_in_folder, normalize_folder_path
from links_toggler.core.resolver import CorpusIndex, TargetResolver
from links_toggler.infrastructure.store import DocumentStore
from links_toggler.settings import APP_NAME


log = logging.getLogger(APP_NAME)

# on_progress(done, total, path)
ProgressCallback = Callable[[int, int, str], None]


class _WriteTask(QRunnable):
    """Writes one converted document; the outcome is filled in place."""

    def __init__(self, store: DocumentStore, outcome: DocumentOutcome):
        super().__init__()
        self.setAutoDelete(False)
        self.store = store
        self.outcome = outcome

    def run(self) -> None:
        try:
            self.store.write(self.outcome.path, self.outcome.new_text)
            self.outcome.status = OutcomeStatus.CHANGED
        except Exception as exc:
            self.outcome.status = OutcomeStatus.FAILED
            self.outcome.error = str(exc)


class ConversionOrchestrator:
    """
    Runs link conversion over one document or the whole corpus of a store.

    Settings are passed into every call; the orchestrator keeps no
    configuration of its own.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        thread_pool: QThreadPool | None = None,
        kind: str = DEFAULT_EXTENSION,
    ):
        self.store = store
        self.kind = kind.lower()
        # Private pool: waitForDone() must not wait on the caller's own worker.
        self._pool = thread_pool if thread_pool is not None else QThreadPool()
        self.last_result: ConversionResult | None = None

    # ───────────────────────── public API ─────────────────────────

    def build_resolver(self, documents: list[Document] | None = None) -> TargetResolver:
        if documents is None:
            documents = self.store.list_documents(None)
        lookup = getattr(self.store, "resolve_reference", None)
        return TargetResolver(CorpusIndex(documents), lookup=lookup, default_extension=self.kind)

    def convert_text(
        self,
        text: str,
        direction: Direction,
        current_path: str,
        settings: ConversionSettings,
        *,
        resolver: TargetResolver | None = None,
    ) -> str:
        resolver = resolver or self.build_resolver()
        return convert_links(text, direction, current_path, resolver, settings)

    def convert_document(
        self,
        path: str,
        direction: Direction,
        settings: ConversionSettings,
        *,
        dry_run: bool = False,
    ) -> DocumentOutcome:
        """
        Convert a single document and write it back when it changed.

        Store errors propagate to the caller.
        """
        original = self.store.read(path)
        converted = self.convert_text(original, direction, path, settings)

        if converted == original:
            log.info("No links to convert: path=%s direction=%s", path, Direction(direction).value)
            return DocumentOutcome(path, OutcomeStatus.UNCHANGED)

        if dry_run:
            return DocumentOutcome(path, OutcomeStatus.WOULD_CHANGE, new_text=converted)

        self.store.write(path, converted)
        log.info("Converted links: path=%s direction=%s", path, Direction(direction).value)
        return DocumentOutcome(path, OutcomeStatus.CHANGED, new_text=converted)

    def convert_corpus(
        self,
        direction: Direction,
        settings: ConversionSettings,
        *,
        cancel_event: threading.Event | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ConversionResult:
        """
        Convert every document of the managed kind outside ignored folders.

        With safe_mode only would-change documents are tallied. Otherwise
        changed documents are written concurrently; a failed write marks
        that document FAILED and leaves the others alone. A canceled pass
        writes nothing.
        """
        direction = Direction(direction)
        dry_run = bool(settings.safe_mode)
        result = ConversionResult(direction=direction, dry_run=dry_run)

        documents = self.store.list_documents(None)
        resolver = self.build_resolver(documents)

        ignored = [normalize_folder_path(f) for f in settings.ignored_folders]
        targets = [
            d for d in documents
            if d.extension.lower() == self.kind and not is_in_folder(d.path, ignored)
        ]

        log.info(
            "Vault conversion started: direction=%s files=%d dry_run=%s",
            direction.value, len(targets), dry_run,
        )

        total = len(targets)
        for done, doc in enumerate(targets, start=1):
            if cancel_event is not None and cancel_event.is_set():
                result.canceled = True
                break

            if on_progress is not None:
                on_progress(done, total, doc.path)

            result.outcomes.append(self._scan_document(doc.path, direction, settings, resolver))

        pending = [o for o in result.outcomes if o.status is OutcomeStatus.WOULD_CHANGE]
        if not dry_run and not result.canceled and pending:
            self._apply(pending)

        for outcome in result.failed:
            log.warning("Conversion failed: path=%s error=%s", outcome.path, outcome.error)

        log.info(
            "Vault conversion finished: total=%d affected=%d applied=%d errors=%d canceled=%s",
            result.total, result.affected, result.applied, len(result.failed), result.canceled,
        )
        self.last_result = result
        return result

    # ───────────────────────── internal ─────────────────────────

    def _scan_document(
        self,
        path: str,
        direction: Direction,
        settings: ConversionSettings,
        resolver: TargetResolver,
    ) -> DocumentOutcome:
        try:
            original = self.store.read(path)
        except Exception as exc:
            return DocumentOutcome(path, OutcomeStatus.FAILED, error=str(exc))

        converted = convert_links(original, direction, path, resolver, settings)
        if converted == original:
            return DocumentOutcome(path, OutcomeStatus.UNCHANGED)
        return DocumentOutcome(path, OutcomeStatus.WOULD_CHANGE, new_text=converted)

    def _apply(self, outcomes: list[DocumentOutcome]) -> None:
        tasks = [_WriteTask(self.store, o) for o in outcomes]
        for task in tasks:
            self._pool.start(task)
        self._pool.waitForDone()


# ───────────────────────── notifications ─────────────────────────


def describe_result(result: ConversionResult) -> str:
    return describe_summary(result.to_dict())


def describe_summary(summary: dict) -> str:
    """Notification text for a ConversionResult.to_dict() payload."""
    failed = len(summary.get("error_files", ()))
    if summary.get("dry_run"):
        msg = (
            f"Safe mode: {summary.get('affected_files', 0)} file(s) would be modified. "
            "Disable safe mode to apply changes."
        )
    else:
        msg = f"Converted links in {summary.get('applied_files', 0)} file(s)"
        if failed:
            msg += f"; {failed} file(s) could not be updated"
    if summary.get("canceled"):
        msg += " (canceled)"
    return msg


def describe_document_outcome(outcome: DocumentOutcome) -> str:
    if outcome.status is OutcomeStatus.CHANGED:
        return "Converted links in current file"
    if outcome.status is OutcomeStatus.WOULD_CHANGE:
        return "Links would be converted in current file"
    return "No links to convert in current file"
