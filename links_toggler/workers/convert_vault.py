# links_toggler/workers/convert_vault.py

from __future__ import annotations

import threading

from PySide6.QtCore import QObject, QRunnable, Signal

from links_toggler.core.models import ConversionResult, ConversionSettings, Direction
from links_toggler.services.orchestrator import ConversionOrchestrator


class ConvertVaultSignals(QObject):
    """
    Signals emitted by ConvertVaultWorker.

    progress(req_id, done, total, path)
    finished(req_id, result_dict)
    failed(req_id, error_message)
    """
    progress = Signal(int, int, int, str)
    finished = Signal(int, dict)
    failed = Signal(int, str)


class ConvertVaultWorker(QRunnable):
    """
    Background worker running one bulk conversion pass.

    No UI code; the last result stays available as `result`.
    """

    def __init__(
        self,
        *,
        req_id: int,
        orchestrator: ConversionOrchestrator,
        direction: Direction,
        settings: ConversionSettings,
        cancel_event: threading.Event,
    ):
        super().__init__()
        self.req_id = req_id
        self.orchestrator = orchestrator
        self.direction = Direction(direction)
        self.settings = settings
        self.cancel_event = cancel_event
        self.result: ConversionResult | None = None

        self.signals = ConvertVaultSignals()

    def run(self) -> None:
        try:
            self.result = self.orchestrator.convert_corpus(
                self.direction,
                self.settings,
                cancel_event=self.cancel_event,
                on_progress=self._emit_progress,
            )
            self.signals.finished.emit(self.req_id, self.result.to_dict())
        except Exception as exc:
            self.signals.failed.emit(self.req_id, str(exc))

    def _emit_progress(self, done: int, total: int, path: str) -> None:
        self.signals.progress.emit(self.req_id, done, total, path)
