# links_toggler/services/conversion_service.py

from __future__ import annotations

import threading

from PySide6.QtCore import QObject, QThreadPool, Slot

from links_toggler.core.models import ConversionSettings, Direction
from links_toggler.services.orchestrator import ConversionOrchestrator
from links_toggler.workers.convert_vault import ConvertVaultWorker


class ConversionService(QObject):
    """
    Runs vault-wide conversions in the background.

    Responsibilities:
    - manage req_id / cancel
    - start ConvertVaultWorker
    - drop stale results
    """

    def __init__(
        self,
        *,
        orchestrator: ConversionOrchestrator,
        thread_pool: QThreadPool,
        on_progress,
        on_finished,
        on_failed,
    ):
        super().__init__()

        self._orchestrator = orchestrator
        self._pool = thread_pool
        self._on_progress = on_progress
        self._on_finished = on_finished
        self._on_failed = on_failed

        self._req_id = 0
        self._cancel_event: threading.Event | None = None
        self._worker: ConvertVaultWorker | None = None

    # ───────────────────────── public API ─────────────────────────

    def start(self, *, direction: Direction, settings: ConversionSettings) -> int:
        """
        Start a conversion; an unfinished earlier one is canceled and its
        result ignored. Returns the request id.
        """
        self.cancel()

        self._req_id += 1
        req_id = self._req_id

        self._cancel_event = threading.Event()

        worker = ConvertVaultWorker(
            req_id=req_id,
            orchestrator=self._orchestrator,
            direction=direction,
            settings=settings,
            cancel_event=self._cancel_event,
        )

        worker.signals.progress.connect(
            lambda rid, done, total, path: self._handle_progress(rid, done, total, path)
        )
        worker.signals.finished.connect(
            lambda rid, res: self._handle_finished(rid, res)
        )
        worker.signals.failed.connect(
            lambda rid, err: self._handle_failed(rid, err)
        )

        self._worker = worker
        self._pool.start(worker)
        return req_id

    def cancel(self) -> None:
        if self._cancel_event is not None:
            self._cancel_event.set()

    # ───────────────────────── internal ─────────────────────────

    @Slot(int, int, int, str)
    def _handle_progress(self, req_id: int, done: int, total: int, path: str) -> None:
        if req_id != self._req_id:
            return
        self._on_progress(req_id, done, total, path)

    @Slot(int, dict)
    def _handle_finished(self, req_id: int, result: dict) -> None:
        if req_id != self._req_id:
            return
        self._worker = None
        self._cancel_event = None
        self._on_finished(req_id, result)

    @Slot(int, str)
    def _handle_failed(self, req_id: int, err: str) -> None:
        if req_id != self._req_id:
            return
        self._worker = None
        self._cancel_event = None
        self._on_failed(req_id, err)
