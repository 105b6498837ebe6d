import sys
import os
import threading

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from PySide6.QtCore import QCoreApplication, QThreadPool

from links_toggler.core.models import ConversionSettings, Direction
from links_toggler.infrastructure.store import InMemoryDocumentStore
from links_toggler.services.conversion_service import ConversionService
from links_toggler.services.orchestrator import ConversionOrchestrator
from links_toggler.workers.convert_vault import ConvertVaultWorker


def _store():
    return InMemoryDocumentStore({
        "Note.md": "# Note\n",
        "A.md": "[[Note]]\n",
        "B.md": "[[Note|b]]\n",
    })


def test_worker_emits_progress_and_result():
    store = _store()
    worker = ConvertVaultWorker(
        req_id=7,
        orchestrator=ConversionOrchestrator(store),
        direction=Direction.WIKI_TO_MD,
        settings=ConversionSettings(safe_mode=False),
        cancel_event=threading.Event(),
    )
    progress = []
    finished = []
    worker.signals.progress.connect(lambda rid, done, total, path: progress.append((rid, done, total, path)))
    worker.signals.finished.connect(lambda rid, res: finished.append((rid, res)))

    worker.run()

    assert progress == [(7, 1, 3, "A.md"), (7, 2, 3, "B.md"), (7, 3, 3, "Note.md")]
    assert len(finished) == 1
    rid, res = finished[0]
    assert rid == 7
    assert res["affected_files"] == 2
    assert res["applied_files"] == 2
    assert res["canceled"] is False
    assert worker.result.applied == 2
    assert store.snapshot()["B.md"] == "[b](/Note.md)\n"


def test_worker_reports_failure():
    class Broken(InMemoryDocumentStore):
        def list_documents(self, kind=None):
            raise RuntimeError("store unreachable")

    worker = ConvertVaultWorker(
        req_id=1,
        orchestrator=ConversionOrchestrator(Broken()),
        direction=Direction.WIKI_TO_MD,
        settings=ConversionSettings(),
        cancel_event=threading.Event(),
    )
    failed = []
    worker.signals.failed.connect(lambda rid, err: failed.append((rid, err)))

    worker.run()

    assert failed == [(1, "store unreachable")]


def test_service_runs_in_background(qapp):
    pool = QThreadPool()
    finished = []
    service = ConversionService(
        orchestrator=ConversionOrchestrator(_store()),
        thread_pool=pool,
        on_progress=lambda *args: None,
        on_finished=lambda rid, res: finished.append((rid, res)),
        on_failed=lambda rid, err: finished.append((rid, err)),
    )

    req_id = service.start(direction=Direction.WIKI_TO_MD, settings=ConversionSettings())
    pool.waitForDone()
    QCoreApplication.processEvents()

    assert len(finished) == 1
    assert finished[0][0] == req_id
    assert finished[0][1]["dry_run"] is True
    assert finished[0][1]["affected_files"] == 2


def test_service_drops_stale_results():
    finished = []
    service = ConversionService(
        orchestrator=ConversionOrchestrator(_store()),
        thread_pool=QThreadPool(),
        on_progress=lambda *args: finished.append(("progress",) + args),
        on_finished=lambda rid, res: finished.append(("finished", rid)),
        on_failed=lambda rid, err: finished.append(("failed", rid)),
    )
    service._req_id = 2

    service._handle_finished(1, {})
    service._handle_failed(1, "old")
    service._handle_progress(1, 1, 1, "A.md")
    assert finished == []

    service._handle_finished(2, {})
    assert finished == [("finished", 2)]
