# links_toggler/infrastructure/store.py

from __future__ import annotations

import os
import threading
import uuid
from pathlib import Path
from typing import Iterable, Mapping

from links_toggler.core.models import Document


class DocumentStoreError(OSError):
    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class DocumentStore:
    """
    What the converter needs from the host.

    list_documents(kind) lists documents whose extension is `kind`
    (every document when kind is None). A store may also define
    resolve_reference(raw_target, source_path) -> Document | None to take
    over wiki-link lookups.
    """

    def list_documents(self, kind: str | None = None) -> list[Document]:
        raise NotImplementedError

    def read(self, path: str) -> str:
        raise NotImplementedError

    def write(self, path: str, text: str) -> None:
        raise NotImplementedError


def _matches_kind(path: str, kind: str | None) -> bool:
    if kind is None:
        return True
    return path.lower().endswith("." + kind.lower().lstrip("."))


class InMemoryDocumentStore(DocumentStore):
    """Dictionary-backed store: {"Folder/Note.md": "text"}."""

    def __init__(self, documents: Mapping[str, str] | Iterable[Document] = ()):
        self._lock = threading.Lock()
        self._docs: dict[str, str] = {}
        if isinstance(documents, Mapping):
            self._docs.update(documents)
        else:
            for doc in documents:
                self._docs[doc.path] = doc.text
        self.writes: list[str] = []

    def list_documents(self, kind: str | None = None) -> list[Document]:
        with self._lock:
            paths = sorted(self._docs)
        return [Document(p) for p in paths if _matches_kind(p, kind)]

    def read(self, path: str) -> str:
        with self._lock:
            try:
                return self._docs[path]
            except KeyError:
                raise DocumentStoreError(path, "no such document") from None

    def write(self, path: str, text: str) -> None:
        with self._lock:
            if path not in self._docs:
                raise DocumentStoreError(path, "no such document")
            self._docs[path] = text
            self.writes.append(path)

    def snapshot(self) -> dict[str, str]:
        with self._lock:
            return dict(self._docs)


class FsDocumentStore(DocumentStore):
    """
    A vault directory on disk. Paths are vault-relative with "/" separators;
    dot-folders (.obsidian, .git, ...) and dot-files are not part of the corpus.
    """

    def __init__(self, vault_dir: Path, *, encoding: str = "utf-8"):
        self.vault_dir = Path(vault_dir)
        self.encoding = encoding

    def list_documents(self, kind: str | None = None) -> list[Document]:
        docs: list[Document] = []
        for path in self.vault_dir.rglob("*"):
            rel = path.relative_to(self.vault_dir)
            if any(part.startswith(".") for part in rel.parts):
                continue
            if not path.is_file():
                continue
            rel_path = rel.as_posix()
            if _matches_kind(rel_path, kind):
                docs.append(Document(rel_path))
        return sorted(docs, key=lambda d: d.path)

    def full_path(self, path: str) -> Path:
        full = (self.vault_dir / path).resolve()
        root = self.vault_dir.resolve()
        if full != root and root not in full.parents:
            raise DocumentStoreError(path, "outside of vault")
        return full

    def read(self, path: str) -> str:
        try:
            # newline="" keeps \r\n intact for the write back
            with open(self.full_path(path), "r", encoding=self.encoding, newline="") as f:
                return f.read()
        except DocumentStoreError:
            raise
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentStoreError(path, str(exc)) from exc

    def write(self, path: str, text: str) -> None:
        target = self.full_path(path)
        tmp = target.with_name(f".{target.name}.tmp-{uuid.uuid4().hex}")
        try:
            with open(tmp, "w", encoding=self.encoding, newline="") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            tmp.replace(target)
        except OSError as exc:
            raise DocumentStoreError(path, str(exc)) from exc
        finally:
            if tmp.exists():
                try:
                    tmp.unlink()
                except OSError:
                    pass
