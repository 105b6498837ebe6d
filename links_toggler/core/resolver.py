# links_toggler/core/resolver.py

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from .models import DEFAULT_EXTENSION, Direction, Document, ResolvedTarget
from .paths import folder_of, is_uri, join_relative
from ..settings import APP_NAME


log = logging.getLogger(APP_NAME)

# (raw_target, source_path) -> Document | None
ReferenceLookup = Callable[[str, str], Optional[Document]]


class CorpusIndex:
    """
    Read-only snapshot of corpus paths for link lookups.

    by_path       exact path -> Document
    by_key        case-folded path -> [Document, ...]
    """

    def __init__(self, documents: Iterable[Document | str] = ()) -> None:
        self.by_path: dict[str, Document] = {}
        self.by_key: dict[str, list[Document]] = {}
        for doc in documents:
            if isinstance(doc, str):
                doc = Document(doc)
            self.by_path[doc.path] = doc
            self.by_key.setdefault(doc.path.casefold(), []).append(doc)

    def __len__(self) -> int:
        return len(self.by_path)

    def __contains__(self, path: str) -> bool:
        return path in self.by_path

    def get(self, path: str) -> Document | None:
        return self.by_path.get(path)

    def resolve_reference(self, raw_target: str, source_path: str) -> Document | None:
        """
        Find the document a link reference points at.

        Tried in order: exact path, path next to the source document,
        case-insensitive path or path suffix ("Note.md" matches
        "Folder/Note.md"). Ties prefer the source folder, then the
        shallowest path, then alphabetical order.
        """
        ref = (raw_target or "").strip().lstrip("/")
        if not ref:
            return None

        doc = self.by_path.get(ref)
        if doc is not None:
            return doc

        source_folder = folder_of(source_path or "")
        if source_folder:
            doc = self.by_path.get(f"{source_folder}/{ref}")
            if doc is not None:
                return doc

        key = ref.casefold()
        suffix = "/" + key
        candidates = [
            d
            for k, docs in self.by_key.items()
            if k == key or k.endswith(suffix)
            for d in docs
        ]
        if not candidates:
            return None

        source_key = source_folder.casefold()

        def rank(d: Document) -> tuple:
            return (
                d.folder.casefold() != source_key,
                d.path.count("/"),
                d.path.casefold(),
                d.path,
            )

        return min(candidates, key=rank)


class TargetResolver:
    """
    Resolve raw link targets against a corpus snapshot.

    `lookup` replaces the built-in reference search for wiki-links when the
    host offers a richer one; markdown paths are always looked up verbatim.
    """

    def __init__(
        self,
        index: CorpusIndex,
        *,
        lookup: ReferenceLookup | None = None,
        default_extension: str = DEFAULT_EXTENSION,
    ) -> None:
        self.index = index
        self.lookup = lookup or index.resolve_reference
        self.default_extension = default_extension.lower()

    @classmethod
    def from_documents(cls, documents: Iterable[Document | str], **kwargs) -> "TargetResolver":
        return cls(CorpusIndex(documents), **kwargs)

    def resolve(self, raw_base: str, current_path: str, direction: Direction) -> ResolvedTarget:
        if Direction(direction) is Direction.WIKI_TO_MD:
            return self.resolve_wikilink(raw_base, current_path)
        return self.resolve_markdown_link(raw_base, current_path)

    def resolve_wikilink(self, raw_base: str, current_path: str) -> ResolvedTarget:
        """
        'Note' -> 'Folder/Note.md'. Tries the default extension first,
        then the reference as written.
        """
        base = (raw_base or "").strip()
        if not base:
            return ResolvedTarget(raw_base)

        for candidate in (f"{base}.{self.default_extension}", base):
            try:
                doc = self.lookup(candidate, current_path or "")
            except Exception:
                log.exception("Reference lookup failed: target=%s source=%s", candidate, current_path)
                doc = None
            if doc is not None:
                return ResolvedTarget(doc.path, resolved=True)

        log.debug("Unresolved wikilink: target=%s source=%s", base, current_path)
        return ResolvedTarget(base)

    def resolve_markdown_link(self, raw_path: str, current_path: str) -> ResolvedTarget:
        """
        '../Note.md' -> 'Note' (display form), 'img/a.png' -> 'a.png'.
        """
        doc = self.document_for(raw_path, current_path)
        if doc is None or not doc.extension:
            log.debug("Unresolved markdown link: path=%s source=%s", raw_path, current_path)
            return ResolvedTarget(raw_path)

        if doc.extension.lower() == self.default_extension:
            return ResolvedTarget(doc.basename, resolved=True)
        return ResolvedTarget(doc.name, resolved=True)

    def document_for(self, raw_path: str, current_path: str) -> Document | None:
        """Corpus document behind a markdown link path, if any."""
        if is_uri(raw_path):
            return None
        path = (raw_path or "").strip()
        if path.startswith("/"):
            path = path[1:]
        elif current_path:
            path = join_relative(current_path, path)
        return self.index.get(path)
