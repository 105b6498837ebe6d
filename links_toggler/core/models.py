# links_toggler/core/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


DEFAULT_EXTENSION = "md"
DEFAULT_EXCLUDED_EXTENSIONS = "png,jpg,jpeg,gif,svg,pdf"


class Direction(str, Enum):
    WIKI_TO_MD = "wiki-to-md"
    MD_TO_WIKI = "md-to-wiki"


class TokenKind(str, Enum):
    WIKI = "wiki"
    MARKDOWN = "markdown"
    IMAGE = "image"


class LinkStyle(str, Enum):
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


@dataclass(frozen=True)
class Document:
    """
    A document addressed by its corpus-relative path ("Folder/Note.md").
    """
    path: str
    text: str = ""

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def folder(self) -> str:
        return self.path.rsplit("/", 1)[0] if "/" in self.path else ""

    @property
    def extension(self) -> str:
        name = self.name
        if "." not in name.lstrip("."):
            return ""
        return name.rsplit(".", 1)[-1]

    @property
    def basename(self) -> str:
        ext = self.extension
        return self.name[: -(len(ext) + 1)] if ext else self.name


@dataclass(frozen=True)
class LinkToken:
    """
    One link-shaped span of a document.

    raw      exact source text, used for pass-through
    target   base target (wiki) or link path (markdown), trimmed
    alias    explicit alias / display text, None when absent
    fragment heading or block reference without the leading '#'
    """
    start: int
    end: int
    kind: TokenKind
    raw: str
    target: str
    alias: str | None = None
    fragment: str | None = None

    @property
    def label(self) -> str:
        return self.alias or self.target


@dataclass(frozen=True)
class ResolvedTarget:
    path: str
    resolved: bool = False


@dataclass(frozen=True)
class ConversionSettings:
    excluded_extensions: frozenset[str] = frozenset(DEFAULT_EXCLUDED_EXTENSIONS.split(","))
    safe_mode: bool = True
    link_style: LinkStyle = LinkStyle.ABSOLUTE
    ignored_folders: tuple[str, ...] = ()


class OutcomeStatus(str, Enum):
    UNCHANGED = "unchanged"
    WOULD_CHANGE = "would_change"
    CHANGED = "changed"
    FAILED = "failed"


@dataclass
class DocumentOutcome:
    path: str
    status: OutcomeStatus
    new_text: str | None = None
    error: str | None = None

    @property
    def content_changed(self) -> bool:
        return self.new_text is not None


@dataclass
class ConversionResult:
    """
    Outcome of one bulk pass.

    affected counts documents whose content differs after conversion,
    whether or not it was written; applied counts completed writes only.
    """
    direction: Direction
    dry_run: bool
    outcomes: list[DocumentOutcome] = field(default_factory=list)
    canceled: bool = False

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def affected(self) -> int:
        return sum(1 for o in self.outcomes if o.content_changed)

    @property
    def applied(self) -> int:
        return sum(1 for o in self.outcomes if o.status is OutcomeStatus.CHANGED)

    @property
    def failed(self) -> list[DocumentOutcome]:
        return [o for o in self.outcomes if o.status is OutcomeStatus.FAILED]

    def to_dict(self) -> dict:
        return {
            "direction": self.direction.value,
            "dry_run": self.dry_run,
            "total_files": self.total,
            "affected_files": self.affected,
            "applied_files": self.applied,
            "error_files": [o.path for o in self.failed],
            "errors": {o.path: o.error or "" for o in self.failed},
            "canceled": self.canceled,
        }
