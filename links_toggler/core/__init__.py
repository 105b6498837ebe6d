from .config import settings_from_mapping, settings_to_mapping
from .converter import convert_links
from .formatter import encode_link_path, format_markdown_path, is_excluded
from .models import (
    ConversionResult,
    ConversionSettings,
    Direction,
    Document,
    DocumentOutcome,
    LinkStyle,
    LinkToken,
    OutcomeStatus,
    ResolvedTarget,
    TokenKind,
)
from .resolver import CorpusIndex, TargetResolver
from .tokenizer import scan

__all__ = ["settings_from_mapping",
           "settings_to_mapping",
           "convert_links",
           "encode_link_path",
           "format_markdown_path",
           "is_excluded",
           "ConversionResult",
           "ConversionSettings",
           "Direction",
           "Document",
           "DocumentOutcome",
           "LinkStyle",
           "LinkToken",
           "OutcomeStatus",
           "ResolvedTarget",
           "TokenKind",
           "CorpusIndex",
           "TargetResolver",
           "scan",
           ]
