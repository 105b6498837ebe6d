from .core.converter import convert_links
from .core.models import ConversionResult, ConversionSettings, Direction, Document, LinkStyle
from .core.resolver import CorpusIndex, TargetResolver
from .infrastructure.store import DocumentStore, DocumentStoreError, FsDocumentStore, InMemoryDocumentStore
from .services.orchestrator import ConversionOrchestrator

__version__ = "0.1.0"

__all__ = ['convert_links',
           'ConversionResult',
           'ConversionSettings',
           'Direction',
           'Document',
           'LinkStyle',
           'CorpusIndex',
           'TargetResolver',
           'DocumentStore',
           'DocumentStoreError',
           'FsDocumentStore',
           'InMemoryDocumentStore',
           'ConversionOrchestrator',
           ]
