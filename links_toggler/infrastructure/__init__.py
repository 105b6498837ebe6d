from .settings_store import SettingsKeys, SettingsStore, describe_safe_mode
from .store import DocumentStore, DocumentStoreError, FsDocumentStore, InMemoryDocumentStore

__all__ = ["SettingsKeys",
           "SettingsStore",
           "describe_safe_mode",
           "DocumentStore",
           "DocumentStoreError",
           "FsDocumentStore",
           "InMemoryDocumentStore",
           ]
