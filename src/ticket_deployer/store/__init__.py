"""Session-scoped artifact storage."""

from .artifact_store import RECORD_KEY, ArtifactStore
from .storage import FileStorage, KeyValueStorage, MemoryStorage

__all__ = ["RECORD_KEY", "ArtifactStore", "FileStorage", "KeyValueStorage", "MemoryStorage"]
