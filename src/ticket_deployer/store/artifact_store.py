"""Holds the single staged artifact across views of one session."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from ..errors import ArtifactNotFoundError
from ..models import Artifact, normalize_extension
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

RECORD_KEY = "generatedCode"


class ArtifactStore:
    """Stores at most one artifact; saving a new one discards the previous.

    `load()` never raises: a missing or unparseable record reads as None.
    Field updates rewrite the stored record immediately and keep every
    other field as it was.
    """

    def __init__(self, storage: KeyValueStorage, key: str = RECORD_KEY) -> None:
        self.storage = storage
        self.key = key

    def save(self, artifact: Artifact) -> None:
        self._write_record(artifact.to_record())
        logger.info(
            "Staged artifact%s (%d characters)",
            f" for {artifact.origin_id}" if artifact.origin_id else "",
            len(artifact.content),
        )

    def load(self) -> Optional[Artifact]:
        record = self._read_record()
        if record is None:
            return None
        return Artifact.from_record(record)

    def require(self) -> Artifact:
        artifact = self.load()
        if artifact is None:
            raise ArtifactNotFoundError()
        return artifact

    def update_content(self, content: str) -> Artifact:
        return self._update_field("code", content)

    def update_extension(self, extension: str) -> Artifact:
        record = self._require_record()
        current = normalize_extension(record.get("fileExtension"))
        return self._update_field("fileExtension", normalize_extension(extension, current))

    def _update_field(self, name: str, value: Any) -> Artifact:
        record = self._require_record()
        if record.get(name) != value:
            record[name] = value
            self._write_record(record)
        return Artifact.from_record(record)

    def _require_record(self) -> Dict[str, Any]:
        record = self._read_record()
        if record is None:
            raise ArtifactNotFoundError()
        return record

    def _read_record(self) -> Optional[Dict[str, Any]]:
        raw = self.storage.get(self.key)
        if raw is None:
            return None
        try:
            record = json.loads(raw)
        except ValueError:
            logger.warning("Error loading generated code from storage: record is not valid JSON")
            return None
        if not isinstance(record, dict):
            logger.warning("Error loading generated code from storage: unexpected record shape")
            return None
        return record

    def _write_record(self, record: Dict[str, Any]) -> None:
        self.storage.set(self.key, json.dumps(record, ensure_ascii=False))
