"""
JSON file persistence adapter.

The whole user collection lives in one document, ``{"users": [...]}``. Every
call re-reads or fully rewrites the file; there is no atomic rename, so a crash
mid-write can leave a truncated file (which then loads as an empty store).
"""

from __future__ import annotations

from pathlib import Path
import json
import logging

from coderun_api.domain.records import empty_document, normalize_document
from coderun_api.repositories.base import StoreError

logger = logging.getLogger(__name__)


class JSONFileStore:
    """UserStore backed by a single JSON file on disk."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def ensure(self) -> None:
        if self.path.exists():
            return
        logger.info("Creating data file at %s", self.path)
        self._write(empty_document())

    def load(self) -> dict:
        self.ensure()
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise StoreError(f"Cannot read {self.path}: {exc}") from exc
        try:
            parsed = json.loads(raw.decode("utf-8") or "{}")
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Data file %s is not valid UTF-8 JSON; treating it as empty", self.path)
            return empty_document()
        doc = normalize_document(parsed)
        if doc is not parsed:
            logger.warning("Data file %s has no users list; treating it as empty", self.path)
        logger.debug("Loaded %d users from %s", len(doc["users"]), self.path)
        return doc

    def save(self, doc: dict) -> None:
        self._write(doc)
        logger.debug("Saved %d users to %s", len(doc.get("users") or []), self.path)

    def _write(self, doc: dict) -> None:
        try:
            payload = json.dumps(doc, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as exc:
            raise StoreError(f"Cannot serialize document: {exc}") from exc
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Cannot write {self.path}: {exc}") from exc
