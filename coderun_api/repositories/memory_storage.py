"""In-memory UserStore, used by tests and for throwaway runs."""
from __future__ import annotations

import copy

from coderun_api.domain.records import empty_document, normalize_document


class InMemoryStore:
    def __init__(self, doc: dict | None = None) -> None:
        self._doc = normalize_document(copy.deepcopy(doc)) if doc is not None else None

    def ensure(self) -> None:
        if self._doc is None:
            self._doc = empty_document()

    def load(self) -> dict:
        self.ensure()
        return copy.deepcopy(self._doc)

    def save(self, doc: dict) -> None:
        self._doc = copy.deepcopy(doc)
