"""Storage interface shared by the file-backed and in-memory stores."""
from __future__ import annotations

from typing import Protocol


class StoreError(Exception):
    """Raised when the backing store cannot be read or written."""


class UserStore(Protocol):
    def ensure(self) -> None:
        """Create the backing document if it does not exist yet."""

    def load(self) -> dict:
        """Return the full document; ``users`` is always a list."""

    def save(self, doc: dict) -> None:
        """Overwrite the backing document with ``doc``."""
