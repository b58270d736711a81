"""
Persistence adapters.

Services depend on the UserStore interface rather than touching the JSON file,
so tests can swap the file-backed store for the in-memory one.
"""

from coderun_api.repositories.base import StoreError, UserStore
from coderun_api.repositories.json_storage import JSONFileStore
from coderun_api.repositories.memory_storage import InMemoryStore

__all__ = ["StoreError", "UserStore", "JSONFileStore", "InMemoryStore"]
