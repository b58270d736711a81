"""User registration and code run history use cases."""

from __future__ import annotations

import logging
import threading
from typing import Any

from coderun_api.domain.records import find_user, new_code_run, new_user, utc_timestamp
from coderun_api.repositories.base import UserStore

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    """Base exception for the user/code run workflow."""


class InvalidFieldError(UserServiceError):
    """Raised when a required field is missing, empty or not a string."""

    def __init__(self, field: str):
        self.field = field
        self.message = f"{field} is required"
        super().__init__(self.message)


def _require(field: str, value: Any) -> str:
    if not value or not isinstance(value, str):
        raise InvalidFieldError(field)
    return value


def upsert_user(doc: dict, user_id: str, email: Any = None) -> dict:
    """
    Find the user keyed by ``user_id`` in ``doc`` or append a new one.

    A string ``email`` overwrites the stored one; anything else leaves it
    untouched (new users start with ""). Existing users get ``updatedAt``
    refreshed and a ``codeRuns`` list if theirs was missing.
    """
    users = doc.setdefault("users", [])
    user = find_user(doc, user_id)
    if user is None:
        user = new_user(user_id, email if isinstance(email, str) else "")
        users.append(user)
        return user
    if isinstance(email, str):
        user["email"] = email
    elif not isinstance(user.get("email"), str):
        user["email"] = ""
    if not isinstance(user.get("codeRuns"), list):
        user["codeRuns"] = []
    user["updatedAt"] = utc_timestamp()
    return user


class UserService:
    """Load -> mutate -> save cycles against a UserStore."""

    def __init__(self, store: UserStore) -> None:
        self.store = store
        self._lock = threading.Lock()

    def register_user(self, user_id: Any, email: Any = None) -> str:
        user_id = _require("userID", user_id)
        with self._lock:
            doc = self.store.load()
            created = find_user(doc, user_id) is None
            upsert_user(doc, user_id, email)
            self.store.save(doc)
        logger.info("%s user %s", "Registered" if created else "Updated", user_id)
        return user_id

    def append_code_run(self, user_id: Any, language: Any, code: Any) -> dict:
        user_id = _require("userID", user_id)
        language = _require("language", language)
        code = _require("code", code)
        with self._lock:
            doc = self.store.load()
            user = upsert_user(doc, user_id)
            run = new_code_run(language, code)
            user["codeRuns"].append(run)
            user["updatedAt"] = run["time"]
            self.store.save(doc)
        logger.info("Stored code run %s (%s) for user %s", run["id"], language, user_id)
        return run

    def list_code_runs(self, user_id: Any) -> list[dict]:
        """Return the user's code runs, most recent first. Unknown users have none."""
        user_id = _require("userID", user_id)
        doc = self.store.load()
        user = find_user(doc, user_id)
        if not user or not isinstance(user.get("codeRuns"), list):
            return []
        return list(reversed(user["codeRuns"]))
