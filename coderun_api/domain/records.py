"""Domain helpers for user and code run records stored in the JSON document."""
from __future__ import annotations

import secrets
import time
from datetime import datetime, timezone
from typing import Any, MutableMapping, Optional


def empty_document() -> dict:
    return {"users": []}


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_code_run_id() -> str:
    """Epoch milliseconds plus a short random hex suffix. Unique on a best-effort basis."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(3)}"


def new_user(user_id: str, email: str = "") -> dict:
    now = utc_timestamp()
    return {
        "userID": user_id,
        "email": email,
        "createdAt": now,
        "updatedAt": now,
        "codeRuns": [],
    }


def new_code_run(language: str, code: str) -> dict:
    return {
        "id": new_code_run_id(),
        "time": utc_timestamp(),
        "language": language,
        "code": code,
    }


def find_user(doc: MutableMapping[str, Any], user_id: str) -> Optional[dict]:
    """Return the user dict with the given userID, or None."""
    for user in doc.get("users") or []:
        if isinstance(user, dict) and user.get("userID") == user_id:
            return user
    return None


def normalize_document(raw: Any) -> dict:
    """Coerce parsed JSON into a document whose ``users`` is a list."""
    if not isinstance(raw, dict) or not isinstance(raw.get("users"), list):
        return empty_document()
    return raw
