from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse

from coderun_api.repositories.base import StoreError
from coderun_api.services.user_service import InvalidFieldError, UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def _get_user_service(request: Request) -> UserService:
    svc = getattr(getattr(request.app, "state", None), "user_service", None)
    if not svc:
        raise RuntimeError("UserService not configured")
    return svc


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.post("")
def register_user(request: Request, payload: dict | None = Body(default=None)):
    body = payload or {}
    svc = _get_user_service(request)
    try:
        user_id = svc.register_user(body.get("userID"), body.get("email"))
    except InvalidFieldError as exc:
        return _error(400, exc.message)
    except StoreError:
        logger.exception("Failed to register user")
        return _error(500, "Failed to register user")
    return {"ok": True, "userID": user_id}


@router.post("/{user_id}/code-runs")
def store_code_run(user_id: str, request: Request, payload: dict | None = Body(default=None)):
    body = payload or {}
    svc = _get_user_service(request)
    try:
        svc.append_code_run(user_id, body.get("language"), body.get("code"))
    except InvalidFieldError as exc:
        return _error(400, exc.message)
    except StoreError:
        logger.exception("Failed to store code run for %s", user_id)
        return _error(500, "Failed to store code run")
    return {"ok": True}


@router.get("/{user_id}/code-runs")
def list_code_runs(user_id: str, request: Request):
    svc = _get_user_service(request)
    try:
        code_runs = svc.list_code_runs(user_id)
    except InvalidFieldError as exc:
        return _error(400, exc.message)
    except StoreError:
        logger.exception("Failed to load code run history for %s", user_id)
        return _error(500, "Failed to load code run history")
    return {"ok": True, "userID": user_id, "codeRuns": code_runs}
