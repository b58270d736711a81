from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from coderun_api.core.config import Settings, get_settings
from coderun_api.core.log import configure_logging
from coderun_api.repositories import JSONFileStore, StoreError, UserStore
from coderun_api.routers import system as system_router
from coderun_api.routers import users as users_router
from coderun_api.services.user_service import UserService

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than ``max_body_bytes`` with 413.

    The body is buffered and counted as it arrives, so chunked requests without
    a Content-Length are capped too. A declared length over the cap is refused
    before reading. The buffered body is replayed to the app as one message.
    """

    def __init__(self, app: ASGIApp, *, max_body_bytes: int) -> None:
        self.app = app
        self._max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length", "")
        if declared.isdigit() and int(declared) > self._max_body_bytes:
            await self._reject(scope, receive, send)
            return

        chunks: list[bytes] = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                # client went away before finishing the body
                return
            chunk = message.get("body", b"")
            received += len(chunk)
            if received > self._max_body_bytes:
                await self._reject(scope, receive, send)
                return
            chunks.append(chunk)
            more_body = message.get("more_body", False)

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if replayed:
                return await receive()
            replayed = True
            return {"type": "http.request", "body": b"".join(chunks), "more_body": False}

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        logger.warning("Rejected %s %s: body over %d bytes", scope.get("method"), scope.get("path"), self._max_body_bytes)
        response = JSONResponse({"error": "Request body too large"}, status_code=413)
        await response(scope, receive, send)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        app.state.store.ensure()
    except StoreError:
        logger.exception("Failed to initialize data file")
        raise
    settings: Settings = app.state.settings
    logger.info("Backend server running on http://localhost:%s (env=%s)", settings.port, settings.app_env)
    yield


def create_app(settings: Settings | None = None, store: UserStore | None = None) -> FastAPI:
    """Factory compatible with uvicorn (``--factory``) and tests."""
    settings = settings or get_settings()
    store = store if store is not None else JSONFileStore(settings.data_file)

    app = FastAPI(title="Code Run History API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.user_service = UserService(store)

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    allow_all = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else list(settings.cors_origins),
        allow_credentials=not allow_all,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(system_router.router)
    app.include_router(users_router.router)
    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
