"""FastAPI facade over the FlowPonder client core.

The wallet is host-provided, so the app is built by a factory:

    container = build_container(wallet)
    app = create_app(container)
    uvicorn.run(app, port=8000)
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.bootstrap import Container
from src.fp_api.request_log import RequestLogMiddleware
from src.fp_auth.api.router import router as session_router
from src.fp_common.errors import AppError
from src.fp_common.response import error_response
from src.fp_market.api.community_router import router as community_router
from src.fp_market.api.router import router as ponder_router

VERSION = "0.1.0"


def create_app(container: Container) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: adopt an existing wallet session. Shutdown: close the HTTP pool."""
        await container.auth.restore()
        yield
        await container.aclose()

    app = FastAPI(
        title=container.settings.APP_NAME,
        version=VERSION,
        debug=container.settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(RequestLogMiddleware, container=container)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        resp = error_response(exc.code, exc.message)
        resp.request_id = getattr(request.state, "request_id", resp.request_id)
        return JSONResponse(
            status_code=exc.http_status,
            content=resp.model_dump(),
        )

    app.include_router(session_router, prefix="/api/v1")
    app.include_router(ponder_router, prefix="/api/v1")
    app.include_router(community_router, prefix="/api/v1")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": VERSION}

    return app
