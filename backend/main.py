"""
Admin console backend for the Guinness rewards program.
Serves the list pages (users, businesses, rewards, redeems, business info,
history and receipts) on top of the rewards backend API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from managers.app_factory.app_factory import app_factory
from middleware.auth_middleware import AuthMiddleware
from modules.api_client.errors import BackendClientError, InvalidInputError, UnauthenticatedError
from routes.admin_routes import admin_router
from routes.auth_routes import auth_router
from routes.page_routes import pages_router

logger = logging.getLogger(__name__)


def _drain(request: Request) -> list:
    session = getattr(request.state, "session", None)
    return session.notifier.drain() if session is not None else []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = app_factory.get_config_manager().app_settings
    app_factory.get_logging_manager()
    logger.info(f"Starting {settings.app_name} against {settings.api_base_url}")
    app_factory.get_session_manager()
    yield
    logger.info(f"Shutting down {settings.app_name}")


app = FastAPI(
    title="Guinness Rewards Admin",
    description="Paginated, searchable admin pages over the rewards backend",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(AuthMiddleware, get_session_manager=app_factory.get_session_manager)

app.include_router(auth_router)
app.include_router(pages_router)
app.include_router(admin_router)


@app.exception_handler(UnauthenticatedError)
async def unauthenticated_handler(request: Request, exc: UnauthenticatedError):
    session = getattr(request.state, "session", None)
    if session is not None:
        session.auth_store.clear_token()
    return JSONResponse(status_code=401, content={"detail": exc.message})


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=422, content={"detail": exc.message, "notifications": _drain(request)})


@app.exception_handler(BackendClientError)
async def backend_error_handler(request: Request, exc: BackendClientError):
    session = getattr(request.state, "session", None)
    if session is not None:
        session.notifier.notify_error(exc.message)
    # backend rejections of the request itself stay client errors
    status_code = getattr(exc, "status_code", None)
    status = 400 if status_code and 400 <= status_code < 500 else 502
    return JSONResponse(status_code=status, content={"detail": exc.message, "notifications": _drain(request)})


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    settings = app_factory.get_config_manager().app_settings
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
