"""FastAPI application factory. No business logic; only wiring, middleware and error views."""

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from membersite.api import router
from membersite.api.auth import LoginRequired
from membersite.core.config import Settings, get_settings
from membersite.core.database import build_engine, build_session_factory
from membersite.core.templates import build_templates, render_error

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Page cannot be found - 404"
SERVER_ERROR_MESSAGE = "Something went wrong. Please try again later."


async def login_required_handler(request: Request, exc: LoginRequired) -> RedirectResponse:
    return RedirectResponse("/login", status_code=302)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> HTMLResponse:
    message = NOT_FOUND_MESSAGE if exc.status_code == 404 else str(exc.detail)
    return render_error(request, message, exc.status_code)


async def server_error_handler(request: Request, exc: Exception) -> HTMLResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return render_error(request, SERVER_ERROR_MESSAGE, 500)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the site. Engine, session factory and templates are created here and
    kept on app.state; route dependencies read them from the request.
    """
    if settings is None:
        load_dotenv()
        settings = get_settings()

    app = FastAPI(
        title="Members Only",
        version="0.1.0",
        docs_url="/docs" if settings.APP_ENV == "dev" else None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.templates = build_templates(settings)

    app.add_exception_handler(LoginRequired, login_required_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, server_error_handler)

    app.mount(
        "/static",
        StaticFiles(directory=str(settings.STATIC_DIR), check_dir=False),
        name="static",
    )
    app.include_router(router)
    return app
