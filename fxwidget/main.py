from contextlib import asynccontextmanager
import logging
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db.schema import init_db
from .routers import health, ui, widget
from .services.rates.client import RateClient
from .services.session import WidgetSession


def create_app(
    settings_override: Settings | None = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    transport: optional httpx transport for the quote service (tests pass an
    httpx.MockTransport).
    """
    settings = settings_override or get_settings()
    if settings_override is not None:
        settings.init_post_load()
    # Initialize logging early
    init_logging(debug=settings.debug)

    # Theme store must exist before the first request
    try:
        init_db(settings.db_path)  # type: ignore[arg-type]
    except Exception:
        logging.getLogger("fxwidget").exception("failed to initialize preference store")
        raise

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = RateClient.from_settings(settings, transport=transport)
        session = WidgetSession(client, settings)
        app.state.session = session
        await session.start()
        try:
            yield
        finally:
            await session.aclose()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.not_found_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(errors.ServiceError, errors.service_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(widget.router)
    app.include_router(ui.router)

    return app


app = create_app()
