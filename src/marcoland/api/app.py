"""FastAPI application wiring for MarcoLand."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marcoland import __version__
from marcoland.api import routes
from marcoland.api.runtime import ApiState, build_state
from marcoland.config import get_settings
from marcoland.errors import EconomyError, InvalidRequest

logger = logging.getLogger(__name__)


async def economy_error_handler(request: Request, exc: EconomyError) -> JSONResponse:
    logger.warning(
        "%s %s rejected: %s (%s)", request.method, request.url.path, exc.message, exc.code
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Malformed request")
    error = InvalidRequest(f"{location}: {message}" if location else message)
    return await economy_error_handler(request, error)


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Instantiate the FastAPI application with routing and lifecycle hooks."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = state_factory()
        app.state.api_state = state
        try:
            yield
        finally:
            await state.shutdown()

    app = FastAPI(title="MarcoLand Economy API", version=__version__, lifespan=lifespan)
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(EconomyError, economy_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(routes.router)
    return app


app = create_app()
