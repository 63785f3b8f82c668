"""FastAPI application factory.

Serve with any ASGI server, e.g.
``uvicorn --factory depletion.infrastructure.api.app:create_app``.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from depletion.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)
from depletion.infrastructure.api.routes import product_router
from depletion.infrastructure.bootstrap import Container, build_container
from depletion.infrastructure.logging import configure_logging

logger = structlog.get_logger(__name__)


def create_app(container: Container | None = None) -> FastAPI:
    configure_logging()
    app = FastAPI(title="Depletion Tracker")
    app.state.container = container or build_container()
    app.include_router(product_router)
    register_exception_handlers(app)
    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain and request errors to ``{"error": message}`` responses."""

    @app.exception_handler(EntityNotFoundError)
    async def not_found(request: Request, exc: EntityNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(ValidationError)
    async def invalid(request: Request, exc: ValidationError) -> JSONResponse:
        # OutOfStockError lands here too
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        message = f"{field}: {error['msg']}" if field else error["msg"]
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(PersistenceError)
    async def storage_failed(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("Storage failure", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"error": "Storage failure, please retry"})

    @app.exception_handler(DomainException)
    async def domain_error(request: Request, exc: DomainException) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})
