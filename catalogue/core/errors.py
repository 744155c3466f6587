from collections.abc import Mapping, Sequence
from typing import Any
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from pydantic import BaseModel

from catalogue.core.logging import get_logger


GENERIC_SERVER_ERROR = "Something went wrong!"
ROUTE_NOT_FOUND = "Route not found"


class CatalogueError(Exception):
    """Base class for errors the API maps to a response."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    message: str = GENERIC_SERVER_ERROR

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class BookValidationError(CatalogueError):
    """One or more field rules failed; every violation is carried."""

    status_code = HTTP_400_BAD_REQUEST
    message = "Validation failed"

    def __init__(self, errors: Sequence[str]):
        self.errors: list[str] = list(errors)
        super().__init__("; ".join(self.errors) or self.message)


class DuplicateBookError(CatalogueError):
    status_code = HTTP_400_BAD_REQUEST
    message = "Book with same title and author already exists"


class BookNotFoundError(CatalogueError):
    status_code = HTTP_404_NOT_FOUND
    message = "Book not found"


class MalformedRequestError(CatalogueError):
    status_code = HTTP_400_BAD_REQUEST
    message = "Malformed request"


class StoreError(CatalogueError):
    """Reading or writing the backing file failed. Never shown to clients."""

    status_code = HTTP_500_INTERNAL_SERVER_ERROR
    message = "Book store failure"


class ErrorResponse(BaseModel):
    error: str


class ValidationErrorResponse(BaseModel):
    errors: list[str]


def format_validation_errors(errors: Sequence[Mapping[str, Any]]) -> list[str]:
    """Flatten pydantic error dicts into ``"field: message"`` strings."""

    messages: list[str] = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        msg = str(error.get("msg", "Invalid value"))
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorResponse(error=message).model_dump()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register centralized exception."""

    @app.exception_handler(BookValidationError)
    async def book_validation_handler(
        request: Request, exc: BookValidationError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.info("Book rejected", extra={"errors": exc.errors})
        body = ValidationErrorResponse(errors=exc.errors)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.error("Store failure: %s", exc, exc_info=exc.__cause__ or exc)
        return _error(exc.status_code, GENERIC_SERVER_ERROR)

    @app.exception_handler(CatalogueError)
    async def catalogue_error_handler(
        request: Request, exc: CatalogueError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("%s: %s", type(exc).__name__, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("HTTP error", extra={"status_code": exc.status_code})
        # Unknown paths and unsupported methods both read as a missing route
        if exc.status_code in (404, 405):
            return _error(HTTP_404_NOT_FOUND, ROUTE_NOT_FOUND)
        message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        return _error(exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.info("Request validation error")
        body = ValidationErrorResponse(errors=format_validation_errors(exc.errors()))
        return JSONResponse(status_code=HTTP_400_BAD_REQUEST, content=body.model_dump())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.exception("Unhandled server error", exc_info=exc)
        return _error(HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_SERVER_ERROR)
