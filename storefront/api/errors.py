# storefront/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DataError, IntegrityError, StatementError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.domain.exceptions import StorefrontError
from storefront.utils.settings import ENVIRONMENT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _body(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "fail" if status_code < 500 else "error", "message": message, **extra},
    )


def _field(loc) -> str:
    return ".".join(str(p) for p in loc if p not in ("body", "query", "path"))


def register_exception_handlers(app: FastAPI) -> None:
    """Wszystkie bledy wychodza jako {"status": "fail"|"error", "message": ...}."""

    @app.exception_handler(StorefrontError)
    async def storefront_error(request: Request, exc: StorefrontError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return _body(exc.status_code, exc.message, **exc.extra)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        errors = [f"{_field(e['loc']) or 'request'}: {e['msg']}" for e in exc.errors()]
        return _body(400, f"Invalid input data. {'. '.join(errors)}")

    @app.exception_handler(IntegrityError)
    async def integrity_error(request: Request, exc: IntegrityError):
        logger.warning(f"IntegrityError on {request.url.path}: {exc.orig}")
        return _body(400, "Duplicate field value. Please use another value!")

    @app.exception_handler(DataError)
    async def data_error(request: Request, exc: DataError):
        return _body(400, "Invalid data for one of the fields")

    @app.exception_handler(StatementError)
    async def statement_error(request: Request, exc: StatementError):
        logger.warning(f"StatementError on {request.url.path}: {exc}")
        return _body(400, "Invalid value in request")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _body(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        if ENVIRONMENT == "development":
            return _body(500, "Something went wrong!", error=str(exc))
        return _body(500, "Something went wrong!")
