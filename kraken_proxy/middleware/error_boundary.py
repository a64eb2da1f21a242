"""Terminal error handling: every failure leaves as a JSON error body."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from kraken_proxy.errors import AppError, InternalError, ValidationError, error_body

logger = logging.getLogger(__name__)


def error_response(error: AppError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_body())


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.is_operational:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
        return error_response(exc)

    logger.error(f"{request.method} {request.url.path} -> non-operational {type(exc).__name__}: {exc.message}")
    return error_response(InternalError())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = []
    for err in exc.errors():
        loc = [part for part in err.get("loc", ()) if isinstance(part, str) and part != "body"]
        if loc and loc[0] not in fields:
            fields.append(loc[0])

    if fields:
        message = f"Missing or invalid {'/'.join(fields)}"
    else:
        message = "Invalid request body"
    return error_response(ValidationError(message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("HTTP_ERROR", str(exc.detail)),
        headers=getattr(exc, "headers", None)
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"UNEXPECTED ERROR on {request.method} {request.url.path}")
    return error_response(InternalError())


class UnexpectedErrorMiddleware(BaseHTTPMiddleware):
    """Turns residual exceptions into the generic 500 body.

    Installed inside CORSMiddleware so these responses still carry CORS
    headers; the ``Exception`` handler below only runs in Starlette's
    outermost server-error layer.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception(f"UNEXPECTED ERROR on {request.method} {request.url.path}")
            return error_response(InternalError())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
