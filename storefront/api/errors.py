# storefront/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.domain.errors import StoreError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_HTTP_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}

# pierwszy element loc to źródło (body/query/path)
_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def error_response(status_code: int, message: str, code: str, details=None) -> JSONResponse:
    error = {"message": message, "code": code}
    if details:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def validation_details(exc: RequestValidationError) -> dict:
    details = {}
    for err in exc.errors():
        loc = list(err.get("loc", ()))
        if len(loc) > 1 and loc[0] in _LOCATIONS:
            loc = loc[1:]
        key = ".".join(str(part) for part in loc) or "body"
        details.setdefault(key, []).append(err.get("msg", "Invalid value"))
    return details


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.code, exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, "Validation failed", "VALIDATION_ERROR", validation_details(exc))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and message == "Not Found":
        message = "Not found"
    return error_response(exc.status_code, message, code)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(500, "An unexpected error occurred", "INTERNAL_ERROR")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
