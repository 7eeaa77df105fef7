from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.core.exceptions import AppError
from app.core.logging import console_logger


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or ""


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    log = console_logger.warning if exc.status_code < 500 else console_logger.error
    log(
        "app_error",
        request_id=_request_id(request),
        path=str(request.url.path),
        status_code=exc.status_code,
        error_type=exc.__class__.__name__,
        error=exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers={"X-Request-ID": _request_id(request)},
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=dict(exc.headers or {}),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request body"
    console_logger.warning("request_validation_error", path=str(request.url.path), error=message)
    return JSONResponse(status_code=400, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
