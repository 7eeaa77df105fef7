from typing import Optional, Dict, Any
import uuid

from fastapi import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.core.exceptions import AppError
from app.core.logging import console_logger
from app.core.config import settings


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id: Optional[str] = getattr(getattr(request, "state", None), "request_id", None)
        if not request_id:
            # Ensure we always have a request id, even if request logging is disabled
            request_id = str(uuid.uuid4())
            request.state.request_id = request_id

        try:
            return await call_next(request)

        except (AppError, HTTPException) as exc:
            status_code = exc.status_code
            message = exc.message if isinstance(exc, AppError) else str(exc.detail)
            logger = console_logger.bind(
                request_id=request_id,
                method=request.method,
                path=str(request.url.path),
                status_code=status_code,
            )
            logger.warning("handled_exception", error=message, error_type=exc.__class__.__name__)

            payload: Dict[str, Any] = {"error": message}
            return JSONResponse(status_code=status_code, content=payload, headers={"X-Request-ID": request_id})

        except Exception as exc:
            logger = console_logger.bind(
                request_id=request_id,
                method=request.method,
                path=str(request.url.path),
            )
            logger.error("unhandled_exception", exc_info=True)

            payload: Dict[str, Any] = {"error": "Internal Server Error", "request_id": request_id}
            # In development, provide more diagnostics in the response
            if settings.DEBUG:
                payload.update({
                    "detail": str(exc),
                    "error_type": exc.__class__.__name__,
                })
            return JSONResponse(status_code=500, content=payload, headers={"X-Request-ID": request_id})
