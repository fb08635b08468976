from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.exceptions import SessionGuardError
from app.core.logging import get_logger
from app.schemas.responses import ErrorResponse

logger = get_logger(__name__)


async def session_guard_exception_handler(
    request: Request, exc: SessionGuardError
) -> JSONResponse:
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "session_guard_error",
        error_code=exc.error_code,
        message=exc.message,
        detail=exc.detail,
        path=request.url.path,
    )
    body = ErrorResponse(
        error_code=exc.error_code,
        message=exc.message,
        detail=exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))
