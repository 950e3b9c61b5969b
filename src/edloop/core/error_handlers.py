"""Exception handlers translating domain errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from edloop.core.exceptions import EdLoopError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain error handler to ``app``."""

    @app.exception_handler(EdLoopError)
    async def edloop_error_handler(request: Request, exc: EdLoopError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "%s %s failed: %s", request.method, request.url.path, exc.message,
                exc_info=exc,
            )
        else:
            logger.info(
                "%s %s rejected (%s): %s",
                request.method,
                request.url.path,
                exc.error_code,
                exc.message,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error_code": exc.error_code},
        )
