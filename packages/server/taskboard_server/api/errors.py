"""
Transport mapping for domain errors.

Refined mode answers ``{"message", "code"}`` with the error's own status so
callers can tell "not found" from "store down". Coarse mode keeps the
legacy contract: ``{"message"}`` and 500 for everything.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from taskboard_server.core.errors import TaskBoardError

log = structlog.get_logger()


def register_error_handlers(app: FastAPI, *, coarse: bool = False) -> None:
    @app.exception_handler(TaskBoardError)
    async def handle_taskboard_error(request: Request, exc: TaskBoardError) -> JSONResponse:
        log.warning(
            "request.failed",
            method=request.method,
            path=request.url.path,
            code=exc.code,
            error=exc.message,
        )
        if coarse:
            return JSONResponse(status_code=500, content={"message": exc.message})
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "code": exc.code},
        )
