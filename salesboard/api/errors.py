"""Translate domain errors into JSON responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.errors import SalesboardError, SessionExpired, ValidationError

logger = logging.getLogger(__name__)


async def handle_domain_error(request: Request, exc: SalesboardError) -> JSONResponse:
    body = {"detail": exc.message}
    if isinstance(exc, ValidationError):
        body["errors"] = exc.errors
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.errors)
    elif isinstance(exc, SessionExpired):
        request.session.clear()
        logger.info("%s %s without a valid session", request.method, request.url.path)
    elif exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(body, status_code=exc.status_code)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SalesboardError, handle_domain_error)


__all__ = ["handle_domain_error", "register_error_handlers"]
