from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# Error codes (stable API surface)
VALIDATION_ERROR = "VALIDATION_ERROR"
NOT_FOUND = "NOT_FOUND"
FORBIDDEN = "FORBIDDEN"
STORE_ERROR = "STORE_ERROR"


@dataclass(eq=False)
class StatsServiceError(Exception):
    """Structured error raised by the statistics core.

    The API layer maps these to HTTP 4xx/5xx while keeping a stable
    machine-readable code for the client.
    """

    message: str
    details: Optional[Any] = None

    code = "ERROR"
    status_code = 500

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}"


class ValidationError(StatsServiceError):
    code = VALIDATION_ERROR
    status_code = 400


class NotFoundError(StatsServiceError):
    code = NOT_FOUND
    status_code = 404


class ForbiddenError(StatsServiceError):
    code = FORBIDDEN
    status_code = 403


class StoreError(StatsServiceError):
    code = STORE_ERROR
    status_code = 500


async def _stats_error_handler(request: Request, exc: StatsServiceError):
    if isinstance(exc, StoreError):
        # detail already logged where the failure happened; client gets a generic message
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": "Internal storage error", "code": exc.code},
        )

    content: dict[str, Any] = {"detail": exc.message, "code": exc.code}
    if exc.details is not None:
        content["issues"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StatsServiceError, _stats_error_handler)
