"""FastAPI exception handlers producing the standard ErrorResponse."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from saad.errors.exceptions import PersistenceError, SaadError
from saad.models.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(SaadError)
    async def saad_error_handler(request: Request, exc: SaadError):
        trace_id = getattr(request.state, "trace_id", "trc_unknown")
        if isinstance(exc, PersistenceError):
            logger.warning(
                "store_write_failed",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "trace_id": trace_id,
                    "reason": str(exc),
                },
            )
        error_response = ErrorResponse(
            schema_version="1.0",
            error=ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
                trace_id=trace_id,
                timestamp=datetime.now(timezone.utc),
            ),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response.model_dump(mode="json", exclude_none=True),
        )
