"""Response helpers shared by the RPC routers."""

import logging

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..core.exceptions import InternalServerError

logger = logging.getLogger(__name__)


def ok(response_data: BaseModel, status_code: int = 200) -> JSONResponse:
    """Serialize a response schema the way every operation returns it."""
    return JSONResponse(
        status_code=status_code,
        content=response_data.model_dump(mode="json")
    )


def internal_error(operation: str, error: Exception, **context) -> InternalServerError:
    """Log an unexpected failure and return the problem to raise in its place."""
    problem = InternalServerError()
    logger.error(
        f"Unexpected error in {operation}",
        extra={**context, "error": str(error), "error_id": problem.extensions["error_id"]},
        exc_info=True
    )
    return problem
