"""
Health check endpoint: verifies the database answers a trivial query.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ...database.query_gateway import QueryGateway
from ...shared.exceptions import StoreError
from ..dependencies import get_query_gateway

log = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", tags=["Health"])
async def health_check(gateway: QueryGateway = Depends(get_query_gateway)):
    """
    Report database connectivity.

    Unlike the task endpoints, the failure body carries the store's message
    in ``details``.
    """
    log_prefix = "[GET /health] "
    try:
        await gateway.execute("SELECT 1")
    except StoreError as e:
        log.error("%sDatabase connection failed: %s", log_prefix, e.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Database connection failed", "details": e.message},
        )

    return {
        "status": "OK",
        "message": "Database connected successfully!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
