"""Health check endpoint.

Returns service status including database connectivity and whether outgoing
email is configured.
"""

import logging
from typing import Any

from fastapi import APIRouter
from starlette.responses import JSONResponse

from app.core.constants import CATEGORIES_TABLE
from app.db.supabase import get_supabase
from app.services.email import EmailClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> Any:
    """Return health status including a real Supabase connectivity test.

    Returns 200 OK when healthy, 503 when the database is down.
    """
    db_status = "disconnected"

    try:
        client = get_supabase()
        result = client.table(CATEGORIES_TABLE).select("id").limit(1).execute()
        if result is not None:
            db_status = "connected"
    except Exception:
        logger.warning("Health check: Supabase connection failed", exc_info=True)

    payload: dict[str, str] = {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "email": "configured" if EmailClient().is_configured() else "not_configured",
    }

    if db_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload
