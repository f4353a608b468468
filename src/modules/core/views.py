"""Liveness check used by load balancers and the deploy pipeline."""

import time
from typing import Any, Dict

import structlog
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger(__name__)


def _check_database(alias: str = "default") -> Dict[str, Any]:
    connection = connections[alias]
    started = time.monotonic()
    try:
        connection.ensure_connection()
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError:
        logger.error("health.database_unreachable", alias=alias, exc_info=True)
        return {"status": "down"}

    elapsed_ms = (time.monotonic() - started) * 1000
    return {
        "status": "up",
        "vendor": connection.vendor,
        "response_time_ms": round(elapsed_ms, 2),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    """Report 200 when the database answers and 503 otherwise."""
    database = _check_database()
    healthy = database["status"] == "up"
    verdict = "healthy" if healthy else "unhealthy"

    logger.info("health.checked", status=verdict)
    return JsonResponse(
        {
            "status": verdict,
            "timestamp": timezone.now().isoformat(),
            "services": {"database": database},
        },
        status=200 if healthy else 503,
    )
