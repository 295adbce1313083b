"""
Core views providing infrastructure endpoints.
"""

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse


def health_check(request):
    """
    Health check endpoint for Docker, Kubernetes probes and load balancers.

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "disconnected"
        - cache: "connected" or "disconnected"
        - sms_provider: configured provider name or "unconfigured"

    HTTP Status Codes:
        200: Database reachable
        503: Database unreachable

    Cache and SMS provider problems are reported but never fail the check;
    in-app notifications and access checks keep working without them.
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "cache": "unknown",
        "sms_provider": "unconfigured",
    }
    is_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except DatabaseError:
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        is_healthy = False

    try:
        cache.set("health_check", "ok", timeout=1)
        if cache.get("health_check") == "ok":
            health_status["cache"] = "connected"
        else:
            health_status["cache"] = "disconnected"
    except Exception:  # noqa: BLE001 - any backend failure means disconnected
        health_status["cache"] = "disconnected"

    from notifications.providers import get_sms_provider
    from core.exceptions import ConfigurationError

    try:
        provider = get_sms_provider()
        health_status["sms_provider"] = provider.name
    except ConfigurationError:
        health_status["sms_provider"] = "unconfigured"

    status_code = 200 if is_healthy else 503
    return JsonResponse(health_status, status=status_code)
