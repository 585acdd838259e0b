import logging
from datetime import datetime, timezone

from config import configure_logging, get_settings
from counter_store import get_counter_store
from errors import StoreError
from responses import json_response

logger = logging.getLogger(__name__)


def lambda_handler(event, context):
    """Liveness probe. Reads the counter without touching it."""
    settings = get_settings()
    configure_logging(settings)
    logger.info("Health check endpoint called")

    try:
        get_counter_store().read()
        database = "connected"
    except StoreError as e:
        logger.warning("Health check could not read counter: %s", e)
        database = "disconnected"

    return json_response(
        200,
        {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": settings.service_name,
            "version": settings.service_version,
            "checks": {"database": database, "api": "operational"},
        },
        settings.allowed_origin,
    )
