import logging

from config import configure_logging, get_settings
from counter_store import get_counter_store
from errors import StoreError
from responses import http_method, json_response, preflight_response

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Visit count is temporarily unavailable. Please try again."


def lambda_handler(event, context):
    settings = get_settings()
    configure_logging(settings)
    origin = settings.allowed_origin

    method = http_method(event)
    if method == "OPTIONS":
        return preflight_response(origin)

    logger.info("Visit counter triggered (%s)", method)
    try:
        counter = get_counter_store().increment()
    except StoreError as e:
        logger.warning("Visit counter unavailable: %s: %s", type(e).__name__, e)
        return json_response(503, {"error": UNAVAILABLE_MESSAGE}, origin)
    except Exception:
        logger.exception("Unexpected error incrementing visit counter")
        return json_response(500, {"error": "Internal server error."}, origin)

    return json_response(200, counter.as_dict(), origin)
