import logging

from config import configure_logging, get_settings
from errors import StoreError, ValidationError
from message_store import ContactMessage, get_message_store
from responses import http_method, json_body, json_response, preflight_response, source_ip

logger = logging.getLogger(__name__)

THANK_YOU = "Thank you for your message! I'll get back to you soon."


def _required(data, field):
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Name, email, and message are required.")
    return value


def parse_submission(data, ip_address="unknown"):
    name = _required(data, "name")
    email = _required(data, "email")
    message = _required(data, "message")

    if "@" not in email or "." not in email:
        raise ValidationError("Invalid email address.")

    subject = data.get("subject")
    if not isinstance(subject, str) or not subject.strip():
        subject = None
    return ContactMessage.create(
        name=name,
        email=email,
        message=message,
        subject=subject,
        ip_address=ip_address,
    )


def lambda_handler(event, context):
    settings = get_settings()
    configure_logging(settings)
    origin = settings.allowed_origin

    if http_method(event) == "OPTIONS":
        return preflight_response(origin)

    logger.info("Contact form submission received")
    try:
        contact_message = parse_submission(json_body(event), source_ip(event))
    except ValidationError as e:
        return json_response(400, {"error": str(e)}, origin)

    try:
        get_message_store().add(contact_message)
    except StoreError as e:
        logger.warning("Contact message not saved: %s", e)
        return json_response(
            503,
            {"error": "Unable to save your message right now. Please try again later."},
            origin,
        )
    except Exception:
        logger.exception("Unexpected error saving contact message")
        return json_response(500, {"error": "Internal server error."}, origin)

    logger.info("Contact message saved from %s", contact_message.email)
    return json_response(
        200, {"success": True, "message": THANK_YOU, "id": contact_message.id}, origin
    )
