import base64
import json

from errors import ValidationError


def json_response(status_code, payload, allowed_origin="*"):
    return {
        "statusCode": status_code,
        "headers": {
            "Access-Control-Allow-Origin": allowed_origin,
            "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
            "Content-Type": "application/json",
        },
        "body": json.dumps(payload),
    }


def preflight_response(allowed_origin="*"):
    response = json_response(204, None, allowed_origin)
    response["body"] = ""
    return response


def http_method(event):
    """Method of a REST API (v1) or HTTP API (v2) proxy event, GET if absent."""
    event = event or {}
    if event.get("httpMethod"):
        return event["httpMethod"].upper()
    method = event.get("requestContext", {}).get("http", {}).get("method")
    return method.upper() if method else "GET"


def source_ip(event):
    context = (event or {}).get("requestContext", {})
    ip = context.get("identity", {}).get("sourceIp") or context.get("http", {}).get("sourceIp")
    return ip or "unknown"


def json_body(event):
    """Decode the request body into a dict, raising ValidationError otherwise."""
    event = event or {}
    body = event.get("body")
    if body is None or body == "":
        body = "{}"
    if isinstance(body, str):
        try:
            if event.get("isBase64Encoded"):
                body = base64.b64decode(body).decode("utf-8")
            body = json.loads(body)
        except (ValueError, UnicodeDecodeError):
            raise ValidationError("Request body must be a JSON object.") from None
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")
    return body
