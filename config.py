import logging
import os
from functools import lru_cache
from typing import NamedTuple, Optional


class Settings(NamedTuple):
    table_name: str = "CloudResume-Counter"
    counter_id: str = "index"
    messages_table_name: str = "CloudResume-Messages"
    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    max_attempts: int = 5
    retry_base_delay: float = 0.05
    store_timeout: float = 3.0
    allowed_origin: str = "*"
    service_name: str = "Resume API"
    service_version: str = "1.0.0"
    log_level: str = "INFO"


def _env_int(name, default):
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name, default):
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def load_settings() -> Settings:
    """Build settings from the environment, falling back to the defaults."""
    defaults = Settings()
    max_attempts = _env_int("COUNTER_MAX_ATTEMPTS", defaults.max_attempts)
    if max_attempts < 1:
        raise ValueError(f"COUNTER_MAX_ATTEMPTS must be at least 1, got {max_attempts}")
    log_level = os.environ.get("LOG_LEVEL", defaults.log_level).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"LOG_LEVEL must be a logging level name, got {log_level!r}")

    return Settings(
        table_name=os.environ.get("TABLE_NAME", defaults.table_name),
        counter_id=os.environ.get("COUNTER_ID", defaults.counter_id),
        messages_table_name=os.environ.get(
            "MESSAGES_TABLE_NAME", defaults.messages_table_name
        ),
        region=os.environ.get("AWS_REGION") or None,
        endpoint_url=os.environ.get("DYNAMODB_ENDPOINT_URL") or None,
        max_attempts=max_attempts,
        retry_base_delay=_env_float(
            "COUNTER_RETRY_BASE_DELAY", defaults.retry_base_delay
        ),
        store_timeout=_env_float("STORE_TIMEOUT_SECONDS", defaults.store_timeout),
        allowed_origin=os.environ.get("ALLOWED_ORIGIN", defaults.allowed_origin),
        service_name=os.environ.get("SERVICE_NAME", defaults.service_name),
        service_version=os.environ.get("SERVICE_VERSION", defaults.service_version),
        log_level=log_level,
    )


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    return load_settings()


def configure_logging(settings):
    """Apply LOG_LEVEL to the root logger; the Lambda runtime owns the handler."""
    logging.getLogger().setLevel(settings.log_level)
