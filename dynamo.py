import boto3
from botocore.config import Config


def dynamodb_resource(settings):
    """DynamoDB resource with bounded timeouts and botocore retries disabled.

    Transport failures surface to the caller on the first attempt; only
    optimistic-concurrency conflicts are retried, by the counter store.
    """
    config = Config(
        connect_timeout=settings.store_timeout,
        read_timeout=settings.store_timeout,
        retries={"mode": "standard", "total_max_attempts": 1},
    )
    return boto3.resource(
        "dynamodb",
        region_name=settings.region,
        endpoint_url=settings.endpoint_url,
        config=config,
    )


def error_code(exc):
    return exc.response.get("Error", {}).get("Code", "")
