import logging
import random
import time
from decimal import Decimal
from functools import lru_cache
from typing import NamedTuple

from botocore.exceptions import BotoCoreError, ClientError

from config import get_settings
from dynamo import dynamodb_resource, error_code
from errors import ConflictError, NotFoundError, StoreUnavailableError

logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"
# The item is locked by an in-flight transaction; safe to try again.
TRANSACTION_CONFLICT = "TransactionConflictException"


class Counter(NamedTuple):
    id: str
    count: int

    def as_dict(self):
        return {"id": self.id, "count": self.count}


def _as_count(item):
    value = item.get("count")
    if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
        raise StoreUnavailableError(f"Counter record has a malformed count: {value!r}")
    if value != int(value) or value < 0:
        raise StoreUnavailableError(f"Counter record has a malformed count: {value!r}")
    return int(value)


class CounterStore:
    """Visit counter kept as a single item in a DynamoDB table.

    ``increment`` is one ``UpdateItem`` that adds to the stored count on the
    server, so concurrent callers never overwrite each other. The write is
    conditioned on the item existing; it is never created here. Contention
    reported by DynamoDB is retried, at most ``max_attempts`` times in total.
    """

    def __init__(self, table, counter_id="index", max_attempts=5,
                 retry_base_delay=0.05, sleep=time.sleep):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.table = table
        self.counter_id = counter_id
        self.max_attempts = max_attempts
        self.retry_base_delay = retry_base_delay
        self._sleep = sleep

    def read(self) -> Counter:
        try:
            response = self.table.get_item(
                Key={"id": self.counter_id}, ConsistentRead=True
            )
        except ClientError as exc:
            raise StoreUnavailableError(
                f"Reading counter failed: {error_code(exc)}"
            ) from exc
        except BotoCoreError as exc:
            raise StoreUnavailableError(f"Reading counter failed: {exc}") from exc

        item = response.get("Item")
        if item is None:
            raise NotFoundError(f"Counter record {self.counter_id!r} does not exist")
        return Counter(self.counter_id, _as_count(item))

    def increment(self) -> Counter:
        for attempt in range(1, self.max_attempts + 1):
            try:
                response = self.table.update_item(
                    Key={"id": self.counter_id},
                    UpdateExpression="SET #c = #c + :inc",
                    ConditionExpression="attribute_exists(#id)",
                    ExpressionAttributeNames={"#id": "id", "#c": "count"},
                    ExpressionAttributeValues={":inc": 1},
                    ReturnValues="UPDATED_NEW",
                )
            except ClientError as exc:
                code = error_code(exc)
                if code == CONDITIONAL_CHECK_FAILED:
                    raise NotFoundError(
                        f"Counter record {self.counter_id!r} does not exist"
                    ) from exc
                if code != TRANSACTION_CONFLICT:
                    raise StoreUnavailableError(f"Incrementing counter failed: {code}") from exc
                logger.warning(
                    "Counter %r is contended (attempt %d of %d)",
                    self.counter_id, attempt, self.max_attempts,
                )
                if attempt < self.max_attempts:
                    self._backoff(attempt)
                continue
            except BotoCoreError as exc:
                raise StoreUnavailableError(f"Incrementing counter failed: {exc}") from exc
            return Counter(self.counter_id, _as_count(response["Attributes"]))

        raise ConflictError(
            f"Counter {self.counter_id!r} still contended after "
            f"{self.max_attempts} attempts"
        )

    def _backoff(self, attempt):
        delay = self.retry_base_delay * (2 ** (attempt - 1)) * random.uniform(0.5, 1.0)
        if delay > 0:
            self._sleep(delay)


def build_counter_store(settings):
    try:
        table = dynamodb_resource(settings).Table(settings.table_name)
    except BotoCoreError as exc:
        raise StoreUnavailableError(f"Cannot reach DynamoDB: {exc}") from exc
    return CounterStore(
        table,
        counter_id=settings.counter_id,
        max_attempts=settings.max_attempts,
        retry_base_delay=settings.retry_base_delay,
    )


@lru_cache(maxsize=None)
def get_counter_store() -> CounterStore:
    """Store reused across warm invocations; holds no counter state."""
    return build_counter_store(get_settings())
