import threading
import time
from decimal import Decimal

import pytest
from botocore.exceptions import ClientError

from config import get_settings
from counter_store import get_counter_store
from message_store import get_message_store


def client_error(code, operation="UpdateItem"):
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakeTable:
    """In-memory DynamoDB table for the counter's reads and increments.

    An increment is checked and applied under one lock, which is what DynamoDB
    guarantees for a single conditional UpdateItem. ``latency`` is spent
    outside the lock on every call, like a network round-trip.
    """

    def __init__(self, items=None, latency=0.0):
        self.items = {key: dict(item) for key, item in (items or {}).items()}
        self.latency = latency
        self.writes = 0
        self.lock = threading.Lock()

    def _round_trip(self):
        if self.latency:
            time.sleep(self.latency)

    def get_item(self, Key, ConsistentRead=False):
        self._round_trip()
        with self.lock:
            item = self.items.get(Key["id"])
            item = dict(item) if item is not None else None
        return {"Item": item} if item is not None else {}

    def update_item(self, Key, UpdateExpression, ConditionExpression,
                    ExpressionAttributeNames, ExpressionAttributeValues,
                    ReturnValues):
        self._round_trip()
        with self.lock:
            item = self.items.get(Key["id"])
            if item is None:
                raise client_error("ConditionalCheckFailedException")
            item["count"] = item["count"] + Decimal(ExpressionAttributeValues[":inc"])
            self.writes += 1
            return {"Attributes": {"count": item["count"]}}


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings and store handles are cached per cold start; rebuild them per test."""
    for cached in (get_settings, get_counter_store, get_message_store):
        cached.cache_clear()
    yield
    for cached in (get_settings, get_counter_store, get_message_store):
        cached.cache_clear()


@pytest.fixture
def seeded_table():
    return FakeTable({"index": {"id": "index", "count": Decimal(2)}})
