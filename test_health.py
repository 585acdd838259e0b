import json
from decimal import Decimal
from unittest.mock import MagicMock, patch

from botocore.exceptions import EndpointConnectionError, NoRegionError

from conftest import FakeTable
from counter_store import CounterStore
from health import lambda_handler


def check(table):
    with patch("health.get_counter_store", return_value=CounterStore(table)):
        response = lambda_handler({"httpMethod": "GET"}, None)
    return response, json.loads(response["body"])


def test_connected_when_counter_readable():
    table = FakeTable({"index": {"id": "index", "count": Decimal(9)}})

    response, body = check(table)

    assert response["statusCode"] == 200
    assert body["status"] == "healthy"
    assert body["checks"] == {"database": "connected", "api": "operational"}
    assert body["service"] == "Resume API"
    assert body["version"] == "1.0.0"
    assert "timestamp" in body


def test_health_never_writes():
    table = FakeTable({"index": {"id": "index", "count": Decimal(9)}})

    check(table)

    assert table.writes == 0
    assert table.items["index"]["count"] == 9


def test_disconnected_when_record_missing():
    response, body = check(FakeTable())

    assert response["statusCode"] == 200
    assert body["checks"]["database"] == "disconnected"


def test_disconnected_when_store_unreachable():
    table = MagicMock()
    table.get_item.side_effect = EndpointConnectionError(endpoint_url="https://dynamodb.local")

    _, body = check(table)

    assert body["checks"]["database"] == "disconnected"
    table.update_item.assert_not_called()


def test_service_name_from_environment(monkeypatch):
    monkeypatch.setenv("SERVICE_NAME", "Resume Backend")
    monkeypatch.setenv("SERVICE_VERSION", "2.1.0")

    _, body = check(FakeTable({"index": {"id": "index", "count": Decimal(0)}}))

    assert body["service"] == "Resume Backend"
    assert body["version"] == "2.1.0"


def test_disconnected_when_store_cannot_be_built():
    with patch("counter_store.dynamodb_resource", side_effect=NoRegionError()):
        response = lambda_handler({"httpMethod": "GET"}, None)

    assert response["statusCode"] == 200
    assert json.loads(response["body"])["checks"]["database"] == "disconnected"
