"""
Tests for HttpTransactionService.

The backend is simulated with ``httpx.MockTransport`` so requests never
leave the process.
"""

import json
from datetime import date
from typing import List

import httpx
import pytest

from transaction_api.exceptions import (ErrorKind, TransactionNotFoundException,
                                        TransactionServiceException,
                                        TransactionServiceUnavailableException)
from transaction_api.logging_config import clear_request_id, set_request_id
from transaction_api.services import HttpTransactionService

BASE_URL = "http://transactions.test/api"


def make_service(handler) -> HttpTransactionService:
    return HttpTransactionService(
        base_url=BASE_URL + "/", timeout=2.0, transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_get_transaction_success():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "txn-1", "amount": -42.5})

    service = make_service(handler)
    result = await service.get_transaction("txn-1")
    await service.close()

    assert result == {"id": "txn-1", "amount": -42.5}
    assert seen[0].method == "GET"
    assert str(seen[0].url) == f"{BASE_URL}/transactions/txn-1"


@pytest.mark.asyncio
async def test_get_transaction_404_raises_not_found():
    service = make_service(lambda request: httpx.Response(404, json={"detail": "missing"}))

    with pytest.raises(TransactionNotFoundException) as exc_info:
        await service.get_transaction("txn-9")

    assert exc_info.value.transaction_id == "txn-9"


@pytest.mark.asyncio
async def test_server_error_uses_backend_message():
    service = make_service(lambda request: httpx.Response(500, json={"message": "db down"}))

    with pytest.raises(TransactionServiceException) as exc_info:
        await service.get_transaction("txn-1")

    assert exc_info.value.kind is ErrorKind.INTERNAL
    assert str(exc_info.value) == "db down"
    assert exc_info.value.details["status_code"] == 500


@pytest.mark.asyncio
async def test_server_error_without_json_body():
    service = make_service(lambda request: httpx.Response(502, text="bad gateway"))

    with pytest.raises(TransactionServiceException) as exc_info:
        await service.get_transactions()

    assert "502" in str(exc_info.value)
    assert "bad gateway" in str(exc_info.value)


@pytest.mark.asyncio
async def test_list_404_is_not_a_not_found_error():
    service = make_service(lambda request: httpx.Response(404, text=""))

    with pytest.raises(TransactionServiceException) as exc_info:
        await service.get_transactions("acc-1")

    assert exc_info.value.kind is ErrorKind.INTERNAL


@pytest.mark.asyncio
async def test_create_sends_iso_dates():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "txn-2"})

    service = make_service(handler)
    created = await service.create_transaction({"txn_date": date(2014, 3, 15), "amount": 5})

    assert created == {"id": "txn-2"}
    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == {"txn_date": "2014-03-15", "amount": 5}


@pytest.mark.asyncio
async def test_update_targets_record_url():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "txn-1"})

    service = make_service(handler)
    await service.update_transaction({"id": "txn-1", "txn_date": date(2014, 3, 16)})

    assert seen[0].method == "PUT"
    assert seen[0].url.path == "/api/transactions/txn-1"


@pytest.mark.asyncio
async def test_grouped_listing_query_parameters():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"category": None, "transactions": []}])

    service = make_service(handler)
    groups = await service.get_transactions_by_category(date(2014, 1, 1), None)

    assert groups == [{"category": None, "transactions": []}]
    params = seen[0].url.params
    assert "groupByCategory" in params
    assert params["startDate"] == "2014-01-01"
    assert "endDate" not in params


@pytest.mark.asyncio
async def test_account_filter_query_parameter():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    service = make_service(handler)
    await service.get_transactions("acc-1")
    await service.get_transactions()
    await service.get_transactions("")

    assert seen[0].url.params["account"] == "acc-1"
    assert "account" not in seen[1].url.params
    assert "account" not in seen[2].url.params


@pytest.mark.asyncio
async def test_delete_404_raises_not_found():
    service = make_service(lambda request: httpx.Response(404))

    with pytest.raises(TransactionNotFoundException):
        await service.delete_transaction("txn-1")


@pytest.mark.asyncio
async def test_connection_error_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    service = make_service(handler)

    with pytest.raises(TransactionServiceUnavailableException) as exc_info:
        await service.get_transaction("txn-1")

    assert exc_info.value.kind is ErrorKind.UNAVAILABLE
    assert "connection refused" in str(exc_info.value)


@pytest.mark.asyncio
async def test_timeout_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    service = make_service(handler)

    with pytest.raises(TransactionServiceUnavailableException) as exc_info:
        await service.get_transactions()

    assert "timed out" in str(exc_info.value)


@pytest.mark.asyncio
async def test_request_id_is_forwarded():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    service = make_service(handler)
    set_request_id("req-123")
    try:
        await service.get_transactions()
    finally:
        clear_request_id()

    assert seen[0].headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_close_is_idempotent():
    service = make_service(lambda request: httpx.Response(200, json=[]))
    await service.get_transactions()

    await service.close()
    await service.close()
