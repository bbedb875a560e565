"""
HTTP client for a remote transaction backend.

Implements the transaction service contract by calling a backend that
exposes the same REST resource. Remote failures are translated into the
tagged exceptions from ``transaction_api.exceptions``.
"""

import time
from datetime import date
from typing import Any, Dict, List, Optional

import httpx
import structlog
from fastapi.encoders import jsonable_encoder

from ..exceptions import (ErrorKind, TransactionNotFoundException,
                          TransactionServiceException,
                          TransactionServiceUnavailableException)
from ..logging_config import get_request_id

logger = structlog.get_logger(__name__)


class HttpTransactionService:
    """
    Client for a transaction backend reachable over HTTP.

    Uses a persistent ``httpx.AsyncClient`` with connection pooling.

    Attributes:
        base_url: Base URL of the backend (without trailing slash)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Base URL of the transaction backend
            timeout: Request timeout in seconds
            transport: Optional httpx transport (mock transports in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            "Initialized HttpTransactionService",
            base_url=self.base_url,
            timeout=self.timeout,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                limits=httpx.Limits(
                    max_keepalive_connections=20,
                    max_connections=100,
                    keepalive_expiry=30.0,
                ),
            )
            logger.debug("Created new HTTP client with connection pooling")
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
            logger.debug("Closed HTTP client")

    def _get_request_headers(self) -> Dict[str, str]:
        headers = {
            "User-Agent": "transaction-api/1.0",
            "Accept": "application/json",
        }

        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id

        return headers

    async def _request(
        self,
        method: str,
        path: str,
        transaction_id: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Send a request and translate transport and status failures.

        A 404 is reported as not-found only when the request addressed a
        single transaction (``transaction_id`` is set).
        """
        start_time = time.perf_counter()
        client = await self._get_client()

        try:
            response = await client.request(
                method, path, headers=self._get_request_headers(), **kwargs
            )
        except httpx.TimeoutException as error:
            logger.error(
                "Transaction backend request timed out",
                method=method,
                path=path,
                timeout=self.timeout,
            )
            raise TransactionServiceUnavailableException(
                self.base_url, f"timed out after {self.timeout}s"
            ) from error
        except httpx.RequestError as error:
            logger.error(
                "Transaction backend request failed",
                method=method,
                path=path,
                error_type=type(error).__name__,
                error=str(error),
            )
            raise TransactionServiceUnavailableException(
                self.base_url, str(error)
            ) from error

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "Transaction backend responded",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        if response.status_code == 404 and transaction_id is not None:
            raise TransactionNotFoundException(transaction_id)

        if response.is_error:
            raise TransactionServiceException(
                message=_error_message(response),
                details={
                    "status_code": response.status_code,
                    "path": path,
                },
                kind=ErrorKind.INTERNAL,
            )

        return response

    async def create_transaction(self, data: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request(
            "POST", "/transactions", json=jsonable_encoder(data)
        )
        return response.json()

    async def update_transaction(self, data: Dict[str, Any]) -> Dict[str, Any]:
        transaction_id = str(data.get("id"))
        response = await self._request(
            "PUT",
            f"/transactions/{transaction_id}",
            transaction_id=transaction_id,
            json=jsonable_encoder(data),
        )
        return response.json()

    async def get_transaction(self, transaction_id: str) -> Dict[str, Any]:
        response = await self._request(
            "GET", f"/transactions/{transaction_id}", transaction_id=transaction_id
        )
        return response.json()

    async def get_transactions(
        self, account_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        params = {"account": account_id} if account_id else {}
        response = await self._request("GET", "/transactions", params=params)
        return response.json()

    async def get_transactions_by_category(
        self, start_date: Optional[date], end_date: Optional[date]
    ) -> List[Dict[str, Any]]:
        params = {"groupByCategory": ""}
        if start_date is not None:
            params["startDate"] = start_date.isoformat()
        if end_date is not None:
            params["endDate"] = end_date.isoformat()
        response = await self._request("GET", "/transactions", params=params)
        return response.json()

    async def delete_transaction(self, transaction_id: str) -> None:
        await self._request(
            "DELETE", f"/transactions/{transaction_id}", transaction_id=transaction_id
        )


def _error_message(response: httpx.Response) -> str:
    """Prefer the backend's ``message``/``detail`` field over the raw body."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if isinstance(message, str) and message:
            return message

    text = response.text[:200] or response.reason_phrase
    return f"Transaction backend returned {response.status_code}: {text}"
