"""
Transaction REST resource.

Maps the ``/transactions`` routes onto a transaction service:

- POST   /transactions       create, then return the hydrated record
- PUT    /transactions/{id}  update, then return the hydrated record
- GET    /transactions/{id}  one transaction (404 when it does not exist)
- GET    /transactions       all, by account, or grouped by category
- DELETE /transactions/{id}  delete (204)

Failures are answered with ``{"message": ...}`` bodies. Only a not-found
error on the single-record read becomes a 404; everything else is a 500
carrying the error text.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Body, Query, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..exceptions import ErrorKind, TransactionServiceException, error_kind
from ..metrics import track_transaction_operation
from ..models import MessageResponse
from ..services.transaction_service import TransactionService
from ..validators import coerce_optional_date, coerce_transaction_body

ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    500: {"description": "Transaction service error", "model": MessageResponse},
}


def _record_id(record: Any) -> Any:
    """Extract the id of a record returned by a create/update call."""
    if isinstance(record, dict):
        record_id = record.get("id")
    else:
        record_id = getattr(record, "id", None)

    if record_id is None:
        raise TransactionServiceException("Transaction service returned a record without an id")
    return record_id


class TransactionResource:
    """
    HTTP adapter around a transaction service.

    Stateless apart from its collaborators: every handler awaits the
    service and translates the outcome into a response.

    Attributes:
        service: Transaction service all calls are delegated to
        logger: Logger receiving failed operations
        router: FastAPI router carrying the five transaction routes
    """

    def __init__(self, service: TransactionService, logger: Optional[Any] = None):
        """
        Initialize the resource.

        Args:
            service: Transaction service implementation
            logger: structlog-style logger, defaults to this module's logger
        """
        self.service = service
        self.logger = logger or structlog.get_logger(__name__)
        self.router = APIRouter(tags=["Transactions"])
        self._add_routes()

    def _add_routes(self) -> None:
        self.router.add_api_route(
            "/transactions",
            self.create_transaction,
            methods=["POST"],
            responses={200: {"description": "Created transaction, hydrated"}, **ERROR_RESPONSES},
            summary="Create transaction",
        )
        self.router.add_api_route(
            "/transactions/{transaction_id}",
            self.update_transaction,
            methods=["PUT"],
            responses={200: {"description": "Updated transaction, hydrated"}, **ERROR_RESPONSES},
            summary="Update transaction",
        )
        self.router.add_api_route(
            "/transactions/{transaction_id}",
            self.get_transaction,
            methods=["GET"],
            responses={
                200: {"description": "Transaction"},
                404: {"description": "Transaction does not exist", "model": MessageResponse},
                **ERROR_RESPONSES,
            },
            summary="Get transaction",
        )
        self.router.add_api_route(
            "/transactions",
            self.get_transactions,
            methods=["GET"],
            responses={200: {"description": "Transactions, flat or grouped"}, **ERROR_RESPONSES},
            summary="List transactions",
        )
        self.router.add_api_route(
            "/transactions/{transaction_id}",
            self.delete_transaction,
            methods=["DELETE"],
            status_code=status.HTTP_204_NO_CONTENT,
            responses=ERROR_RESPONSES,
            summary="Delete transaction",
        )

    def _success(self, operation: str, payload: Any) -> Response:
        track_transaction_operation(operation, "success")
        return JSONResponse(content=jsonable_encoder(payload))

    def _failure(self, operation: str, error: Exception) -> Response:
        track_transaction_operation(operation, "error")
        self.logger.error(
            "Transaction operation failed",
            operation=operation,
            error_kind=error_kind(error).value,
            error=str(error),
            exc_info=error,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": str(error)},
        )

    async def create_transaction(
        self, body: Dict[str, Any] = Body(..., description="Transaction fields without id")
    ) -> Response:
        """
        Create a transaction.

        The stored record is fetched again after the insert so the response
        carries the joined account and category.
        """
        try:
            data = coerce_transaction_body(body)
            created = await self.service.create_transaction(data)
            created_id = _record_id(created)
            transaction = await self.service.get_transaction(created_id)
        except Exception as error:
            return self._failure("create", error)

        self.logger.info("Transaction created", transaction_id=created_id)
        return self._success("create", transaction)

    async def update_transaction(
        self,
        transaction_id: str,
        body: Dict[str, Any] = Body(..., description="Transaction fields including id"),
    ) -> Response:
        """
        Update a transaction and return it hydrated.

        A body without an ``id`` is addressed by the path id.
        """
        try:
            data = coerce_transaction_body(body)
            data.setdefault("id", transaction_id)
            updated = await self.service.update_transaction(data)
            updated_id = _record_id(updated)
            transaction = await self.service.get_transaction(updated_id)
        except Exception as error:
            return self._failure("update", error)

        self.logger.info("Transaction updated", transaction_id=updated_id)
        return self._success("update", transaction)

    async def get_transaction(self, transaction_id: str) -> Response:
        """Get one transaction."""
        try:
            transaction = await self.service.get_transaction(transaction_id)
        except Exception as error:
            if error_kind(error) is ErrorKind.NOT_FOUND:
                track_transaction_operation("get", "not_found")
                return JSONResponse(
                    status_code=status.HTTP_404_NOT_FOUND,
                    content={"message": f"Transaction {transaction_id} does not exist"},
                )
            return self._failure("get", error)

        return self._success("get", transaction)

    async def get_transactions(
        self,
        account: Optional[str] = Query(None, description="Only transactions of this account"),
        group_by_category: Optional[str] = Query(
            None,
            alias="groupByCategory",
            description="Present (any value, even empty) to group by category",
        ),
        start_date: Optional[str] = Query(None, alias="startDate", description="ISO date"),
        end_date: Optional[str] = Query(None, alias="endDate", description="ISO date"),
    ) -> Response:
        """
        List transactions.

        Example: ``/transactions?groupByCategory&startDate=2014-01-01&endDate=2014-12-31``
        """
        try:
            if group_by_category is not None:
                start = coerce_optional_date("startDate", start_date)
                end = coerce_optional_date("endDate", end_date)
                result = await self.service.get_transactions_by_category(start, end)
            else:
                result = await self.service.get_transactions(account)
        except Exception as error:
            return self._failure("list", error)

        return self._success("list", result)

    async def delete_transaction(self, transaction_id: str) -> Response:
        """Delete a transaction; existence is not checked here."""
        try:
            await self.service.delete_transaction(transaction_id)
        except Exception as error:
            return self._failure("delete", error)

        track_transaction_operation("delete", "success")
        self.logger.info("Transaction deleted", transaction_id=transaction_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
