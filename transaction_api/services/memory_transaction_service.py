"""
In-memory transaction store.

Keeps accounts, categories and transactions in process memory. Used as the
default backend when no remote transaction service is configured, and by
the test suite.
"""

import asyncio
from datetime import date
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

import structlog
from pydantic import ValidationError

from ..exceptions import (ErrorKind, TransactionNotFoundException,
                          TransactionServiceException,
                          TransactionValidationException)
from ..models import (Account, Category, CategoryGroup, HydratedTransaction,
                      StoredTransaction)

logger = structlog.get_logger(__name__)


class InMemoryTransactionService:
    """
    Transaction service backed by dictionaries.

    Mutations return the raw stored row; reads return rows hydrated with
    their account and category.

    Attributes:
        accounts: Known accounts by id
        categories: Known categories by id
    """

    def __init__(
        self,
        accounts: Optional[Iterable[Account]] = None,
        categories: Optional[Iterable[Category]] = None,
    ):
        self.accounts: Dict[str, Account] = {a.id: a for a in accounts or []}
        self.categories: Dict[str, Category] = {c.id: c for c in categories or []}
        self._transactions: Dict[str, StoredTransaction] = {}
        self._lock = asyncio.Lock()

        logger.info(
            "Initialized in-memory transaction store",
            accounts=len(self.accounts),
            categories=len(self.categories),
        )

    def _validate(self, data: Dict[str, Any]) -> StoredTransaction:
        try:
            return StoredTransaction.model_validate(data)
        except ValidationError as e:
            raise TransactionServiceException(
                message=f"Invalid transaction: {e.error_count()} validation error(s)",
                details={"errors": e.errors(include_url=False)},
                kind=ErrorKind.VALIDATION,
            ) from e

    def _hydrate(self, row: StoredTransaction) -> HydratedTransaction:
        return HydratedTransaction(
            **row.model_dump(),
            account=self.accounts.get(row.account_id) if row.account_id else None,
            category=self.categories.get(row.category_id) if row.category_id else None,
        )

    def _sorted_rows(self) -> List[StoredTransaction]:
        return sorted(self._transactions.values(), key=lambda t: (t.txn_date, t.id))

    async def create_transaction(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Store a new transaction under a generated id."""
        async with self._lock:
            row = self._validate({**data, "id": str(uuid4())})
            self._transactions[row.id] = row

        logger.info("Transaction created", transaction_id=row.id)
        return row.model_dump()

    async def update_transaction(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the stored fields of an existing transaction."""
        transaction_id = data.get("id")
        if transaction_id is None:
            raise TransactionValidationException("id", None, "is required for update")
        transaction_id = str(transaction_id)

        async with self._lock:
            existing = self._transactions.get(transaction_id)
            if existing is None:
                raise TransactionNotFoundException(transaction_id)
            row = self._validate({**existing.model_dump(), **data, "id": transaction_id})
            self._transactions[transaction_id] = row

        logger.info("Transaction updated", transaction_id=transaction_id)
        return row.model_dump()

    async def get_transaction(self, transaction_id: str) -> Dict[str, Any]:
        row = self._transactions.get(str(transaction_id))
        if row is None:
            raise TransactionNotFoundException(transaction_id)
        return self._hydrate(row).model_dump()

    async def get_transactions(
        self, account_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        rows = self._sorted_rows()
        if account_id:
            rows = [r for r in rows if r.account_id == account_id]
        return [self._hydrate(r).model_dump() for r in rows]

    async def get_transactions_by_category(
        self, start_date: Optional[date], end_date: Optional[date]
    ) -> List[Dict[str, Any]]:
        """
        Group transactions by category within an inclusive date range.

        Either bound may be None to leave that side open. Groups are
        ordered by category name; uncategorized transactions come last
        under a null category.
        """
        groups: Dict[Optional[str], CategoryGroup] = {}
        for row in self._sorted_rows():
            if start_date is not None and row.txn_date < start_date:
                continue
            if end_date is not None and row.txn_date > end_date:
                continue

            category = self.categories.get(row.category_id) if row.category_id else None
            key = category.id if category else None
            group = groups.get(key)
            if group is None:
                group = groups[key] = CategoryGroup(category=category)
            group.transactions.append(self._hydrate(row))
            group.total += row.amount

        ordered = sorted(
            groups.values(),
            key=lambda g: (g.category is None, g.category.name if g.category else ""),
        )
        return [g.model_dump() for g in ordered]

    async def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction; unknown ids are ignored."""
        async with self._lock:
            removed = self._transactions.pop(str(transaction_id), None)

        logger.info(
            "Transaction deleted",
            transaction_id=transaction_id,
            existed=removed is not None,
        )
