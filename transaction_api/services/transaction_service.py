"""
Transaction service contract.

The HTTP layer only ever talks to an object satisfying this protocol. All
methods are coroutines and raise ``TransactionNotFoundException`` (or any
``TransactionServiceException`` tagged ``ErrorKind.NOT_FOUND``) for ids
that do not exist.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class TransactionService(Protocol):
    """Persistence-facing operations on transactions."""

    async def create_transaction(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a transaction; the result includes the new ``id``."""
        ...

    async def update_transaction(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update the transaction identified by ``data["id"]``."""
        ...

    async def get_transaction(self, transaction_id: str) -> Dict[str, Any]:
        """Return one transaction hydrated with its account and category."""
        ...

    async def get_transactions(
        self, account_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Return all transactions, or only those of ``account_id``."""
        ...

    async def get_transactions_by_category(
        self, start_date: Optional[date], end_date: Optional[date]
    ) -> List[Dict[str, Any]]:
        """Return transactions in the date range grouped by category."""
        ...

    async def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        ...
