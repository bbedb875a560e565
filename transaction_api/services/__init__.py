"""
Transaction service implementations.
"""

from .http_transaction_service import HttpTransactionService
from .memory_transaction_service import InMemoryTransactionService
from .transaction_service import TransactionService

__all__ = ["TransactionService", "InMemoryTransactionService", "HttpTransactionService"]
