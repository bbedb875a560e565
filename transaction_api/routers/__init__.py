"""
API routers for the Transaction API.
"""

from .transactions import TransactionResource

__all__ = ["TransactionResource"]
