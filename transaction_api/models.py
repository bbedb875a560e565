"""Pydantic models for request/response documentation and the in-memory store."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class Account(BaseModel):
    """Account a transaction is booked against."""

    id: str
    name: str


class Category(BaseModel):
    """Spending category."""

    id: str
    name: str


class StoredTransaction(BaseModel):
    """Raw transaction row as persisted, without joined records."""

    id: str
    txn_date: date
    amount: Decimal = Decimal("0")
    payee: Optional[str] = None
    memo: Optional[str] = None
    account_id: Optional[str] = None
    category_id: Optional[str] = None


class HydratedTransaction(StoredTransaction):
    """Transaction with its account and category joined in."""

    account: Optional[Account] = None
    category: Optional[Category] = None


class CategoryGroup(BaseModel):
    """Transactions of one category over a date range."""

    category: Optional[Category] = None
    transactions: list[HydratedTransaction] = Field(default_factory=list)
    total: Decimal = Decimal("0")


class MessageResponse(BaseModel):
    """Error body returned by the transaction routes."""

    message: str

