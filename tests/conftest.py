"""
Test configuration and fixtures
"""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from transaction_api.app import create_app
from transaction_api.models import Account, Category
from transaction_api.services import InMemoryTransactionService


@pytest.fixture
def mock_service():
    """Create mock transaction service."""
    service = AsyncMock()
    service.create_transaction = AsyncMock()
    service.update_transaction = AsyncMock()
    service.get_transaction = AsyncMock()
    service.get_transactions = AsyncMock()
    service.get_transactions_by_category = AsyncMock()
    service.delete_transaction = AsyncMock(return_value=None)
    return service


@pytest.fixture
def mock_logger():
    """Logger handed to the transaction resource."""
    return MagicMock()


@pytest.fixture
def client(mock_service, mock_logger):
    """Create test client around the mocked service."""
    app = create_app(service=mock_service, resource_logger=mock_logger)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def stored_transaction():
    """Raw row as returned by a create/update call."""
    return {
        "id": "txn-1",
        "txn_date": date(2014, 3, 15),
        "amount": Decimal("-42.50"),
        "payee": "Corner Grocery",
        "memo": None,
        "account_id": "acc-1",
        "category_id": "cat-food",
    }


@pytest.fixture
def hydrated_transaction(stored_transaction):
    """Same row with account and category joined in."""
    return {
        **stored_transaction,
        "account": {"id": "acc-1", "name": "Checking"},
        "category": {"id": "cat-food", "name": "Groceries"},
    }


@pytest.fixture
def memory_service():
    """In-memory store seeded with two accounts and two categories."""
    return InMemoryTransactionService(
        accounts=[
            Account(id="acc-1", name="Checking"),
            Account(id="acc-2", name="Savings"),
        ],
        categories=[
            Category(id="cat-food", name="Groceries"),
            Category(id="cat-auto", name="Auto"),
        ],
    )
