"""
Tests for transaction service exceptions.
"""

from transaction_api.exceptions import (ErrorKind, TransactionNotFoundException,
                                        TransactionServiceException,
                                        TransactionServiceUnavailableException,
                                        TransactionValidationException,
                                        error_kind)


class TestExceptions:
    """Test custom exceptions."""

    def test_not_found_exception(self):
        exc = TransactionNotFoundException("txn-1")
        assert exc.kind is ErrorKind.NOT_FOUND
        assert "txn-1" in str(exc)
        assert exc.details == {"transaction_id": "txn-1"}

    def test_validation_exception(self):
        exc = TransactionValidationException("txn_date", "nope", "bad date")
        assert exc.kind is ErrorKind.VALIDATION
        assert "txn_date" in str(exc)
        assert "bad date" in str(exc)

    def test_unavailable_exception(self):
        exc = TransactionServiceUnavailableException("http://backend", "refused")
        assert exc.kind is ErrorKind.UNAVAILABLE
        assert "http://backend" in str(exc)
        assert "refused" in str(exc)

    def test_base_exception_defaults_to_internal(self):
        exc = TransactionServiceException("boom")
        assert exc.kind is ErrorKind.INTERNAL
        assert exc.details == {}

    def test_kind_can_be_overridden_per_instance(self):
        exc = TransactionServiceException("gone", kind=ErrorKind.NOT_FOUND)
        assert exc.kind is ErrorKind.NOT_FOUND
        assert TransactionServiceException.kind is ErrorKind.INTERNAL


def test_error_kind_of_untagged_errors_is_internal():
    assert error_kind(ValueError("x")) is ErrorKind.INTERNAL
    assert error_kind(TransactionNotFoundException(1)) is ErrorKind.NOT_FOUND
