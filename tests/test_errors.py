"""Tests for the domain error taxonomy."""

import pytest

from virman.cli.error_handling import exit_code_for
from virman.domain.errors import (
    ConflictError,
    DomainError,
    IdempotencyConflictError,
    InsufficientFundsError,
    NotFoundError,
    StorageError,
    ValidationError,
    http_status_for,
    insufficient_funds,
)


@pytest.mark.parametrize(
    "error_type,code,status,exit_code",
    [
        (ValidationError, "VALIDATION_ERROR", 400, 1),
        (IdempotencyConflictError, "IDEMPOTENCY_CONFLICT", 400, 1),
        (NotFoundError, "NOT_FOUND", 404, 3),
        (InsufficientFundsError, "INSUFFICIENT_FUNDS", 400, 4),
        (ConflictError, "CONFLICT", 409, 5),
        (StorageError, "STORAGE_ERROR", 500, 6),
    ],
)
def test_error_kinds(error_type, code, status, exit_code):
    error = error_type("boom")

    assert isinstance(error, DomainError)
    assert isinstance(error, ValueError)
    assert error.code == code
    assert http_status_for(error) == status
    assert exit_code_for(error) == exit_code


def test_unknown_errors_map_to_server_error():
    assert http_status_for(RuntimeError("boom")) == 500
    assert exit_code_for(RuntimeError("boom")) == 1


def test_insufficient_funds_message_is_specific():
    message = insufficient_funds("acc-1", "1000.0000")
    assert message.startswith("Insufficient funds")
    assert "acc-1" in message
    assert "1000.0000" in message
