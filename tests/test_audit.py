"""Tests for the audit logging wrapper."""

import logging
from decimal import Decimal

import pytest

from virman.audit import audited, configure_logging
from virman.domain.errors import InsufficientFundsError


def test_success_is_logged(caplog, transfer_service, open_account):
    a = open_account("A", "100")
    b = open_account("B")

    with caplog.at_level(logging.INFO, logger="virman.audit"):
        result = audited("transfer.create", transfer_service.transfer, a.id, b.id, Decimal("10"), actor="alice")

    assert result.from_balance == Decimal("90")
    (record,) = caplog.records
    assert record.levelno == logging.INFO
    assert "transfer.create succeeded actor=alice" in record.getMessage()


def test_domain_error_is_logged_and_reraised(caplog, transfer_service, open_account):
    a = open_account("A", "5")
    b = open_account("B")

    with caplog.at_level(logging.INFO, logger="virman.audit"):
        with pytest.raises(InsufficientFundsError):
            audited("transfer.create", transfer_service.transfer, a.id, b.id, Decimal("10"))

    (record,) = caplog.records
    assert record.levelno == logging.WARNING
    assert "code=INSUFFICIENT_FUNDS" in record.getMessage()


def test_unexpected_error_is_logged_with_traceback(caplog):
    def broken():
        raise RuntimeError("disk on fire")

    with caplog.at_level(logging.INFO, logger="virman.audit"):
        with pytest.raises(RuntimeError):
            audited("transfer.create", broken)

    (record,) = caplog.records
    assert record.levelno == logging.ERROR
    assert record.exc_info is not None


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError, match="Unknown log level"):
        configure_logging("chatty")
