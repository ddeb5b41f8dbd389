"""Ledger invariants over seeded random operation sequences."""

import random
from decimal import Decimal

import pytest

from virman.domain.errors import DomainError

ACCOUNTS = 4
STEPS = 150


@pytest.mark.parametrize("seed", [1, 7, 2024])
def test_random_operations_keep_ledger_consistent(
    seed,
    account_service,
    transaction_service,
    transfer_service,
    integrity_service,
    open_account,
):
    rng = random.Random(seed)
    accounts = [open_account(f"Account {i}", str(rng.randint(0, 500))) for i in range(ACCOUNTS)]
    ids = [acc.id for acc in accounts]

    def total():
        return sum((account_service.get_account(i).balance for i in ids), Decimal("0"))

    expected_total = total()
    for _ in range(STEPS):
        amount = Decimal(rng.randint(-50, 40000)) / 100
        op = rng.choice(["income", "expense", "transfer", "transfer", "reverse"])
        before = total()
        try:
            if op == "income":
                transaction_service.record_income(rng.choice(ids), amount, "random income")
                expected_total += amount
            elif op == "expense":
                transaction_service.record_expense(rng.choice(ids), amount, "random expense")
                expected_total -= amount
            elif op == "transfer":
                transfer_service.transfer(rng.choice(ids), rng.choice(ids), amount)
            else:
                candidates = transaction_service.list_transactions(kind="expense")
                if candidates:
                    reversed_txn = rng.choice(candidates)
                    transaction_service.reverse_transaction(reversed_txn.id)
                    expected_total += reversed_txn.amount
        except DomainError:
            # Aborted operations leave no trace
            assert total() == before

        assert total() == expected_total

    assert integrity_service.verify_balances() == []
    assert integrity_service.verify_transfer_pairs() == []

    for account_id in ids:
        for txn in transaction_service.list_transactions(account_id=account_id):
            assert txn.amount > 0
