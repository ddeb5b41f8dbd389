"""Ledger integrity checks."""

from collections import defaultdict
from decimal import Decimal

from virman.database.base import Database
from virman.domain.entities import BalanceDiscrepancy, TransactionKind


class IntegrityService:
    """Verify that stored balances and the transaction log agree."""

    def __init__(self, db: Database):
        """Initialize integrity service.

        Args:
            db: Database instance
        """
        self.db = db

    def verify_balances(self) -> list[BalanceDiscrepancy]:
        """Compare each stored balance with the sum of its signed transactions."""
        accounts, transactions = self.db.ledger_snapshot()

        ledger: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
        for txn in transactions:
            ledger[txn.account_id] += txn.signed_amount

        return [
            BalanceDiscrepancy(
                account_id=acc.id, stored_balance=acc.balance, ledger_balance=ledger[acc.id]
            )
            for acc in accounts
            if acc.balance != ledger[acc.id]
        ]

    def verify_transfer_pairs(self) -> list[str]:
        """Return pairing ids whose legs are not one matching out/in pair."""
        _, transactions = self.db.ledger_snapshot()

        legs = defaultdict(list)
        for txn in transactions:
            if txn.kind.is_transfer or txn.pair_id is not None:
                legs[txn.pair_id].append(txn)

        broken = []
        for pair_id, pair in legs.items():
            kinds = sorted(txn.kind.value for txn in pair)
            if (
                pair_id is None
                or kinds != [TransactionKind.TRANSFER_IN.value, TransactionKind.TRANSFER_OUT.value]
                or pair[0].account_id == pair[1].account_id
                or pair[0].amount != pair[1].amount
            ):
                broken.append(pair_id)
        return broken
