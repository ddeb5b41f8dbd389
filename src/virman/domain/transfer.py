"""Transfer (virman) domain service.

A transfer debits one account and credits another as a single atomic unit,
recorded as a ``transfer_out`` / ``transfer_in`` pair sharing a pairing id.
Unlike expenses, a transfer never overdraws its source account.
"""

from typing import Optional

from virman.database.base import Database, new_id
from virman.domain.entities import NewTransaction, TransactionKind, TransferResult
from virman.domain.errors import (
    NotFoundError,
    ValidationError,
    same_account_transfer,
    transfer_not_found,
)
from virman.utils.amount_parser import normalize_amount

TRANSFER_PREFIX = "Virman: "
DEFAULT_TRANSFER_DESCRIPTION = "Account transfer"
IDEMPOTENCY_KEY_MAX_LENGTH = 255


class TransferService:
    """Service for moving funds between accounts."""

    def __init__(self, db: Database):
        """Initialize transfer service.

        Args:
            db: Database instance
        """
        self.db = db

    def transfer(
        self,
        from_account_id: str,
        to_account_id: str,
        amount,
        description: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> TransferResult:
        """Move ``amount`` from one account to another.

        The source is debited only if its live balance covers the amount;
        the check and the debit are one atomic step, so concurrent transfers
        cannot both pass on a stale balance. Debit, credit and both
        transaction rows commit together or not at all.

        Args:
            from_account_id: Source account ID
            to_account_id: Destination account ID
            amount: Strictly positive amount, at most four decimal places
            description: Optional description, stored with a "Virman: " prefix
            idempotency_key: Optional caller key; resubmitting a committed
                transfer with the same key returns it without moving money again

        Returns:
            TransferResult with both transactions and post-transfer balances

        Raises:
            ValidationError: If both sides are one account or the amount is invalid
            NotFoundError: If either account does not exist
            InsufficientFundsError: If the source balance is below the amount
            IdempotencyConflictError: If the key was used for a different transfer
            StorageError: If the storage layer failed to commit (safe to retry)
        """
        # Validation happens before any storage access
        if from_account_id == to_account_id:
            raise ValidationError(same_account_transfer(from_account_id))
        amount = normalize_amount(amount)
        if idempotency_key is not None:
            idempotency_key = idempotency_key.strip()
            if not idempotency_key or len(idempotency_key) > IDEMPOTENCY_KEY_MAX_LENGTH:
                raise ValidationError("Idempotency key must be 1-255 non-blank characters")

        text = (description or "").strip() or DEFAULT_TRANSFER_DESCRIPTION
        return self._execute(
            from_account_id,
            to_account_id,
            amount,
            f"{TRANSFER_PREFIX}{text}",
            idempotency_key=idempotency_key,
        )

    def _execute(
        self,
        from_account_id: str,
        to_account_id: str,
        amount,
        description: str,
        idempotency_key: Optional[str] = None,
        reverses: Optional[tuple[str, str]] = None,
    ) -> TransferResult:
        pair_id = new_id()
        out_reverses, in_reverses = reverses or (None, None)
        outgoing = NewTransaction(
            account_id=from_account_id,
            kind=TransactionKind.TRANSFER_OUT,
            amount=amount,
            description=description,
            pair_id=pair_id,
            idempotency_key=idempotency_key,
            reversal_of=out_reverses,
        )
        incoming = NewTransaction(
            account_id=to_account_id,
            kind=TransactionKind.TRANSFER_IN,
            amount=amount,
            description=description,
            pair_id=pair_id,
            reversal_of=in_reverses,
        )
        return self.db.perform_transfer(outgoing, incoming)

    def get_transfer(self, pair_id: str) -> TransferResult:
        """Load a committed transfer by pairing id.

        Balances in the result are the accounts' current balances.

        Raises:
            NotFoundError: If no transfer has that pairing id
        """
        legs = self.db.get_transfer_legs(pair_id)
        outgoing = next((t for t in legs if t.kind == TransactionKind.TRANSFER_OUT), None)
        incoming = next((t for t in legs if t.kind == TransactionKind.TRANSFER_IN), None)
        if outgoing is None or incoming is None:
            raise NotFoundError(transfer_not_found(pair_id))

        source = self.db.get_account(outgoing.account_id)
        destination = self.db.get_account(incoming.account_id)
        return TransferResult(
            pair_id=pair_id,
            outgoing=outgoing,
            incoming=incoming,
            from_balance=source.balance,
            to_balance=destination.balance,
        )

    def reverse_transfer(self, pair_id: str, description: Optional[str] = None) -> TransferResult:
        """Send a committed transfer's amount back to where it came from.

        The reversal is itself a transfer and needs the original destination
        to still hold the funds. The new outgoing leg offsets the original
        incoming leg and vice versa.

        Raises:
            NotFoundError: If no transfer has that pairing id
            InsufficientFundsError: If the original destination cannot cover it
            ConflictError: If the transfer was already reversed
        """
        original = self.get_transfer(pair_id)
        text = (description or "").strip() or f"Reversal of transfer {pair_id}"
        return self._execute(
            original.incoming.account_id,
            original.outgoing.account_id,
            original.amount,
            f"{TRANSFER_PREFIX}{text}",
            reverses=(original.incoming.id, original.outgoing.id),
        )
