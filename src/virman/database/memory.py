"""In-process database implementation for tests and development."""

import threading
from contextlib import ExitStack, contextmanager
from dataclasses import replace
from datetime import date, datetime, time, timedelta, UTC
from decimal import Decimal
from typing import Iterator, Optional

from virman.database.base import Database, OPENING_BALANCE_DESCRIPTION, new_id
from virman.domain.entities import (
    Account,
    AccountType,
    NewTransaction,
    Transaction,
    TransactionKind,
    TransferResult,
)
from virman.domain.errors import (
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
    account_not_found,
    already_reversed,
    duplicate_account_name,
    insufficient_funds,
)
from virman.domain.rules import (
    ensure_active,
    ensure_balance_in_range,
    ensure_replay_matches,
    ensure_transferable,
)
from virman.utils.amount_parser import quantize_amount


class InMemoryDatabase(Database):
    """Dictionary-backed implementation of Database interface.

    Each account has its own lock, held for the whole read-check-write of
    any operation that changes its balance; transfers take both locks in id
    order. Results are published under a short commit lock so readers see
    a balance change and its transaction rows together or not at all.
    """

    def __init__(self):
        self._accounts: dict[str, Account] = {}
        self._account_locks: dict[str, threading.Lock] = {}
        self._transactions: list[Transaction] = []
        self._transactions_by_id: dict[str, Transaction] = {}
        self._idempotency_index: dict[str, Transaction] = {}
        self._reversals: dict[str, Transaction] = {}
        self._commit_lock = threading.RLock()

    def connect(self) -> None:
        """Connect to the database."""
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    def initialize_schema(self) -> None:
        """Initialize database schema (nothing to create in memory)."""
        pass

    @contextmanager
    def _locked(self, *account_ids: str) -> Iterator[None]:
        """Hold the locks of the given accounts, acquired in sorted id order."""
        with self._commit_lock:
            locks = []
            for account_id in sorted(set(account_ids)):
                lock = self._account_locks.get(account_id)
                if lock is None:
                    raise NotFoundError(account_not_found(account_id))
                locks.append(lock)

        with ExitStack() as stack:
            for lock in locks:
                stack.enter_context(lock)
            yield

    def _require_account(self, account_id: str) -> Account:
        account = self._accounts.get(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _ensure_not_reversed(self, transaction_id: Optional[str]) -> None:
        if transaction_id is not None and transaction_id in self._reversals:
            raise ConflictError(already_reversed(transaction_id))

    def _build(self, entry: NewTransaction) -> Transaction:
        return Transaction(
            id=new_id(),
            account_id=entry.account_id,
            kind=entry.kind,
            amount=entry.amount,
            description=entry.description,
            created_at=datetime.now(UTC),
            category=entry.category,
            pair_id=entry.pair_id,
            idempotency_key=entry.idempotency_key,
            reversal_of=entry.reversal_of,
        )

    def _append(self, txn: Transaction) -> None:
        """Append to the log; callers hold the commit lock."""
        self._transactions.append(txn)
        self._transactions_by_id[txn.id] = txn
        if txn.idempotency_key is not None:
            self._idempotency_index[txn.idempotency_key] = txn
        if txn.reversal_of is not None:
            self._reversals[txn.reversal_of] = txn

    def _set_balance(self, account_id: str, balance: Decimal) -> None:
        """Publish a new balance; callers hold the account lock and the commit lock."""
        self._accounts[account_id] = replace(self._accounts[account_id], balance=balance)

    def _unindex(self, txn: Transaction) -> None:
        del self._transactions_by_id[txn.id]
        if self._idempotency_index.get(txn.idempotency_key) is txn:
            del self._idempotency_index[txn.idempotency_key]
        if self._reversals.get(txn.reversal_of) is txn:
            del self._reversals[txn.reversal_of]

    def _publish(self, balances: dict[str, Decimal], transactions: list[Transaction]) -> None:
        """Apply new balances and log rows together; callers hold the commit lock.

        If any step fails, the accounts and the log are put back as they were.
        """
        previous = {account_id: self._accounts[account_id] for account_id in balances}
        log_length = len(self._transactions)
        try:
            for account_id, balance in balances.items():
                self._set_balance(account_id, balance)
            for txn in transactions:
                self._append(txn)
        except Exception:
            self._accounts.update(previous)
            for txn in self._transactions[log_length:]:
                self._unindex(txn)
            del self._transactions[log_length:]
            raise

    # Account operations
    def create_account(
        self,
        account_type: AccountType,
        name: str,
        bank_name: str,
        currency: str,
        opening_balance: Decimal = Decimal("0"),
        opening_description: str = OPENING_BALANCE_DESCRIPTION,
    ) -> Account:
        """Create an account, recording any opening balance as a transaction."""
        with self._commit_lock:
            if any(acc.name == name for acc in self._accounts.values()):
                raise ConflictError(duplicate_account_name(name))

            account = Account(
                id=new_id(),
                account_type=account_type,
                name=name,
                bank_name=bank_name,
                balance=quantize_amount(opening_balance),
                currency=currency,
                is_active=True,
                created_at=datetime.now(UTC),
            )
            self._accounts[account.id] = account
            self._account_locks[account.id] = threading.Lock()

            if opening_balance != 0:
                kind = TransactionKind.INCOME if opening_balance > 0 else TransactionKind.EXPENSE
                self._append(
                    self._build(
                        NewTransaction(
                            account_id=account.id,
                            kind=kind,
                            amount=abs(account.balance),
                            description=opening_description,
                        )
                    )
                )
            return account

    def get_account(self, account_id: str) -> Optional[Account]:
        """Get account by ID."""
        return self._accounts.get(account_id)

    def list_accounts(self, include_inactive: bool = False) -> list[Account]:
        """List accounts ordered by name."""
        with self._commit_lock:
            accounts = list(self._accounts.values())
        if not include_inactive:
            accounts = [acc for acc in accounts if acc.is_active]
        return sorted(accounts, key=lambda acc: acc.name)

    def update_account_name(self, account_id: str, name: str, bank_name: Optional[str] = None) -> None:
        """Update account name and optionally bank name."""
        with self._locked(account_id), self._commit_lock:
            account = self._require_account(account_id)
            if any(acc.name == name and acc.id != account_id for acc in self._accounts.values()):
                raise ConflictError(duplicate_account_name(name))
            self._accounts[account_id] = replace(
                account, name=name, bank_name=bank_name if bank_name is not None else account.bank_name
            )

    def set_account_active(self, account_id: str, is_active: bool) -> None:
        """Mark an account active or inactive."""
        with self._locked(account_id), self._commit_lock:
            account = self._require_account(account_id)
            self._accounts[account_id] = replace(account, is_active=is_active)

    def delete_account(self, account_id: str) -> None:
        """Delete an account with no transactions."""
        with self._locked(account_id), self._commit_lock:
            self._require_account(account_id)
            count = self._count_for(account_id)
            if count:
                raise ConflictError(
                    f"Cannot delete account {account_id}: it has {count} "
                    f"transaction{'s' if count != 1 else ''}"
                )
            del self._accounts[account_id]
            del self._account_locks[account_id]

    def _count_for(self, account_id: str) -> int:
        return sum(1 for txn in self._transactions if txn.account_id == account_id)

    def get_account_transaction_count(self, account_id: str) -> int:
        """Get count of transactions associated with an account."""
        with self._commit_lock:
            return self._count_for(account_id)

    # Balance mutation
    def adjust_balance(self, account_id: str, delta: Decimal) -> Decimal:
        """Apply a signed delta under the account's lock. Returns the new balance."""
        delta = quantize_amount(delta)
        with self._locked(account_id):
            balance = self._require_account(account_id).balance + delta
            ensure_balance_in_range(account_id, balance)
            with self._commit_lock:
                self._set_balance(account_id, balance)
            return balance

    # Ledger writes
    def record_entry(self, entry: NewTransaction) -> Transaction:
        """Write a single-entry transaction together with its balance delta."""
        with self._locked(entry.account_id):
            account = self._require_account(entry.account_id)
            ensure_active(account)
            txn = self._build(entry)
            balance = account.balance + entry.amount * entry.kind.sign
            ensure_balance_in_range(account.id, balance)

            with self._commit_lock:
                self._ensure_not_reversed(entry.reversal_of)
                self._publish({account.id: balance}, [txn])
            return txn

    def _find_replay(self, outgoing: NewTransaction, incoming: NewTransaction) -> Optional[TransferResult]:
        """Look up a committed transfer by key; callers hold the commit lock."""
        existing_out = self._idempotency_index.get(outgoing.idempotency_key)
        if existing_out is None:
            return None

        existing_in = next(
            txn
            for txn in self._transactions
            if txn.pair_id == existing_out.pair_id and txn.kind == TransactionKind.TRANSFER_IN
        )
        ensure_replay_matches(existing_out, existing_in, outgoing, incoming)
        return TransferResult(
            pair_id=existing_out.pair_id,
            outgoing=existing_out,
            incoming=existing_in,
            from_balance=self._accounts[existing_out.account_id].balance,
            to_balance=self._accounts[existing_in.account_id].balance,
            replayed=True,
        )

    def perform_transfer(self, outgoing: NewTransaction, incoming: NewTransaction) -> TransferResult:
        """Move funds between two accounts while holding both account locks."""
        with self._locked(outgoing.account_id, incoming.account_id):
            # Same-key retries queue on these locks, so the loser sees the winner's rows.
            if outgoing.idempotency_key is not None:
                with self._commit_lock:
                    replay = self._find_replay(outgoing, incoming)
                if replay is not None:
                    return replay

            source = self._require_account(outgoing.account_id)
            destination = self._require_account(incoming.account_id)
            ensure_transferable(source, destination)
            self._ensure_not_reversed(outgoing.reversal_of)
            self._ensure_not_reversed(incoming.reversal_of)

            # The source lock is held, so this balance is the live one.
            if source.balance < outgoing.amount:
                raise InsufficientFundsError(insufficient_funds(source.id, outgoing.amount))
            from_balance = source.balance - outgoing.amount
            to_balance = destination.balance + incoming.amount
            ensure_balance_in_range(destination.id, to_balance)
            out_txn = self._build(outgoing)
            in_txn = self._build(incoming)

            with self._commit_lock:
                # The same key may have committed meanwhile against other accounts.
                if outgoing.idempotency_key is not None:
                    replay = self._find_replay(outgoing, incoming)
                    if replay is not None:
                        return replay
                self._ensure_not_reversed(outgoing.reversal_of)
                self._ensure_not_reversed(incoming.reversal_of)

                self._publish({source.id: from_balance, destination.id: to_balance}, [out_txn, in_txn])

            return TransferResult(
                pair_id=outgoing.pair_id,
                outgoing=out_txn,
                incoming=in_txn,
                from_balance=from_balance,
                to_balance=to_balance,
            )

    # Transaction log reads
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        return self._transactions_by_id.get(transaction_id)

    def list_transactions(
        self,
        account_id: Optional[str] = None,
        kind: Optional[TransactionKind] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        pair_id: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first."""
        with self._commit_lock:
            transactions = list(reversed(self._transactions))

        if account_id is not None:
            transactions = [txn for txn in transactions if txn.account_id == account_id]
        if kind is not None:
            transactions = [txn for txn in transactions if txn.kind == kind]
        if start_date is not None:
            start = datetime.combine(start_date, time.min, tzinfo=UTC)
            transactions = [txn for txn in transactions if txn.created_at >= start]
        if end_date is not None:
            end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=UTC)
            transactions = [txn for txn in transactions if txn.created_at < end]
        if pair_id is not None:
            transactions = [txn for txn in transactions if txn.pair_id == pair_id]
        return transactions

    def get_transfer_legs(self, pair_id: str) -> list[Transaction]:
        """Get the legs of a transfer, transfer_out first."""
        with self._commit_lock:
            return [txn for txn in self._transactions if txn.pair_id == pair_id]

    def find_reversal(self, transaction_id: str) -> Optional[Transaction]:
        """Get the transaction offsetting the given one."""
        return self._reversals.get(transaction_id)

    def ledger_snapshot(self) -> tuple[list[Account], list[Transaction]]:
        """Copy every account and transaction under the commit lock."""
        with self._commit_lock:
            accounts = sorted(self._accounts.values(), key=lambda acc: acc.name)
            return accounts, list(self._transactions)
