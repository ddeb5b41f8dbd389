"""Dashboard rollups over account balances."""

from decimal import Decimal
from typing import Optional

from virman.database.base import Database
from virman.domain.account import parse_currency
from virman.domain.entities import AccountType, DashboardTotals

ZERO = Decimal("0.0000")


class DashboardService:
    """Read-only aggregates; safe to recompute at any time."""

    def __init__(self, db: Database):
        """Initialize dashboard service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_totals(self, currency: Optional[str] = None) -> DashboardTotals:
        """Sum active account balances.

        Positive balances count as cash and negative balances count, by
        absolute value, as debt. No conversion is done, so pass ``currency``
        to restrict the rollup when accounts hold different currencies.
        """
        if currency is not None:
            currency = parse_currency(currency)

        accounts = self.db.list_accounts()
        if currency is not None:
            accounts = [acc for acc in accounts if acc.currency == currency]

        subtotals = {account_type: ZERO for account_type in AccountType}
        total_cash = ZERO
        total_debt = ZERO
        cash_count = 0
        debt_count = 0

        for acc in accounts:
            subtotals[acc.account_type] += acc.balance
            if acc.balance > 0:
                total_cash += acc.balance
                cash_count += 1
            elif acc.balance < 0:
                total_debt += -acc.balance
                debt_count += 1

        return DashboardTotals(
            total_balance=sum(subtotals.values(), ZERO),
            subtotals=subtotals,
            total_cash=total_cash,
            total_debt=total_debt,
            cash_account_count=cash_count,
            debt_account_count=debt_count,
            account_count=len(accounts),
            currency=currency,
        )
