"""Financial aggregation - reduce transactions and accounts into monthly figures"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from budget_health.domain.classifier import KeywordClassifier, TransactionClassifier
from budget_health.domain.exceptions import InvalidInputError
from budget_health.domain.models import Account, AccountStatus, FinancialSnapshot, Transaction


@dataclass(frozen=True)
class MonthSummary:
    """One month of the yearly series"""

    month: int
    expenses_cents: int
    savings_transfers_cents: int
    net_balance_cents: int


@dataclass(frozen=True)
class SpendingCategory:
    name: str
    amount_cents: int


def _validate_month(year: int, month: int) -> None:
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidInputError(f"month must be an integer in 1..12, got {month!r}")
    if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9999:
        raise InvalidInputError(f"year is out of range: {year!r}")


def transactions_in_month(transactions: Iterable[Transaction], year: int, month: int) -> List[Transaction]:
    return [t for t in transactions if t.date.year == year and t.date.month == month]


def active_accounts(accounts: Iterable[Account]) -> List[Account]:
    return [a for a in accounts if a.status == AccountStatus.ACTIVE]


def available_balance(accounts: Iterable[Account]) -> int:
    """Current available balance: sum over active accounts only"""
    return sum(a.available_balance_cents for a in active_accounts(accounts))


def aggregate(
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    year: int,
    month: int,
    classifier: Optional[TransactionClassifier] = None,
) -> FinancialSnapshot:
    """
    Build the FinancialSnapshot for a calendar month.

    - Income: positive transactions the classifier flags as income
    - Expenses: every outflow in the month, regardless of category
    - Savings transfers: signed sum of transactions flagged as savings transfers
    - Net balance: signed sum of all transactions in the month
    - Available balance: active accounts right now, not filtered by month
    """
    _validate_month(year, month)
    classifier = classifier or KeywordClassifier()
    accounts = list(accounts)
    month_txns = transactions_in_month(transactions, year, month)

    income = sum(t.amount_cents for t in month_txns if classifier.is_income(t))
    expenses = sum(-t.amount_cents for t in month_txns if t.amount_cents < 0)
    savings_transfers = sum(t.amount_cents for t in month_txns if classifier.is_savings_transfer(t))
    net_balance = sum(t.amount_cents for t in month_txns)

    return FinancialSnapshot(
        monthly_income_cents=income,
        monthly_expenses_cents=expenses,
        monthly_savings_transfers_cents=savings_transfers,
        net_balance_cents=net_balance,
        available_balance_cents=available_balance(accounts),
        account_balances={a.account_id: a.available_balance_cents for a in active_accounts(accounts)},
    )


def expense_breakdown(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
    limit: int = 6,
) -> List[SpendingCategory]:
    """Largest spending groups in a month, keyed by category or else description"""
    _validate_month(year, month)
    totals: Dict[str, int] = defaultdict(int)
    for txn in transactions_in_month(transactions, year, month):
        if txn.amount_cents < 0:
            totals[txn.category or txn.description] += -txn.amount_cents

    # Name breaks ties so the result does not depend on input order
    ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return [SpendingCategory(name=name, amount_cents=amount) for name, amount in ranked[:limit]]


def monthly_series(
    transactions: Sequence[Transaction],
    year: int,
    classifier: Optional[TransactionClassifier] = None,
) -> List[MonthSummary]:
    """Expenses, savings transfers and net balance for each month of a year"""
    classifier = classifier or KeywordClassifier()
    series = []
    for month in range(1, 13):
        snapshot = aggregate(transactions, [], year, month, classifier)
        series.append(
            MonthSummary(
                month=month,
                expenses_cents=snapshot.monthly_expenses_cents,
                savings_transfers_cents=snapshot.monthly_savings_transfers_cents,
                net_balance_cents=snapshot.net_balance_cents,
            )
        )
    return series
