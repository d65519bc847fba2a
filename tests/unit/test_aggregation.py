"""Unit tests for transaction classification and monthly aggregation"""

import pytest
from datetime import date
from budget_health.domain.aggregation import (
    aggregate,
    available_balance,
    expense_breakdown,
    monthly_series,
)
from budget_health.domain.classifier import KeywordClassifier
from budget_health.domain.exceptions import InvalidInputError
from budget_health.domain.models import Account, AccountStatus
from factories import make_transaction


@pytest.fixture
def accounts():
    return [
        Account("acc_main", 300_000),
        Account("acc_save", 200_000),
        Account("acc_old", 999_999, AccountStatus.DISCONNECTED),
    ]


@pytest.fixture
def march_transactions():
    return [
        make_transaction("1", 2_000_000, date(2024, 3, 1), "Salary March"),
        make_transaction("2", -50_000, date(2024, 3, 2), "Groceries", category="groceries"),
        make_transaction("3", -150_000, date(2024, 3, 3), "Rent"),
        make_transaction("4", 30_000, date(2024, 3, 5), "Refund from store"),
        make_transaction("5", -100_000, date(2024, 3, 10), "Transfer from cheque to savings"),
        make_transaction("6", 20_000, date(2024, 3, 20), "Transfer to cheque from savings"),
        make_transaction("7", -70_000, date(2024, 2, 28), "Groceries"),  # previous month
        make_transaction("8", 1_900_000, date(2024, 2, 25), "Salary February"),
    ]


def test_classifier_income_is_case_insensitive():
    classifier = KeywordClassifier()
    assert classifier.is_income(make_transaction("1", 100, date(2024, 3, 1), "SALARY ACME"))
    assert classifier.is_income(make_transaction("2", 100, date(2024, 3, 1), "Weekly Wage"))


def test_classifier_outflow_never_income():
    classifier = KeywordClassifier()
    assert not classifier.is_income(make_transaction("1", -100, date(2024, 3, 1), "Salary reversal"))


def test_classifier_keyword_false_positive():
    """Substring matching is a heuristic: PayPal contains 'pay'"""
    classifier = KeywordClassifier()
    assert classifier.is_income(make_transaction("1", 100, date(2024, 3, 1), "PayPal refund"))


def test_classifier_custom_keywords():
    classifier = KeywordClassifier(income_keywords=["stipend"], savings_transfer_keywords=["to vault"])
    assert classifier.is_income(make_transaction("1", 100, date(2024, 3, 1), "Research Stipend"))
    assert not classifier.is_income(make_transaction("2", 100, date(2024, 3, 1), "Salary"))
    assert classifier.is_savings_transfer(make_transaction("3", -100, date(2024, 3, 1), "Move TO VAULT"))


def test_aggregate_empty_transactions(accounts):
    snapshot = aggregate([], accounts, 2024, 3)

    assert snapshot.monthly_income_cents == 0
    assert snapshot.monthly_expenses_cents == 0
    assert snapshot.monthly_savings_transfers_cents == 0
    assert snapshot.net_balance_cents == 0
    assert snapshot.available_balance_cents == 500_000


def test_aggregate_month(march_transactions, accounts):
    snapshot = aggregate(march_transactions, accounts, 2024, 3)

    assert snapshot.monthly_income_cents == 2_000_000
    # Every outflow counts, including the savings transfer
    assert snapshot.monthly_expenses_cents == 300_000
    assert snapshot.monthly_savings_transfers_cents == -80_000
    assert snapshot.net_balance_cents == 1_750_000


def test_aggregate_net_balance_is_income_side_minus_expenses(march_transactions, accounts):
    snapshot = aggregate(march_transactions, accounts, 2024, 3)
    inflows = sum(t.amount_cents for t in march_transactions if t.date.month == 3 and t.amount_cents > 0)

    assert snapshot.net_balance_cents == inflows - snapshot.monthly_expenses_cents


def test_aggregate_available_balance_ignores_month_and_disconnected(march_transactions, accounts):
    snapshot = aggregate(march_transactions, accounts, 2023, 1)

    assert snapshot.net_balance_cents == 0
    assert snapshot.available_balance_cents == 500_000
    assert snapshot.account_balances == {"acc_main": 300_000, "acc_save": 200_000}


def test_available_balance_sums_active_accounts(accounts):
    assert available_balance(accounts) == 500_000
    assert available_balance([]) == 0


def test_aggregate_uses_supplied_classifier(march_transactions, accounts):
    classifier = KeywordClassifier(income_keywords=["refund"])
    snapshot = aggregate(march_transactions, accounts, 2024, 3, classifier)

    assert snapshot.monthly_income_cents == 30_000


@pytest.mark.parametrize("month", [0, 13, "3"])
def test_aggregate_rejects_bad_month(month):
    with pytest.raises(InvalidInputError):
        aggregate([], [], 2024, month)


def test_expense_breakdown_ranks_spend(march_transactions):
    breakdown = expense_breakdown(march_transactions, 2024, 3, limit=2)

    assert [(c.name, c.amount_cents) for c in breakdown] == [
        ("Rent", 150_000),
        ("Transfer from cheque to savings", 100_000),
    ]


def test_expense_breakdown_prefers_category(march_transactions):
    names = [c.name for c in expense_breakdown(march_transactions, 2024, 3)]

    assert "groceries" in names
    assert "Groceries" not in names


def test_monthly_series(march_transactions):
    series = monthly_series(march_transactions, 2024)

    assert len(series) == 12
    assert series[1].expenses_cents == 70_000
    assert series[2].expenses_cents == 300_000
    assert series[2].net_balance_cents == 1_750_000
    assert series[5].net_balance_cents == 0
