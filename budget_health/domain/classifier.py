"""
Transaction classification heuristics used by the aggregator.

Income and savings transfers are detected by case-insensitive substring
matching on the free-text description. This is a heuristic, not a category
rule: "PayPal refund" matches the "pay" income keyword, and a salary booked as
"ACME Ltd" is missed. Swap in another TransactionClassifier to change the rule.
"""

from typing import Iterable, Protocol, Tuple

from budget_health.domain.models import Transaction

DEFAULT_INCOME_KEYWORDS: Tuple[str, ...] = ("salary", "wage", "pay", "income")
DEFAULT_SAVINGS_TRANSFER_KEYWORDS: Tuple[str, ...] = ("transfer from cheque", "transfer to cheque")


class TransactionClassifier(Protocol):
    """Decides which transactions count as income and as savings transfers"""

    def is_income(self, transaction: Transaction) -> bool: ...

    def is_savings_transfer(self, transaction: Transaction) -> bool: ...


class KeywordClassifier:
    """Description keyword matcher"""

    def __init__(
        self,
        income_keywords: Iterable[str] = DEFAULT_INCOME_KEYWORDS,
        savings_transfer_keywords: Iterable[str] = DEFAULT_SAVINGS_TRANSFER_KEYWORDS,
    ):
        self.income_keywords = tuple(k.lower() for k in income_keywords if k)
        self.savings_transfer_keywords = tuple(k.lower() for k in savings_transfer_keywords if k)

    @staticmethod
    def _matches(description: str, keywords: Tuple[str, ...]) -> bool:
        text = (description or "").lower()
        return any(keyword in text for keyword in keywords)

    def is_income(self, transaction: Transaction) -> bool:
        # Outflows are never income, whatever the description says
        return transaction.amount_cents > 0 and self._matches(transaction.description, self.income_keywords)

    def is_savings_transfer(self, transaction: Transaction) -> bool:
        return self._matches(transaction.description, self.savings_transfer_keywords)
