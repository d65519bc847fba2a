"""Dependency injection for FastAPI endpoints"""

from datetime import date
from typing import Optional

from fastapi import Request

from budget_health.config import settings
from budget_health.domain.classifier import KeywordClassifier, TransactionClassifier


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_classifier() -> TransactionClassifier:
    """Provide the transaction classifier configured for this deployment"""
    return KeywordClassifier(settings.income_keywords, settings.savings_transfer_keywords)


def resolve_today(today: Optional[date]) -> date:
    """Explicit evaluation date from the caller, else the server's date"""
    return today or date.today()
