"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from budget_health.config import settings
from budget_health.domain.models import ApplyResult, BudgetScoreResult, SavingsStatus


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_budget_score(request_id: str, user_id: str, result: BudgetScoreResult, duration_ms: float) -> None:
    """Log structured score outcome for analysis"""
    logging.info(
        "Budget score computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "budget_score",
            "total_score": result.total_score,
            "risk_level": result.risk_level.value,
            "risk_ratio": result.metrics.risk_ratio,
            "duration_ms": duration_ms,
        },
    )


def log_savings_status(request_id: str, user_id: str, status: SavingsStatus, duration_ms: float) -> None:
    logging.info(
        "Savings status evaluated",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "savings_status",
            "has_shortfall": status.has_shortfall,
            "shortfall_cents": status.shortfall_cents,
            "strategy": status.strategy.value,
            "goals_adjusted": len(status.adjustments),
            "duration_ms": duration_ms,
        },
    )


def log_adjustments_applied(request_id: str, user_id: str, result: ApplyResult, duration_ms: float) -> None:
    level = logging.WARNING if result.partial_failure else logging.INFO
    logging.log(
        level,
        "Savings adjustments applied",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "apply_adjustments",
            "succeeded": len(result.succeeded),
            "failed_goal_ids": [goal_id for goal_id, _ in result.failed],
            "duration_ms": duration_ms,
        },
    )
