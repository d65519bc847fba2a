"""Prometheus metrics for monitoring budget scores, shortfalls and goal writes"""

from prometheus_client import Counter, Histogram

from budget_health.domain.models import ApplyResult, BudgetScoreResult, SavingsStatus

# Score metrics
budget_score_counter = Counter(
    "budget_score_total",
    "Budget scores computed",
    ["risk_level"],  # safe | warning | danger
)

budget_score_histogram = Histogram(
    "budget_score_value",
    "Distribution of composite budget scores",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)

# Savings metrics
savings_evaluation_counter = Counter(
    "savings_evaluation_total",
    "Savings status evaluations",
    ["outcome", "strategy"],  # outcome: shortfall | covered
)

goal_adjustment_counter = Counter(
    "goal_adjustment_writes_total",
    "Goal allocation writes from applied proposals",
    ["result"],  # succeeded | failed
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_budget_score(result: BudgetScoreResult) -> None:
    budget_score_counter.labels(risk_level=result.risk_level.value).inc()
    budget_score_histogram.observe(result.total_score)


def record_savings_status(status: SavingsStatus) -> None:
    outcome = "shortfall" if status.has_shortfall else "covered"
    savings_evaluation_counter.labels(outcome=outcome, strategy=status.strategy.value).inc()


def record_adjustments_applied(result: ApplyResult) -> None:
    goal_adjustment_counter.labels(result="succeeded").inc(len(result.succeeded))
    goal_adjustment_counter.labels(result="failed").inc(len(result.failed))
