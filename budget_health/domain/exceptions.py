"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Input is structurally invalid (malformed date, bad goal target, unknown strategy)"""

    pass


class GoalWriteError(DomainException):
    """Data store rejected a goal update (permission denied, stale write, connection loss)"""

    def __init__(self, goal_id: str, message: str):
        super().__init__(message)
        self.goal_id = goal_id
