"""Custom exception hierarchy for the achievement ranking engine.

Scoring never raises for missing optional fields; these cover configuration,
record-shape and collaborator failures.
"""


class AchievementRankingError(Exception):
    """Base exception for all application errors."""

    pass


class ConfigurationError(AchievementRankingError):
    """Invalid weights, multipliers or settings."""

    pass


class ValidationError(AchievementRankingError):
    """Record-shape violations detected before scoring."""

    def __init__(self, errors: list[str]) -> None:
        """Initialize with the individual validation messages."""
        self.errors = errors
        super().__init__("\n".join(errors))


class ScoreReconciliationError(AchievementRankingError):
    """Explanation components do not add up to the reported total."""

    def __init__(self, component_sum: float, total: float) -> None:
        self.component_sum = component_sum
        self.total = total
        super().__init__(
            f"Score components sum to {component_sum:.6f} but total is {total:.6f}"
        )


class RepositoryError(AchievementRankingError):
    """Record store errors."""

    pass
