"""Hall of Fame use cases.

Fetch the record set through the repository and delegate to the ranking
engine and the explainer.
"""

from achievement_ranking.config.logging_config import get_logger
from achievement_ranking.config.settings import Settings
from achievement_ranking.domain.exceptions import RepositoryError
from achievement_ranking.domain.models import RankedAchievement, ScoreExplanation
from achievement_ranking.domain.protocols import AchievementRepositoryProtocol
from achievement_ranking.services.hall_of_fame import rank_hall_of_fame
from achievement_ranking.services.score_explainer import explain_achievement_score
from achievement_ranking.services.time_utils import current_epoch_ms

logger = get_logger(__name__)


def rank_hall_of_fame_for_repository(
    repository: AchievementRepositoryProtocol,
    settings: Settings,
    now: int | None = None,
    owner_weight: float | None = None,
    limit: int | None = None,
) -> list[RankedAchievement]:
    """Rank every record in the repository.

    Steps:
    1. Fetch the full record set (owner aggregates need all of it)
    2. Rank with the requested or configured owner weight
    3. Truncate to limit, if given

    Args:
        repository: Record store
        settings: Application settings
        now: Current time in epoch ms (defaults to the wall clock)
        owner_weight: Owner-bonus multiplier; defaults to
            settings.hall_of_fame_owner_weight
        limit: Maximum number of results to return

    Returns:
        Ranked results, best first

    Raises:
        ConfigurationError: If owner_weight is negative
        RepositoryError: If the record set cannot be fetched

    Example:
        >>> top = rank_hall_of_fame_for_repository(repo, settings, limit=10)
        >>> len(top) <= 10
        True
    """
    if owner_weight is None:
        owner_weight = settings.hall_of_fame_owner_weight
    if now is None:
        now = current_epoch_ms()

    records = repository.list_all()
    ranked = rank_hall_of_fame(records, now=now, owner_weight=owner_weight)
    if limit is not None:
        ranked = ranked[:limit]

    logger.info(
        "hall_of_fame_built",
        records=len(records),
        returned=len(ranked),
        owner_weight=owner_weight,
        top_score=ranked[0].hof_score if ranked else None,
    )
    return ranked


def explain_for_repository(
    repository: AchievementRepositoryProtocol,
    settings: Settings,
    achievement_id: str,
    now: int | None = None,
    owner_weight: float | None = None,
) -> tuple[RankedAchievement, ScoreExplanation]:
    """Rank the repository and explain one achievement's merit score.

    Args:
        repository: Record store
        settings: Application settings
        achievement_id: Record to explain
        now: Current time in epoch ms (defaults to the wall clock)
        owner_weight: Owner-bonus multiplier; defaults to settings

    Returns:
        The ranked result and its component breakdown

    Raises:
        RepositoryError: If the achievement does not exist
        ScoreReconciliationError: If the breakdown does not add up
    """
    if repository.get_by_id(achievement_id) is None:
        raise RepositoryError(f"Unknown achievement: {achievement_id}")

    ranked = rank_hall_of_fame_for_repository(
        repository, settings, now=now, owner_weight=owner_weight
    )
    result = next(r for r in ranked if r.achievement.id == achievement_id)
    explanation = explain_achievement_score(result)

    logger.info(
        "hall_of_fame_explained",
        achievement_id=achievement_id,
        total=explanation.total,
        clamped=explanation.clamped,
    )
    return result, explanation
