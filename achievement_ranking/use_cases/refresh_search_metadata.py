"""Refresh stored search metadata.

Recomputes full text, normalized title, tags and facets for records and
saves them through the repository.
"""

from achievement_ranking.config.logging_config import get_logger
from achievement_ranking.config.settings import Settings
from achievement_ranking.domain.exceptions import RepositoryError
from achievement_ranking.domain.protocols import AchievementRepositoryProtocol
from achievement_ranking.services.search_metadata import build_search_metadata

logger = get_logger(__name__)


def refresh_search_metadata(
    repository: AchievementRepositoryProtocol,
    settings: Settings,
    achievement_id: str | None = None,
) -> int:
    """Build and save search metadata for one record or for all of them.

    Args:
        repository: Record store
        settings: Application settings (timezone, tag count)
        achievement_id: Single record to refresh; None refreshes everything

    Returns:
        Number of records refreshed

    Raises:
        RepositoryError: If achievement_id is unknown or saving fails
    """
    if achievement_id is not None:
        achievement = repository.get_by_id(achievement_id)
        if achievement is None:
            raise RepositoryError(f"Unknown achievement: {achievement_id}")
        records = [achievement]
    else:
        records = repository.list_all()

    refreshed = 0
    for achievement in records:
        if achievement.id is None:
            logger.warning("search_metadata_skipped_no_id", title=achievement.title)
            continue
        metadata = build_search_metadata(
            achievement,
            tz_name=settings.tz_default,
            max_tags=settings.tag_max_count,
        )
        repository.save_search_metadata(achievement.id, metadata)
        refreshed += 1

    logger.info("search_metadata_refreshed", count=refreshed)
    return refreshed
