"""Search metadata projection.

Builds the values persisted next to each achievement for indexed lookup:
full text, normalized title, tags and facets. The engine only produces
these; the repository decides where they are stored.
"""

from achievement_ranking.domain.academic_year import (
    academic_year_from_date,
    parse_local_date,
)
from achievement_ranking.domain.models import Achievement, SearchFacets, SearchMetadata
from achievement_ranking.domain.scoring_constants import DEFAULT_MAX_TAGS
from achievement_ranking.services.tag_extractor import derive_tags_for_achievement
from achievement_ranking.services.text_normalizer import normalize_text


def build_search_metadata(
    achievement: Achievement,
    tz_name: str = "UTC",
    max_tags: int = DEFAULT_MAX_TAGS,
) -> SearchMetadata:
    """Derive search metadata for one achievement.

    Args:
        achievement: Record being written
        tz_name: Timezone used to read the achievement date
        max_tags: Maximum tags to derive

    Returns:
        Metadata ready for the repository to persist

    Example:
        >>> metadata = build_search_metadata(achievement, tz_name="Asia/Bangkok")
        >>> metadata.facets.academic_year
        2567
    """
    day = parse_local_date(achievement.date, tz_name)
    return SearchMetadata(
        full_text=achievement.full_text,
        title=normalize_text(achievement.title),
        tags=derive_tags_for_achievement(achievement, max_count=max_tags),
        facets=SearchFacets(
            type=achievement.type,
            role=achievement.owner_role,
            org_level=achievement.org_level,
            year=day.year if day else None,
            academic_year=academic_year_from_date(achievement.date, tz_name),
        ),
        created_at=achievement.created_at,
    )
