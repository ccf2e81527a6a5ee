"""Hall of Fame ranking engine.

Merit score (0-100) = base score (seven owner-independent components, 0-90)
+ owner bonus (0-10, scaled by a caller-supplied multiplier), clamped at 100.

Component maximums: evidence 10, description 25, recency 15, url 5,
issuer 10, org level 15, type 10, owner bonus 10.
"""

import math
from collections.abc import Iterable
from typing import Final

from achievement_ranking.config.logging_config import get_logger
from achievement_ranking.domain.exceptions import ConfigurationError
from achievement_ranking.domain.models import (
    Achievement,
    AchievementType,
    ComponentScores,
    OrgLevel,
    OwnerAggregate,
    RankedAchievement,
)
from achievement_ranking.domain.scoring_constants import (
    DEFAULT_OWNER_WEIGHT,
    DESCRIPTION_MAX_SCORE,
    EVIDENCE_MAX_SCORE,
    ISSUER_MIN_LENGTH,
    ISSUER_SCORE,
    MAX_DESCRIPTION_LEN_FOR_FULL,
    MERIT_SCORE_CEILING,
    ORG_LEVEL_MAX_SCORE,
    OWNER_BONUS_MAX_SCORE,
    OWNER_EVIDENCE_LOG_SCALE,
    OWNER_EXTRA_RECORD_POINTS,
    OWNER_RAW_FOR_FULL_BONUS,
    OWNER_RECENCY_DECAY_DAYS,
    OWNER_RECENCY_MAX_POINTS,
    POINT_SCALE,
    RECENCY_HORIZON_FORTNIGHTS,
    RECENCY_MAX_SCORE,
    TRAINING_HOURS_LOG_SCALE,
    TRAINING_HOURS_MAX_CHARS,
    TYPE_MAX_SCORE,
    URL_SCORE,
)
from achievement_ranking.services.owner_aggregator import aggregate_owners
from achievement_ranking.services.time_utils import age_in_days, current_epoch_ms

logger = get_logger(__name__)

# Org level points (0-20): reward higher-level recognition
ORG_LEVEL_POINTS: Final[dict[OrgLevel, int]] = {
    OrgLevel.SCHOOL: 0,
    OrgLevel.DISTRICT: 5,
    OrgLevel.PROVINCE: 10,
    OrgLevel.REGION: 14,
    OrgLevel.NATIONAL: 20,
}

# Type points (0-20): significance of each achievement category
TYPE_POINTS: Final[dict[AchievementType, int]] = {
    AchievementType.CERTIFICATE: 2,
    AchievementType.DIPLOMA: 6,
    AchievementType.AWARD: 20,
    AchievementType.COMPETITION: 14,
    AchievementType.TRAINING: 4,
    AchievementType.OTHER: 0,
}

# Text fields counted towards the effective description length
DESCRIPTION_TEXT_FIELDS: Final[tuple[str, ...]] = (
    "description",
    "training_benefits",
    "training_next_actions",
    "award_level",
    "competition_category",
    "other_specified",
)


def effective_description_length(achievement: Achievement) -> float:
    """Trimmed length of the description plus type-specific fields.

    Positive training hours add min(20, ln(hours + 1) * 8) characters.
    """
    length = 0.0
    for field_name in DESCRIPTION_TEXT_FIELDS:
        value = getattr(achievement, field_name)
        if value and value.strip():
            length += len(value.strip())

    hours = achievement.training_hours
    if hours is not None and hours > 0:
        length += min(
            TRAINING_HOURS_MAX_CHARS, math.log(hours + 1) * TRAINING_HOURS_LOG_SCALE
        )
    return length


def compute_base_components(achievement: Achievement, now: int) -> ComponentScores:
    """Compute the seven owner-independent components.

    Args:
        achievement: Record to score
        now: Current time in epoch ms

    Returns:
        Normalized components; their total is the base score (0-90)
    """
    evidence = EVIDENCE_MAX_SCORE if achievement.evidence_count > 0 else 0.0

    description_ratio = min(
        effective_description_length(achievement) / MAX_DESCRIPTION_LEN_FOR_FULL, 1
    )
    description = description_ratio * DESCRIPTION_MAX_SCORE

    # 1 when new, 0 after ~392 days
    age_days = age_in_days(now, achievement.created_at)
    recency_ratio = max(
        0.0, (RECENCY_HORIZON_FORTNIGHTS - age_days / 14) / RECENCY_HORIZON_FORTNIGHTS
    )
    recency = recency_ratio * RECENCY_MAX_SCORE

    url = URL_SCORE if achievement.url else 0.0
    issuer = (
        ISSUER_SCORE
        if achievement.issuer and len(achievement.issuer) > ISSUER_MIN_LENGTH
        else 0.0
    )

    org_level = 0.0
    if achievement.org_level is not None:
        org_level = (
            ORG_LEVEL_POINTS.get(achievement.org_level, 0) / POINT_SCALE
        ) * ORG_LEVEL_MAX_SCORE

    type_score = (TYPE_POINTS.get(achievement.type, 0) / POINT_SCALE) * TYPE_MAX_SCORE

    return ComponentScores(
        evidence=evidence,
        description=description,
        recency=recency,
        url=url,
        issuer=issuer,
        org_level=org_level,
        type=type_score,
    )


def owner_aggregate_bonus(aggregate: OwnerAggregate, now: int) -> float:
    """Normalized owner bonus (0-10) before the owner-weight multiplier.

    raw = max(0, count - 1) * 20 + ln(total_evidence + 1) * 5
          + max(0, 15 - days_since_latest / 30)
    bonus = min(raw / 50 * 10, 10)

    Example:
        >>> agg = OwnerAggregate(owner_role=Role.TEACHER, owner_name="A",
        ...                      count=3, latest_created_at=0)
        >>> owner_aggregate_bonus(agg, now=0)
        10.0
    """
    extra_count = max(0, aggregate.count - 1) * OWNER_EXTRA_RECORD_POINTS
    evidence_factor = math.log(aggregate.total_evidence + 1) * OWNER_EVIDENCE_LOG_SCALE
    age_days = age_in_days(now, aggregate.latest_created_at)
    recency_factor = max(
        0.0, OWNER_RECENCY_MAX_POINTS - age_days / OWNER_RECENCY_DECAY_DAYS
    )
    raw = extra_count + evidence_factor + recency_factor
    normalized = raw / OWNER_RAW_FOR_FULL_BONUS * OWNER_BONUS_MAX_SCORE
    return min(normalized, OWNER_BONUS_MAX_SCORE)


def validate_owner_weight(owner_weight: float) -> None:
    """Reject negative multipliers and warn when the bonus can exceed 10.

    Multipliers above 1 are allowed; the final clamp at 100 still applies.

    Raises:
        ConfigurationError: If owner_weight is negative or not finite
    """
    if not math.isfinite(owner_weight) or owner_weight < 0:
        raise ConfigurationError(
            f"owner_weight must be a finite non-negative number, got {owner_weight}"
        )
    if owner_weight > 1:
        logger.warning(
            "owner_weight_exceeds_design_band",
            owner_weight=owner_weight,
            max_owner_bonus=OWNER_BONUS_MAX_SCORE * owner_weight,
        )


def score_achievement(
    achievement: Achievement,
    aggregate: OwnerAggregate,
    now: int,
    owner_weight: float = DEFAULT_OWNER_WEIGHT,
) -> RankedAchievement:
    """Score one record given its owner's aggregate."""
    components = compute_base_components(achievement, now)
    base_score = components.total
    owner_bonus_raw = owner_aggregate_bonus(aggregate, now)
    owner_bonus = owner_bonus_raw * owner_weight
    return RankedAchievement(
        achievement=achievement,
        components=components,
        base_score=base_score,
        owner_bonus_raw=owner_bonus_raw,
        owner_weight=owner_weight,
        owner_bonus=owner_bonus,
        hof_score=min(base_score + owner_bonus, MERIT_SCORE_CEILING),
        owner_aggregate=aggregate,
        computed_at=now,
    )


def rank_hall_of_fame(
    records: Iterable[Achievement],
    now: int | None = None,
    owner_weight: float = DEFAULT_OWNER_WEIGHT,
) -> list[RankedAchievement]:
    """Rank a record set by merit score.

    Args:
        records: Full record set (owner aggregates are built from it)
        now: Current time in epoch ms (defaults to the wall clock)
        owner_weight: Multiplier for the 0-10 owner bonus; keep <= 1 to
            stay within the designed 100-point band

    Returns:
        Results sorted by merit score descending, newest first on ties

    Raises:
        ConfigurationError: If owner_weight is negative

    Example:
        >>> ranked = rank_hall_of_fame(records, now=now_ms)
        >>> ranked[0].hof_score >= ranked[-1].hof_score
        True
    """
    validate_owner_weight(owner_weight)
    if now is None:
        now = current_epoch_ms()

    records = list(records)
    aggregates = aggregate_owners(records)

    ranked = [
        score_achievement(
            achievement, aggregates[achievement.owner_key], now, owner_weight
        )
        for achievement in records
    ]
    ranked.sort(key=lambda result: (-result.hof_score, -result.created_at))

    logger.debug(
        "hall_of_fame_ranked",
        count=len(ranked),
        owners=len(aggregates),
        owner_weight=owner_weight,
    )
    return ranked
