"""Score explanation for Hall of Fame results.

Formats the components already stored on a RankedAchievement as labeled
entries. Components are only recomputed when the caller asks for a
different instant or owner weight than the ranking used.
"""

from achievement_ranking.domain.exceptions import ScoreReconciliationError
from achievement_ranking.domain.models import (
    RankedAchievement,
    ScoreExplainComponent,
    ScoreExplanation,
)
from achievement_ranking.domain.scoring_constants import (
    MERIT_SCORE_CEILING,
    RECONCILIATION_TOLERANCE,
)
from achievement_ranking.services.hall_of_fame import (
    compute_base_components,
    owner_aggregate_bonus,
    validate_owner_weight,
)


def owner_bonus_label(owner_weight: float) -> str:
    """Label carrying the applied multiplier, e.g. 'ownerBonus(x1.5)'."""
    return f"ownerBonus(x{owner_weight:g})"


def explain_achievement_score(
    ranked: RankedAchievement,
    now: int | None = None,
    owner_weight: float | None = None,
) -> ScoreExplanation:
    """Break a merit score into labeled components.

    Args:
        ranked: Result from rank_hall_of_fame
        now: Instant to explain at; defaults to the ranking's instant
        owner_weight: Owner-bonus multiplier; defaults to the ranking's

    Returns:
        Components (seven base entries plus the owner bonus) and the total,
        min(100, sum of components)

    Raises:
        ScoreReconciliationError: If the breakdown of an unchanged result
            does not add up to its merit score
        ConfigurationError: If owner_weight is negative

    Example:
        >>> explanation = explain_achievement_score(ranked[0])
        >>> [c.label for c in explanation.components][-1]
        'ownerBonus(x1)'
    """
    if owner_weight is None:
        owner_weight = ranked.owner_weight
    else:
        validate_owner_weight(owner_weight)

    if now is None or now == ranked.computed_at:
        components = ranked.components
        owner_bonus_raw = ranked.owner_bonus_raw
        unchanged = owner_weight == ranked.owner_weight
    else:
        components = compute_base_components(ranked.achievement, now)
        owner_bonus_raw = owner_aggregate_bonus(ranked.owner_aggregate, now)
        unchanged = False
    owner_bonus = ranked.owner_bonus if unchanged else owner_bonus_raw * owner_weight

    entries = [
        ScoreExplainComponent(label=label, value=value)
        for label, value in components.as_pairs()
    ]
    entries.append(
        ScoreExplainComponent(label=owner_bonus_label(owner_weight), value=owner_bonus)
    )

    component_sum = sum(entry.value for entry in entries)
    total = min(MERIT_SCORE_CEILING, component_sum)

    if unchanged and abs(total - ranked.hof_score) >= RECONCILIATION_TOLERANCE:
        raise ScoreReconciliationError(component_sum, ranked.hof_score)

    return ScoreExplanation(
        components=entries,
        total=total,
        clamped=component_sum > MERIT_SCORE_CEILING,
    )
