"""Owner aggregation for Hall of Fame ranking.

Folds a record set into per-owner statistics keyed by (role, name).
"""

from collections.abc import Iterable

from achievement_ranking.domain.models import Achievement, OwnerAggregate, Role

OwnerKey = tuple[Role, str]


def fold_record(aggregate: OwnerAggregate, achievement: Achievement) -> OwnerAggregate:
    """Return the aggregate updated with one more record.

    The description average uses the incremental mean
    avg' = (avg * (n - 1) + new_len) / n, with n >= 1 after the increment.
    """
    count = aggregate.count + 1
    description_length = len(achievement.description or "")
    return aggregate.model_copy(
        update={
            "count": count,
            "total_evidence": aggregate.total_evidence + achievement.evidence_count,
            "avg_description_length": (
                aggregate.avg_description_length * (count - 1) + description_length
            )
            / count,
            "latest_created_at": max(
                aggregate.latest_created_at, achievement.created_at
            ),
        }
    )


def aggregate_owners(records: Iterable[Achievement]) -> dict[OwnerKey, OwnerAggregate]:
    """Build owner aggregates in a single pass.

    Args:
        records: Full record set

    Returns:
        Mapping from (owner_role, owner_name) to its aggregate

    Example:
        >>> aggregates = aggregate_owners([a1, a2])  # same owner
        >>> aggregates[(Role.TEACHER, "A")].count
        2
    """
    aggregates: dict[OwnerKey, OwnerAggregate] = {}
    for achievement in records:
        key = achievement.owner_key
        current = aggregates.get(key) or OwnerAggregate(
            owner_role=achievement.owner_role, owner_name=achievement.owner_name
        )
        aggregates[key] = fold_record(current, achievement)
    return aggregates
