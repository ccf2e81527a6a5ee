"""Search achievements use case.

Filters a record set by facets, pages it and, when a search term is given,
orders the page by relevance.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from achievement_ranking.config.logging_config import get_logger
from achievement_ranking.config.settings import Settings
from achievement_ranking.domain.models import (
    DEFAULT_SEARCH_WEIGHTS,
    Achievement,
    SearchHit,
    SearchPage,
    SearchQuery,
    SearchWeights,
)
from achievement_ranking.domain.protocols import AchievementRepositoryProtocol
from achievement_ranking.domain.specifications import specification_for
from achievement_ranking.services.search_scorer import rank_search_results
from achievement_ranking.services.time_utils import current_epoch_ms

logger = get_logger(__name__)


def _list_page(candidates: list[Achievement], query: SearchQuery) -> SearchPage:
    ordered = sorted(candidates, key=lambda a: a.created_at, reverse=True)
    if query.after_created_at is not None:
        ordered = [a for a in ordered if a.created_at < query.after_created_at]
    page = ordered[: query.limit]
    return SearchPage(
        hits=[SearchHit(achievement=a) for a in page],
        next_after_created_at=(
            page[-1].created_at if len(page) == query.limit else None
        ),
    )


def _search_page(
    candidates: list[Achievement],
    query: SearchQuery,
    term: str,
    now: int,
    weights: SearchWeights,
) -> SearchPage:
    # Pages follow full-text order; relevance only orders within a page
    ordered = sorted(candidates, key=lambda a: a.full_text)
    if query.after_full_text is not None:
        ordered = [a for a in ordered if a.full_text > query.after_full_text]
    page = ordered[: query.limit]
    return SearchPage(
        hits=rank_search_results(page, term, now, weights),
        next_after_full_text=(
            max(a.full_text for a in page) if len(page) == query.limit else None
        ),
    )


def search_achievements(
    records: Iterable[Achievement],
    query: SearchQuery,
    now: int | None = None,
    weights: SearchWeights = DEFAULT_SEARCH_WEIGHTS,
    tz_name: str = "UTC",
) -> SearchPage:
    """Return one page of matching achievements.

    Without a search term, records are listed newest first and paged by
    created_at. With a term, records whose full text contains it are paged
    in full-text order and each page is sorted by relevance score, then
    newest first.

    Args:
        records: Record set to search
        query: Filters, term and pagination cursor
        now: Current time in epoch ms (defaults to the wall clock)
        weights: Search weights
        tz_name: Timezone for the academic-year facet

    Returns:
        SearchPage with hits and the cursor for the next page (None at the end)
    """
    spec = specification_for(query, tz_name)
    candidates = [a for a in records if spec.is_satisfied_by(a)]

    if query.search_term is None:
        return _list_page(candidates, query)

    if now is None:
        now = current_epoch_ms()
    return _search_page(candidates, query, query.search_term, now, weights)


def next_page_query(query: SearchQuery, page: SearchPage) -> SearchQuery | None:
    """Query for the page after `page`, or None when there is none.

    Example:
        >>> following = next_page_query(query, page)
        >>> following is None or following.limit == query.limit
        True
    """
    if query.uses_created_at_cursor:
        if page.next_after_created_at is None:
            return None
        return query.model_copy(update={"after_created_at": page.next_after_created_at})
    if page.next_after_full_text is None:
        return None
    return query.model_copy(update={"after_full_text": page.next_after_full_text})


def search_achievements_use_case(
    repository: AchievementRepositoryProtocol,
    settings: Settings,
    query: SearchQuery,
    now: int | None = None,
    weight_overrides: Mapping[str, Any] | None = None,
) -> SearchPage:
    """Search the repository's records with configured weights.

    Args:
        repository: Record store
        settings: Application settings (weights, timezone)
        query: Filters, term and pagination cursor
        now: Current time in epoch ms (defaults to the wall clock)
        weight_overrides: Per-request weight overrides merged over settings

    Returns:
        One page of results

    Raises:
        ConfigurationError: If weight_overrides names unknown weights
        RepositoryError: If the record set cannot be fetched
    """
    weights = settings.search_weights.with_overrides(weight_overrides)
    records = repository.list_all()
    page = search_achievements(
        records, query, now=now, weights=weights, tz_name=settings.tz_default
    )
    logger.info(
        "achievements_searched",
        term=query.search_term,
        candidates=len(records),
        returned=len(page.hits),
        has_next=page.next_after_created_at is not None
        or page.next_after_full_text is not None,
    )
    return page
