"""Search relevance scoring for achievements.

Scores one record against one free-text query. Components are additive:
- Title exact match or containment
- Description / issuer / owner name containment
- Multi-token phrase coverage in the title
- Word-boundary precision (title, owner)
- Short exact title bonus
- Per-token prefix boosts per field
- Freshness decay

The score has no upper bound; it is only a ranking signal.
"""

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from achievement_ranking.config.logging_config import get_logger
from achievement_ranking.domain.models import (
    DEFAULT_SEARCH_WEIGHTS,
    Achievement,
    SearchHit,
    SearchWeights,
)
from achievement_ranking.domain.protocols import SearchableRecord
from achievement_ranking.domain.scoring_constants import (
    ALL_TOKENS_IN_TITLE_SCORE,
    CONTIGUOUS_PHRASE_SCORE,
    DESCRIPTION_CONTAINS_SCORE,
    FRESHNESS_DECAY_DAYS,
    FRESHNESS_MAX_SCORE,
    OWNER_WORD_BOUNDARY_SCORE,
    SHORT_EXACT_TITLE_MAX_LENGTH,
    SHORT_EXACT_TITLE_SCORE,
    TITLE_CONTAINS_SCORE,
    TITLE_EXACT_SCORE,
    TITLE_WORD_BOUNDARY_SCORE,
)
from achievement_ranking.services.text_normalizer import (
    lower_or_empty,
    split_query_tokens,
    split_words,
)
from achievement_ranking.services.time_utils import age_in_days, current_epoch_ms

logger = get_logger(__name__)


def _field(record: SearchableRecord | Mapping[str, Any], name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _has_prefix(words: list[str], token: str) -> bool:
    return any(word.startswith(token) for word in words)


def freshness_score(created_at: int | None, now: int) -> float:
    """Exponential freshness boost, 30 for brand-new records.

    Example:
        >>> freshness_score(1_000, 1_000)
        30.0
        >>> freshness_score(None, 0)
        0.0
    """
    if not created_at:
        return 0.0
    return FRESHNESS_MAX_SCORE * math.exp(
        -age_in_days(now, created_at) / FRESHNESS_DECAY_DAYS
    )


def compute_search_score(
    record: SearchableRecord | Mapping[str, Any],
    term: str | None,
    now: int | None = None,
    weights: SearchWeights = DEFAULT_SEARCH_WEIGHTS,
) -> float:
    """Compute the relevance of a record for a search term.

    Args:
        record: Achievement, or any object/mapping exposing title,
            description, issuer, owner_name and created_at
        term: Free-text query; blank yields 0
        now: Current time in epoch ms (defaults to the wall clock)
        weights: Search weights

    Returns:
        Unbounded relevance score

    Example:
        >>> compute_search_score({"title": "Project A"}, "project a", now=0)
        153.0
    """
    t = (term or "").lower().strip()
    if not t:
        return 0.0
    if now is None:
        now = current_epoch_ms()

    tokens = split_query_tokens(t)
    title = lower_or_empty(_field(record, "title"))
    description = lower_or_empty(_field(record, "description"))
    issuer = lower_or_empty(_field(record, "issuer"))
    owner = lower_or_empty(_field(record, "owner_name"))

    score = 0.0

    if title == t:
        score += TITLE_EXACT_SCORE
    elif t in title:
        score += TITLE_CONTAINS_SCORE

    if t in description:
        score += DESCRIPTION_CONTAINS_SCORE
    if t in issuer:
        score += weights.issuer_weight
    if t in owner:
        score += weights.owner_name_weight

    if len(tokens) > 1 and all(token in title for token in tokens):
        score += ALL_TOKENS_IN_TITLE_SCORE
        if " ".join(tokens) in title:
            score += CONTIGUOUS_PHRASE_SCORE

    boundary = re.compile(rf"\b{re.escape(t)}\b", re.IGNORECASE)
    if boundary.search(title):
        score += TITLE_WORD_BOUNDARY_SCORE
    if boundary.search(owner):
        score += OWNER_WORD_BOUNDARY_SCORE

    if (
        len(tokens) == 1
        and title == t
        and len(title) <= SHORT_EXACT_TITLE_MAX_LENGTH
    ):
        score += SHORT_EXACT_TITLE_SCORE

    # Prefix boosts stack per token and per field
    title_words = split_words(title)
    issuer_words = split_words(issuer)
    owner_words = split_words(owner)
    description_words = split_words(description)
    for token in tokens:
        if _has_prefix(title_words, token):
            score += weights.partial_token_title_boost
        if _has_prefix(issuer_words, token):
            score += weights.issuer_weight * weights.partial_token_issuer_factor
        if _has_prefix(owner_words, token):
            score += weights.owner_name_weight * weights.partial_token_owner_factor
        if _has_prefix(description_words, token):
            score += weights.partial_token_description_boost

    score += freshness_score(_field(record, "created_at"), now)
    return score


def rank_search_results(
    records: Iterable[Achievement],
    term: str,
    now: int | None = None,
    weights: SearchWeights = DEFAULT_SEARCH_WEIGHTS,
) -> list[SearchHit]:
    """Score and order records for a search term.

    Args:
        records: Candidate achievements
        term: Free-text query
        now: Current time in epoch ms (defaults to the wall clock)
        weights: Search weights

    Returns:
        Hits sorted by score descending, newest first on ties
    """
    if now is None:
        now = current_epoch_ms()

    hits = [
        SearchHit(
            achievement=record,
            score=compute_search_score(record, term, now, weights),
        )
        for record in records
    ]
    hits.sort(key=lambda hit: (-(hit.score or 0.0), -hit.created_at))
    logger.debug("search_results_ranked", term=term, count=len(hits))
    return hits
