"""Scoring constants for search relevance and Hall of Fame ranking.

Search weights that callers may tune live in SearchWeights; the values here
are fixed business rules and the documented defaults.
"""

from typing import Final

MS_PER_DAY: Final[int] = 86_400_000

# === Search relevance ===

TITLE_EXACT_SCORE: Final[float] = 80.0
"""Query equals the whole (lowercased) title."""

TITLE_CONTAINS_SCORE: Final[float] = 50.0
"""Query is a substring of the title. Not added on an exact match."""

DESCRIPTION_CONTAINS_SCORE: Final[float] = 10.0

ALL_TOKENS_IN_TITLE_SCORE: Final[float] = 15.0
"""Multi-token query whose every token appears somewhere in the title."""

CONTIGUOUS_PHRASE_SCORE: Final[float] = 10.0
"""Extra bonus when the rejoined tokens appear verbatim in the title."""

TITLE_WORD_BOUNDARY_SCORE: Final[float] = 8.0
OWNER_WORD_BOUNDARY_SCORE: Final[float] = 5.0

SHORT_EXACT_TITLE_SCORE: Final[float] = 5.0
SHORT_EXACT_TITLE_MAX_LENGTH: Final[int] = 15

FRESHNESS_MAX_SCORE: Final[float] = 30.0
FRESHNESS_DECAY_DAYS: Final[float] = 14.0
"""Freshness = 30 * exp(-age_days / 14)."""

DEFAULT_ISSUER_WEIGHT: Final[float] = 18.0
DEFAULT_OWNER_NAME_WEIGHT: Final[float] = 22.0
DEFAULT_PARTIAL_TOKEN_TITLE_BOOST: Final[float] = 20.0
DEFAULT_PARTIAL_TOKEN_ISSUER_FACTOR: Final[float] = 0.6
DEFAULT_PARTIAL_TOKEN_OWNER_FACTOR: Final[float] = 0.7
DEFAULT_PARTIAL_TOKEN_DESCRIPTION_BOOST: Final[float] = 4.0

# === Hall of Fame components (maximums sum to 90, owner bonus adds 10) ===

EVIDENCE_MAX_SCORE: Final[float] = 10.0
DESCRIPTION_MAX_SCORE: Final[float] = 25.0
RECENCY_MAX_SCORE: Final[float] = 15.0
URL_SCORE: Final[float] = 5.0
ISSUER_SCORE: Final[float] = 10.0
ORG_LEVEL_MAX_SCORE: Final[float] = 15.0
TYPE_MAX_SCORE: Final[float] = 10.0
OWNER_BONUS_MAX_SCORE: Final[float] = 10.0
MERIT_SCORE_CEILING: Final[float] = 100.0

ISSUER_MIN_LENGTH: Final[int] = 5
"""Issuer text must be strictly longer than this to earn the issuer component."""

MAX_DESCRIPTION_LEN_FOR_FULL: Final[int] = 440
"""Effective description length (with supplemental fields) that earns full weight."""

TRAINING_HOURS_MAX_CHARS: Final[float] = 20.0
TRAINING_HOURS_LOG_SCALE: Final[float] = 8.0
"""Training hours add min(20, ln(hours + 1) * 8) characters of effective length."""

RECENCY_HORIZON_FORTNIGHTS: Final[float] = 28.0
"""Recency reaches zero after 28 fortnights (about 392 days)."""

POINT_SCALE: Final[float] = 20.0
"""Raw org-level and type points are expressed on a 0-20 scale."""

# Owner bonus: raw = (count - 1) * 20 + ln(evidence + 1) * 5 + max(0, 15 - days / 30)
OWNER_EXTRA_RECORD_POINTS: Final[float] = 20.0
OWNER_EVIDENCE_LOG_SCALE: Final[float] = 5.0
OWNER_RECENCY_MAX_POINTS: Final[float] = 15.0
OWNER_RECENCY_DECAY_DAYS: Final[float] = 30.0
OWNER_RAW_FOR_FULL_BONUS: Final[float] = 50.0

DEFAULT_OWNER_WEIGHT: Final[float] = 1.0

RECONCILIATION_TOLERANCE: Final[float] = 1e-4

# === Tags ===

DEFAULT_MAX_TAGS: Final[int] = 12
MIN_TAG_LENGTH: Final[int] = 2
TAG_LENGTH_BONUS_CAP: Final[int] = 6
