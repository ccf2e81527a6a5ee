"""Tag extraction for achievements.

Derives short lowercase tags from a record's text fields. Tags are computed
once at write time and stored with the record; ranking never recomputes them.

Scripts written without spaces (Thai) are not segmented: a run of Thai text
becomes a single token.
"""

import re
from collections import Counter
from typing import Final

from achievement_ranking.domain.models import Achievement, AchievementType
from achievement_ranking.domain.scoring_constants import (
    DEFAULT_MAX_TAGS,
    MIN_TAG_LENGTH,
    TAG_LENGTH_BONUS_CAP,
)

TAG_SEPARATOR_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"[()\"'“”‘’`,.;:!?/\\\[\]{}<>]|\s+"
)
"""Punctuation and whitespace replaced by a single space before splitting."""

STOP_WORDS: Final[frozenset[str]] = frozenset(
    {
        "และ",
        "หรือ",
        "กับ",
        "ของ",
        "ที่",
        "ให้",
        "ใน",
        "ได้",
        "เป็น",
        "โดย",
        "เพื่อ",
        "ปี",
        "การ",
        "งาน",
        "ระดับ",
        "ครั้ง",
        "ครั้งที่",
        "นี้",
        "ฯ",
    }
)


def tag_score(word: str, frequency: int) -> float:
    """Frequency weighted by a capped length bonus.

    Example:
        >>> tag_score("robotics", 2)
        3.2
    """
    return frequency * (1 + min(TAG_LENGTH_BONUS_CAP, len(word)) / 10)


def extract_tags(
    title: str,
    description: str | None = None,
    issuer: str | None = None,
    owner_name: str | None = None,
    category: AchievementType | str | None = None,
    max_count: int = DEFAULT_MAX_TAGS,
) -> list[str]:
    """Extract the top tags from a record's text fields.

    Args:
        title: Achievement title
        description: Optional description
        issuer: Optional issuer
        owner_name: Optional owner name
        category: Optional category label
        max_count: Maximum number of tags returned

    Returns:
        Tags ordered by descending score; ties keep first-seen order,
        numeric tokens such as "2567" included (they are not moved ahead)

    Example:
        >>> extract_tags("Robotics Contest", description="national robotics")
        ['robotics', 'contest', 'national']
    """
    if isinstance(category, AchievementType):
        category = category.value

    fields = (title, description, issuer, owner_name, category)
    parts = [value.lower() for value in fields if value]
    raw = TAG_SEPARATOR_PATTERN.sub(" ", " ".join(parts)).strip()

    frequencies: Counter[str] = Counter(
        token
        for token in raw.split(" ")
        if len(token) >= MIN_TAG_LENGTH and token not in STOP_WORDS
    )

    ranked = sorted(
        frequencies.items(),
        key=lambda item: tag_score(item[0], item[1]),
        reverse=True,
    )
    return [word for word, _ in ranked[:max_count]]


def derive_tags_for_achievement(
    achievement: Achievement, max_count: int = DEFAULT_MAX_TAGS
) -> list[str]:
    """Tags for an achievement, computed before it is persisted."""
    return extract_tags(
        achievement.title,
        description=achievement.description,
        issuer=achievement.issuer,
        owner_name=achievement.owner_name,
        category=achievement.type,
        max_count=max_count,
    )
