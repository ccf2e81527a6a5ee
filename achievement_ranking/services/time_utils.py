"""Epoch-millisecond helpers shared by the scorers."""

from datetime import datetime

import pytz

from achievement_ranking.domain.scoring_constants import MS_PER_DAY


def current_epoch_ms() -> int:
    """Current UTC time in epoch milliseconds."""
    return int(datetime.now(pytz.UTC).timestamp() * 1000)


def age_in_days(now: int, timestamp: int) -> float:
    """Days elapsed from timestamp to now, clamped at 0 for clock skew.

    Example:
        >>> age_in_days(86_400_000 * 3, 0)
        3.0
        >>> age_in_days(0, 1_000)
        0.0
    """
    return max(0.0, (now - timestamp) / MS_PER_DAY)


def epoch_ms_to_datetime(timestamp: int, tz_name: str = "UTC") -> datetime:
    """Convert epoch milliseconds to an aware datetime in the given zone."""
    return datetime.fromtimestamp(timestamp / 1000, tz=pytz.timezone(tz_name))
