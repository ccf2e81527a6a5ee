"""Academic year value logic.

Thai academic years run May-April and are numbered in the Buddhist era.
"""

from datetime import date, datetime
from typing import Final

import pytz

ACADEMIC_YEAR_START_MONTH: Final[int] = 5
BUDDHIST_ERA_OFFSET: Final[int] = 543


def parse_local_date(value: str | None, tz_name: str = "UTC") -> date | None:
    """Parse an ISO date/datetime, converting aware values into tz_name.

    Returns None for missing or unparseable input.

    Example:
        >>> parse_local_date("2024-04-30T20:00:00Z", "Asia/Bangkok")
        datetime.date(2024, 5, 1)
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(pytz.timezone(tz_name))
    return parsed.date()


def academic_year_from_date(value: str | None, tz_name: str = "UTC") -> int | None:
    """Buddhist-era academic year for an ISO date.

    Example:
        >>> academic_year_from_date("2024-06-01")
        2567
        >>> academic_year_from_date("2024-03-01")
        2566
    """
    day = parse_local_date(value, tz_name)
    if day is None:
        return None
    year = day.year if day.month >= ACADEMIC_YEAR_START_MONTH else day.year - 1
    return year + BUDDHIST_ERA_OFFSET
