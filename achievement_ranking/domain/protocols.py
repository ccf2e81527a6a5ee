"""Protocol definitions for dependency inversion.

The ranking engine never talks to storage. Use cases fetch record sets
through these contracts and hand plain models to the engine.
"""

from typing import Protocol

from achievement_ranking.domain.models import Achievement, SearchMetadata


class SearchableRecord(Protocol):
    """Minimal shape the search scorer reads.

    Achievement satisfies it; lightweight projections may too.
    """

    title: str
    description: str | None
    issuer: str | None
    owner_name: str
    created_at: int | None


class AchievementRepositoryProtocol(Protocol):
    """Record store supplying achievements and accepting derived metadata."""

    def list_all(self) -> list[Achievement]:
        """Return the full record set.

        Raises:
            RepositoryError: On storage errors
        """
        ...

    def get_by_id(self, achievement_id: str) -> Achievement | None:
        """Return one achievement or None when it does not exist."""
        ...

    def save_search_metadata(
        self, achievement_id: str, metadata: SearchMetadata
    ) -> None:
        """Persist derived tags, normalized title and facets for one record.

        Raises:
            RepositoryError: On storage errors
        """
        ...
