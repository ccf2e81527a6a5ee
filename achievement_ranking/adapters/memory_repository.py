"""In-memory achievement repository.

Backs the CLI and tests. Records can be loaded from a JSON file holding
either a list of achievements or {"achievements": [...]}.
"""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from achievement_ranking.config.logging_config import get_logger
from achievement_ranking.domain.exceptions import RepositoryError, ValidationError
from achievement_ranking.domain.models import Achievement, SearchMetadata

__all__ = ["InMemoryAchievementRepository"]

logger = get_logger(__name__)


class InMemoryAchievementRepository:
    """Dictionary-backed store keyed by achievement id."""

    def __init__(self, achievements: Iterable[Achievement] = ()) -> None:
        """Initialize with records; records without an id get a positional one.

        Raises:
            RepositoryError: If two records share an explicit id
        """
        achievements = list(achievements)
        self._achievements: dict[str, Achievement] = {}
        self._search_metadata: dict[str, SearchMetadata] = {}
        # Explicit ids later in the input must not be taken by generated ones
        self._reserved_ids = {a.id for a in achievements if a.id is not None}
        for achievement in achievements:
            self.add(achievement)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryAchievementRepository":
        """Load records from a JSON file.

        Raises:
            RepositoryError: If the file cannot be read or parsed, or two
                records share an id
            ValidationError: If any record has an invalid shape
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise RepositoryError(f"Failed to load achievements: {e}") from e

        raw_records: Any = (
            payload.get("achievements") if isinstance(payload, dict) else payload
        )
        if not isinstance(raw_records, list):
            raise RepositoryError(f"{path} does not contain a list of achievements")

        achievements: list[Achievement] = []
        errors: list[str] = []
        for index, raw in enumerate(raw_records):
            try:
                achievements.append(Achievement.model_validate(raw))
            except PydanticValidationError as e:
                for error in e.errors():
                    location = ".".join(str(part) for part in error["loc"])
                    errors.append(f"record {index}: {location}: {error['msg']}")
        if errors:
            raise ValidationError(errors)

        logger.info("achievements_loaded", path=str(path), count=len(achievements))
        return cls(achievements)

    def add(self, achievement: Achievement) -> str:
        """Store a record and return its id.

        Records without an id get the first free "achievement-N" id.

        Raises:
            RepositoryError: If the record's id is already stored
        """
        if achievement.id is not None:
            if achievement.id in self._achievements:
                raise RepositoryError(f"Duplicate achievement id: {achievement.id}")
            self._achievements[achievement.id] = achievement
            return achievement.id

        sequence = len(self._achievements) + 1
        while self._is_taken(f"achievement-{sequence}"):
            sequence += 1
        achievement_id = f"achievement-{sequence}"
        self._achievements[achievement_id] = achievement.model_copy(
            update={"id": achievement_id}
        )
        return achievement_id

    def _is_taken(self, achievement_id: str) -> bool:
        return (
            achievement_id in self._achievements or achievement_id in self._reserved_ids
        )

    def list_all(self) -> list[Achievement]:
        return list(self._achievements.values())

    def get_by_id(self, achievement_id: str) -> Achievement | None:
        return self._achievements.get(achievement_id)

    def save_search_metadata(
        self, achievement_id: str, metadata: SearchMetadata
    ) -> None:
        if achievement_id not in self._achievements:
            raise RepositoryError(f"Unknown achievement: {achievement_id}")
        self._search_metadata[achievement_id] = metadata

    def get_search_metadata(self, achievement_id: str) -> SearchMetadata | None:
        return self._search_metadata.get(achievement_id)
