"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from achievement_ranking.adapters.memory_repository import (
    InMemoryAchievementRepository,
)
from achievement_ranking.config.logging_config import setup_logging
from achievement_ranking.config.settings import Settings
from achievement_ranking.domain.models import (
    Achievement,
    AchievementType,
    EvidenceFile,
    OrgLevel,
    Role,
)

# 2024-06-01T00:00:00Z
NOW_MS = 1_717_200_000_000
DAY_MS = 86_400_000


@pytest.fixture(autouse=True, scope="session")
def _configure_logging() -> None:
    """Route structlog through stdlib logging for the whole run."""
    setup_logging(log_level="WARNING")


@pytest.fixture
def now_ms() -> int:
    """Fixed reference instant for deterministic scoring."""
    return NOW_MS


@pytest.fixture
def make_achievement() -> Callable[..., Achievement]:
    """Factory for achievements with sensible defaults."""

    def _make(**overrides: Any) -> Achievement:
        data: dict[str, Any] = {
            "title": "Project A",
            "owner_role": Role.TEACHER,
            "owner_name": "Somchai",
            "type": AchievementType.CERTIFICATE,
            "created_at": NOW_MS,
        }
        data.update(overrides)
        return Achievement(**data)

    return _make


@pytest.fixture
def full_marks_achievement(make_achievement: Callable[..., Achievement]) -> Achievement:
    """Achievement earning the maximum of every base component."""
    return make_achievement(
        id="full",
        title="National Robotics Award",
        description="x" * 440,
        issuer="Ministry of Education",
        url="https://example.org/award",
        org_level=OrgLevel.NATIONAL,
        type=AchievementType.AWARD,
        evidence=[EvidenceFile(name="certificate.pdf")],
    )


@pytest.fixture
def sample_achievements(
    make_achievement: Callable[..., Achievement],
) -> list[Achievement]:
    """Mixed record set: two teachers and one student."""
    return [
        make_achievement(
            id="a1",
            title="Robotics Contest",
            description="Regional robotics competition",
            issuer="Office of Basic Education",
            owner_name="Somchai",
            type=AchievementType.COMPETITION,
            org_level=OrgLevel.REGION,
            date="2024-06-10",
            created_at=NOW_MS - 1 * DAY_MS,
            evidence=[EvidenceFile(name="photo.jpg")],
        ),
        make_achievement(
            id="a2",
            title="Teaching Excellence Award",
            description="Awarded for innovative science teaching",
            issuer="Ministry of Education",
            owner_name="Somchai",
            type=AchievementType.AWARD,
            org_level=OrgLevel.NATIONAL,
            date="2023-12-01",
            created_at=NOW_MS - 10 * DAY_MS,
        ),
        make_achievement(
            id="a3",
            title="First Aid Training",
            owner_name="Malee",
            type=AchievementType.TRAINING,
            training_hours=12,
            date="2024-02-15",
            created_at=NOW_MS - 40 * DAY_MS,
        ),
        make_achievement(
            id="a4",
            title="Robot Design",
            description="School robot club project",
            owner_role=Role.STUDENT,
            owner_name="Nattapong",
            type=AchievementType.CERTIFICATE,
            org_level=OrgLevel.SCHOOL,
            date="2024-07-01",
            created_at=NOW_MS - 3 * DAY_MS,
        ),
    ]


@pytest.fixture
def repository(
    sample_achievements: list[Achievement],
) -> InMemoryAchievementRepository:
    """Repository preloaded with the sample record set."""
    return InMemoryAchievementRepository(sample_achievements)


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings built from defaults only (no config/ directory in cwd)."""
    monkeypatch.chdir(tmp_path)
    return Settings()
