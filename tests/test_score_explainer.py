"""Tests for merit score explanations."""

import pytest

from achievement_ranking.domain.exceptions import (
    ConfigurationError,
    ScoreReconciliationError,
)
from achievement_ranking.domain.models import Achievement
from achievement_ranking.services.hall_of_fame import rank_hall_of_fame
from achievement_ranking.services.score_explainer import (
    explain_achievement_score,
    owner_bonus_label,
)

DAY_MS = 86_400_000


def test_explanation_labels_and_order(
    full_marks_achievement: Achievement, now_ms: int
) -> None:
    """Test seven base components followed by the owner bonus."""
    ranked = rank_hall_of_fame([full_marks_achievement], now=now_ms)

    explanation = explain_achievement_score(ranked[0])

    assert [c.label for c in explanation.components] == [
        "evidence",
        "description",
        "recency",
        "url",
        "issuer",
        "orgLevel",
        "type",
        "ownerBonus(x1)",
    ]


def test_explanation_reconciles_with_merit_score(
    sample_achievements: list[Achievement], now_ms: int
) -> None:
    """Test components add up to each result's merit score."""
    for result in rank_hall_of_fame(sample_achievements, now=now_ms):
        explanation = explain_achievement_score(result)

        assert explanation.total == pytest.approx(result.hof_score, abs=1e-4)
        assert explanation.component_sum == pytest.approx(result.hof_score, abs=1e-4)
        assert explanation.clamped is False


def test_explanation_values_are_not_rounded(
    full_marks_achievement: Achievement, now_ms: int
) -> None:
    """Test component values are the raw stored values."""
    result = rank_hall_of_fame([full_marks_achievement], now=now_ms)[0]

    explanation = explain_achievement_score(result)

    assert explanation.value_of("ownerBonus(x1)") == result.owner_bonus
    assert explanation.value_of("recency") == result.components.recency


def test_explanation_clamped_total(
    full_marks_achievement: Achievement, now_ms: int
) -> None:
    """Test a clamped score reports 100 and flags the clamp."""
    result = rank_hall_of_fame([full_marks_achievement], now=now_ms, owner_weight=5)[0]

    explanation = explain_achievement_score(result)

    assert explanation.total == 100.0
    assert explanation.clamped is True
    assert explanation.component_sum > 100.0


def test_explanation_with_other_owner_weight(
    full_marks_achievement: Achievement, now_ms: int
) -> None:
    """Test the label carries the requested multiplier."""
    result = rank_hall_of_fame([full_marks_achievement], now=now_ms)[0]

    explanation = explain_achievement_score(result, owner_weight=0.5)

    assert explanation.value_of("ownerBonus(x0.5)") == pytest.approx(
        result.owner_bonus_raw * 0.5
    )
    assert explanation.total == pytest.approx(
        result.base_score + result.owner_bonus / 2
    )


def test_explanation_recomputes_for_later_instant(
    full_marks_achievement: Achievement, now_ms: int
) -> None:
    """Test explaining at a later instant decays recency."""
    result = rank_hall_of_fame([full_marks_achievement], now=now_ms)[0]

    explanation = explain_achievement_score(result, now=now_ms + 28 * DAY_MS)

    recency = explanation.value_of("recency")
    assert recency is not None
    assert recency == pytest.approx(15 * 26 / 28)
    assert explanation.total < result.hof_score


def test_explanation_detects_mismatched_total(
    full_marks_achievement: Achievement, now_ms: int
) -> None:
    """Test a result whose components do not add up is rejected."""
    result = rank_hall_of_fame([full_marks_achievement], now=now_ms)[0]
    tampered = result.model_copy(update={"hof_score": result.hof_score - 5})

    with pytest.raises(ScoreReconciliationError):
        explain_achievement_score(tampered)


def test_explanation_rejects_negative_owner_weight(
    full_marks_achievement: Achievement, now_ms: int
) -> None:
    """Test invalid multipliers are rejected."""
    result = rank_hall_of_fame([full_marks_achievement], now=now_ms)[0]

    with pytest.raises(ConfigurationError):
        explain_achievement_score(result, owner_weight=-1)


def test_format_lines_rounds_for_display(
    full_marks_achievement: Achievement, now_ms: int
) -> None:
    """Test display lines are rounded while values are not."""
    result = rank_hall_of_fame([full_marks_achievement], now=now_ms)[0]

    lines = explain_achievement_score(result).format_lines()

    assert lines[0] == "evidence: 10.00"
    assert lines[-1] == f"total: {result.hof_score:.2f}"
    assert len(lines) == 9


@pytest.mark.parametrize(
    ("weight", "label"),
    [(1.0, "ownerBonus(x1)"), (1.5, "ownerBonus(x1.5)"), (0.0, "ownerBonus(x0)")],
)
def test_owner_bonus_label(weight: float, label: str) -> None:
    """Test the multiplier is rendered compactly in the label."""
    assert owner_bonus_label(weight) == label
