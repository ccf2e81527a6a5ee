from __future__ import annotations

import json
from pathlib import Path

import pytest

from achievement_ranking.config.settings import Settings

DAY_MS = 86_400_000
NOW_MS = 1_717_200_000_000

RECORDS = [
    {
        "id": "a1",
        "title": "Robotics Contest",
        "description": "Regional robotics competition",
        "issuer": "Office of Basic Education",
        "owner_role": "teacher",
        "owner_name": "Somchai",
        "type": "competition",
        "org_level": "region",
        "date": "2024-06-10",
        "created_at": NOW_MS - DAY_MS,
    },
    {
        "id": "a2",
        "title": "First Aid Training",
        "owner_role": "student",
        "owner_name": "Malee",
        "type": "training",
        "created_at": NOW_MS - 30 * DAY_MS,
    },
]


def _module():
    return __import__("scripts.rank_achievements", fromlist=["main"])


@pytest.fixture
def input_file(tmp_path: Path) -> str:
    path = tmp_path / "achievements.json"
    path.write_text(json.dumps(RECORDS), encoding="utf-8")
    return str(path)


@pytest.fixture
def cli(mocker, settings: Settings):
    module = _module()
    mocker.patch.object(module, "get_settings", return_value=settings)
    mocker.patch.object(module, "setup_logging")
    mocker.patch.object(module, "bind_context")
    return module


def test_rank_prints_leaderboard(cli, input_file: str, capsys) -> None:
    exit_code = cli.main(["rank", "--input", input_file, "--now", str(NOW_MS)])

    lines = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    assert len(lines) == 2
    assert lines[0].startswith("  1.")
    assert "Robotics Contest" in lines[0]
    assert "2024-05-31" in lines[0]


def test_rank_limit(cli, input_file: str, capsys) -> None:
    exit_code = cli.main(
        ["rank", "--input", input_file, "--now", str(NOW_MS), "--limit", "1"]
    )

    assert exit_code == 0
    assert len(capsys.readouterr().out.splitlines()) == 1


def test_explain_prints_breakdown(cli, input_file: str, capsys) -> None:
    exit_code = cli.main(
        ["explain", "--input", input_file, "--id", "a1", "--now", str(NOW_MS)]
    )

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "evidence: 0.00" in out
    assert "ownerBonus(x1):" in out
    assert "total:" in out


def test_explain_unknown_id_fails(cli, input_file: str) -> None:
    exit_code = cli.main(["explain", "--input", input_file, "--id", "missing"])

    assert exit_code == 1


def test_search_prints_scored_hits(cli, input_file: str, capsys) -> None:
    exit_code = cli.main(
        ["search", "--input", input_file, "-q", "robot", "--now", str(NOW_MS)]
    )

    lines = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    assert len(lines) == 1
    assert "Robotics Contest" in lines[0]


def test_search_listing_prints_cursor(cli, input_file: str, capsys) -> None:
    exit_code = cli.main(["search", "--input", input_file, "--limit", "1"])

    lines = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    assert "Robotics Contest" in lines[0]
    assert lines[-1] == f"next: --after-created-at {NOW_MS - DAY_MS}"


def test_tags_prints_derived_tags(cli, input_file: str, capsys) -> None:
    exit_code = cli.main(["tags", "--input", input_file])

    lines = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    assert lines[0].startswith("a1  [2567]  robotics")
    assert lines[1].startswith("a2  [-]")


def test_missing_input_file_fails(cli, tmp_path: Path) -> None:
    exit_code = cli.main(["rank", "--input", str(tmp_path / "missing.json")])

    assert exit_code == 1
