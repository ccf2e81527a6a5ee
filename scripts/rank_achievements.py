"""Command-line entry point for Hall of Fame ranking and achievement search.

Reads achievements from a JSON file and prints the leaderboard, a score
breakdown, a page of search results or derived tags.

Usage:
    python scripts/rank_achievements.py rank --input achievements.json --limit 10
    python scripts/rank_achievements.py explain --input achievements.json --id a1
    python scripts/rank_achievements.py search --input achievements.json -q robot
    python scripts/rank_achievements.py tags --input achievements.json
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from achievement_ranking.adapters.memory_repository import (
    InMemoryAchievementRepository,
)
from achievement_ranking.config.logging_config import (
    bind_context,
    get_logger,
    setup_logging,
)
from achievement_ranking.config.settings import Settings, get_settings
from achievement_ranking.domain.exceptions import AchievementRankingError
from achievement_ranking.domain.models import (
    AchievementType,
    OrgLevel,
    Role,
    SearchQuery,
)
from achievement_ranking.services.time_utils import epoch_ms_to_datetime
from achievement_ranking.use_cases.rank_hall_of_fame import (
    explain_for_repository,
    rank_hall_of_fame_for_repository,
)
from achievement_ranking.use_cases.refresh_search_metadata import (
    refresh_search_metadata,
)
from achievement_ranking.use_cases.search_achievements import (
    search_achievements_use_case,
)

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--input",
        required=True,
        help="JSON file with a list of achievements",
    )
    common.add_argument(
        "--now",
        type=int,
        default=None,
        help="Reference time in epoch milliseconds (default: current time)",
    )
    common.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs in JSON format",
    )

    parser = argparse.ArgumentParser(
        description="Rank and search achievements from a JSON file"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    rank = subparsers.add_parser(
        "rank", parents=[common], help="Print the Hall of Fame leaderboard"
    )
    rank.add_argument(
        "--owner-weight",
        type=float,
        default=None,
        help="Owner bonus multiplier (default: from settings)",
    )
    rank.add_argument("--limit", type=int, default=None, help="Rows to print")

    explain = subparsers.add_parser(
        "explain", parents=[common], help="Break down one merit score"
    )
    explain.add_argument("--id", required=True, help="Achievement id")
    explain.add_argument(
        "--owner-weight",
        type=float,
        default=None,
        help="Owner bonus multiplier (default: from settings)",
    )

    search = subparsers.add_parser(
        "search", parents=[common], help="Filter and search achievements"
    )
    search.add_argument("-q", "--query", default=None, help="Search term")
    search.add_argument("--role", choices=[r.value for r in Role], default=None)
    search.add_argument(
        "--type", choices=[t.value for t in AchievementType], default=None
    )
    search.add_argument(
        "--org-level", choices=[o.value for o in OrgLevel], default=None
    )
    search.add_argument(
        "--academic-year",
        type=int,
        default=None,
        help="Buddhist-era academic year (e.g. 2567)",
    )
    search.add_argument("--limit", type=int, default=None, help="Page size")
    search.add_argument("--after-created-at", type=int, default=None)
    search.add_argument("--after-full-text", default=None)

    subparsers.add_parser(
        "tags", parents=[common], help="Derive tags and search facets"
    )

    return parser.parse_args(argv)


def _format_date(timestamp: int, settings: Settings) -> str:
    return epoch_ms_to_datetime(timestamp, settings.tz_default).strftime("%Y-%m-%d")


def _run_rank(
    args: argparse.Namespace,
    repository: InMemoryAchievementRepository,
    settings: Settings,
) -> None:
    ranked = rank_hall_of_fame_for_repository(
        repository,
        settings,
        now=args.now,
        owner_weight=args.owner_weight,
        limit=args.limit,
    )
    for position, result in enumerate(ranked, start=1):
        achievement = result.achievement
        print(
            f"{position:>3}. {result.hof_score:6.2f}  {achievement.title}  "
            f"({achievement.owner_name}, "
            f"{_format_date(achievement.created_at, settings)})"
        )


def _run_explain(
    args: argparse.Namespace,
    repository: InMemoryAchievementRepository,
    settings: Settings,
) -> None:
    result, explanation = explain_for_repository(
        repository,
        settings,
        args.id,
        now=args.now,
        owner_weight=args.owner_weight,
    )
    print(f"{result.achievement.title} ({result.achievement.owner_name})")
    for line in explanation.format_lines():
        print(f"  {line}")
    if explanation.clamped:
        print("  (clamped at 100)")


def _run_search(
    args: argparse.Namespace,
    repository: InMemoryAchievementRepository,
    settings: Settings,
) -> None:
    query = SearchQuery(
        search_term=args.query,
        owner_role=args.role,
        type=args.type,
        org_level=args.org_level,
        academic_year=args.academic_year,
        after_created_at=args.after_created_at,
        after_full_text=args.after_full_text,
        limit=args.limit or settings.search_page_limit,
    )
    page = search_achievements_use_case(repository, settings, query, now=args.now)
    for hit in page.hits:
        score = f"{hit.score:8.2f}" if hit.score is not None else "       -"
        print(
            f"{score}  {hit.achievement.title}  "
            f"({hit.achievement.owner_name}, "
            f"{_format_date(hit.created_at, settings)})"
        )
    if page.next_after_created_at is not None:
        print(f"next: --after-created-at {page.next_after_created_at}")
    elif page.next_after_full_text is not None:
        print(f"next: --after-full-text '{page.next_after_full_text}'")


def _run_tags(
    args: argparse.Namespace,
    repository: InMemoryAchievementRepository,
    settings: Settings,
) -> None:
    refresh_search_metadata(repository, settings)
    for achievement in repository.list_all():
        if achievement.id is None:
            continue
        metadata = repository.get_search_metadata(achievement.id)
        if metadata is None:
            continue
        year = metadata.facets.academic_year or "-"
        print(f"{achievement.id}  [{year}]  {', '.join(metadata.tags)}")


COMMANDS = {
    "rank": _run_rank,
    "explain": _run_explain,
    "search": _run_search,
    "tags": _run_tags,
}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    settings = get_settings()
    setup_logging(
        log_level=settings.log_level,
        json_logs=args.json_logs or settings.json_logs,
    )
    bind_context(command=args.command)

    try:
        repository = InMemoryAchievementRepository.from_json_file(args.input)
        COMMANDS[args.command](args, repository, settings)
    except AchievementRankingError as exc:
        logger.error("command_failed", command=args.command, error=str(exc))
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
