"""projectlens command line interface."""

import argparse
import os
import sys
from typing import Callable, Dict, List, Optional

from loguru import logger

from projectlens.config import Settings, load_settings
from projectlens.errors import RepositoryError
from projectlens.models.history import CommitHistory
from projectlens.models.version import Version
from projectlens.nodes import queries
from projectlens.nodes.commit_discovery import commit_discovery_node
from projectlens.nodes.reports import (
    PERIODS,
    count_commits_by_period,
    estimate_development_cost,
    release_dates,
    render_commit,
    render_history,
    render_period_counts,
    source_files_with_message,
)
from projectlens.types.state import ReportState


def _add_filter_options(parser: argparse.ArgumentParser, author: bool = True) -> None:
    if author:
        parser.add_argument("--author", help="Author name or email (substring, case-insensitive)")
    parser.add_argument("--since", "-s", help="Only commits on or after YYYY-MM-DD")
    parser.add_argument("--until", "-u", help="Only commits on or before YYYY-MM-DD")
    parser.add_argument("--during", "-d", help="Only commits during dates, e.g. 2024-01-02,2024-03-01--2024-03-31")
    parser.add_argument("--exclude-dates", "-e", help="Skip commits during these dates")


def _add_output_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--count", "-c", action="store_true", help="Print the number of matching commits")
    parser.add_argument("--limit", "-l", type=int, help="Maximum number of commits to show")
    parser.add_argument("--show-files", "-f", action="store_true", help="List the files each commit touched")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="projectlens", description="Report on a project's releases and commits")
    parser.add_argument("--repo-path", type=str, help="Path to the Git repository")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    commit_count = subparsers.add_parser("commit-count", help="Count commits")
    _add_filter_options(commit_count)

    grouped = subparsers.add_parser("commit-count-group", help="Count commits per day, month or year")
    grouped.add_argument("--by", choices=PERIODS, default="day")
    grouped.add_argument("--limit", "-l", type=int, default=12)
    grouped.add_argument("--author")
    grouped.add_argument("--since", "-s")
    grouped.add_argument("--until", "-u")

    commit_log = subparsers.add_parser("commit-log", help="Show commits")
    commit_log.add_argument("--hash", help="Show the commit with this hash; other options do not apply")
    commit_log.add_argument(
        "--after-hash", "-a", help="Commits from the newest down to this hash [--until, --exclude-dates]"
    )
    commit_log.add_argument(
        "--before-hash", "-b", help="Commits from this hash down to the oldest [--since, --exclude-dates]"
    )
    _add_filter_options(commit_log)
    _add_output_options(commit_log)

    for name, help_text in (
        ("commits-after-hours", "Commits made on weekends or outside work hours"),
        ("commits-during-work", "Commits made during work hours"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        _add_filter_options(command)
        _add_output_options(command)

    commits_by = subparsers.add_parser("commits-by", help="Commits by an author")
    commits_by.add_argument("committer")
    _add_filter_options(commits_by, author=False)
    _add_output_options(commits_by)

    commits_to = subparsers.add_parser("commits-to", help="Commits touching a source file or path")
    commits_to.add_argument("source_path")
    _add_filter_options(commits_to)
    _add_output_options(commits_to)

    commits_with = subparsers.add_parser("commits-with", help="Commits whose message contains text ('|' for OR)")
    commits_with.add_argument("message")
    _add_filter_options(commits_with)
    _add_output_options(commits_with)

    for name, help_text in (
        ("first-commit", "The oldest matching commit"),
        ("last-commit", "The newest matching commit"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("--author")
        command.add_argument("--source", help="Only commits touching this path")
        command.add_argument("--since", "-s")
        command.add_argument("--until", "-u")
        command.add_argument("--exclude-dates", "-e")
        command.add_argument("--show-files", "-f", action="store_true")

    source_files = subparsers.add_parser("source-files", help="Files touched by commits with a message")
    source_files.add_argument("message")
    source_files.add_argument("--include-filter")
    source_files.add_argument("--exclude-filter")
    source_files.add_argument("--since", "-s")
    source_files.add_argument("--until", "-u")
    source_files.add_argument("--strict", action="store_true")

    releases = subparsers.add_parser("release-dates", help="Release tags and their dates")
    releases.add_argument("--all", action="store_true", help="Include milestones, release candidates and snapshots")

    dev_cost = subparsers.add_parser("dev-cost", help="Estimate development time and cost")
    dev_cost.add_argument("--hourly-rate", type=float)
    dev_cost.add_argument("--hours-per-day", type=float)
    _add_filter_options(dev_cost)

    versions = subparsers.add_parser("versions", help="Parse, classify and sort version strings")
    versions.add_argument("version", nargs="+")

    return parser


def _classify(version: Version) -> str:
    if version.is_snapshot():
        return "snapshot"
    if version.is_milestone():
        return "milestone"
    if version.is_release_candidate():
        return "release candidate"
    return "release"


def _filter_predicate(args: argparse.Namespace) -> queries.CommitPredicate:
    return queries.all_of(
        queries.by_time(
            getattr(args, "since", None),
            getattr(args, "until", None),
            getattr(args, "exclude_dates", None),
            getattr(args, "during", None),
        ),
        queries.by_author(getattr(args, "author", None)),
    )


def _show(history: CommitHistory, args: argparse.Namespace, settings: Settings) -> str:
    if args.count:
        return str(history.size())
    limit = args.limit if args.limit is not None else settings.limit
    return render_history(history, limit, args.show_files)


def _commit_log(history: CommitHistory, args: argparse.Namespace, settings: Settings) -> str:
    if args.hash:
        commit_record = history.find_by_hash(args.hash)
        if commit_record is None:
            return f"Commit for hash [{args.hash}] not found"
        return render_commit(commit_record, args.show_files)

    if not (args.after_hash or args.before_hash):
        return _show(history.find_by(_filter_predicate(args)), args, settings)

    # only the date bound opposite the hash applies
    predicate = queries.all_of(queries.by_author(args.author), queries.excluding(args.exclude_dates))

    if args.after_hash:
        history = history.find_all_commits_after_hash(args.after_hash)
        if not args.before_hash:
            predicate = queries.all_of(predicate, queries.until(args.until))
    else:
        history = history.find_all_commits_before_hash(args.before_hash)
        predicate = queries.all_of(predicate, queries.since(args.since))

    return _show(history.find_by(predicate), args, settings)


def _work_hours(predicate_factory: Callable) -> Callable:
    def handler(history: CommitHistory, args: argparse.Namespace, settings: Settings) -> str:
        predicate = predicate_factory(settings.work_day_start, settings.work_day_end)
        return _show(history.find_by(queries.all_of(_filter_predicate(args), predicate)), args, settings)

    return handler


def _first_or_last(newest: bool) -> Callable:
    def handler(history: CommitHistory, args: argparse.Namespace, settings: Settings) -> str:
        predicate = queries.all_of(
            queries.by_time(args.since, args.until, args.exclude_dates),
            queries.by_author(args.author),
            queries.to_source_file(args.source),
        )
        commits = history.find_by(predicate)
        commit_record = commits.last_commit() if newest else commits.first_commit()
        return render_commit(commit_record, args.show_files) if commit_record else "No matching commit found"

    return handler


def _release_dates(state: ReportState, args: argparse.Namespace) -> str:
    rows = release_dates(state.get("release_tags", []), include_pre_releases=args.all)
    return "\n".join(f"{version:<20}{day.isoformat()}" for version, day in rows)


def _source_files(history: CommitHistory, args: argparse.Namespace, settings: Settings) -> str:
    source_files = source_files_with_message(
        history, args.message, args.include_filter, args.exclude_filter, args.since, args.until, args.strict
    )
    return "\n".join(source_file.path for source_file in source_files)


def _dev_cost(history: CommitHistory, args: argparse.Namespace, settings: Settings) -> str:
    hourly_rate = args.hourly_rate if args.hourly_rate is not None else settings.hourly_rate
    hours_per_day = args.hours_per_day if args.hours_per_day is not None else settings.hours_per_day
    estimate = estimate_development_cost(history.find_by(_filter_predicate(args)), hourly_rate, hours_per_day)
    return "\n".join(f"{key}: {value}" for key, value in estimate.to_dict().items())


HISTORY_COMMANDS: Dict[str, Callable[[CommitHistory, argparse.Namespace, Settings], str]] = {
    "commit-count": lambda history, args, settings: str(history.find_by(_filter_predicate(args)).size()),
    "commit-count-group": lambda history, args, settings: render_period_counts(
        count_commits_by_period(history.find_by(_filter_predicate(args)), args.by, args.limit)
    ),
    "commit-log": _commit_log,
    "commits-after-hours": _work_hours(queries.after_hours),
    "commits-during-work": _work_hours(queries.during_work_hours),
    "commits-by": lambda history, args, settings: _show(
        history.find_by(queries.all_of(_filter_predicate(args), queries.by_author(args.committer))), args, settings
    ),
    "commits-to": lambda history, args, settings: _show(
        history.find_by(queries.all_of(_filter_predicate(args), queries.to_source_file(args.source_path))),
        args,
        settings,
    ),
    "commits-with": lambda history, args, settings: _show(
        history.find_by(queries.all_of(_filter_predicate(args), queries.with_message(args.message))), args, settings
    ),
    "first-commit": _first_or_last(newest=False),
    "last-commit": _first_or_last(newest=True),
    "source-files": _source_files,
    "dev-cost": _dev_cost,
}


def run(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> str:
    """Execute a command and return its output."""
    args = build_parser().parse_args(argv)
    settings = settings or load_settings()

    if args.command == "versions":
        versions = sorted(Version.parse(text) for text in args.version)
        return "\n".join(f"{str(version):<20}{_classify(version)}" for version in versions)

    state: ReportState = commit_discovery_node({"repo_path": os.path.abspath(args.repo_path or settings.repo_path)})

    if args.command == "release-dates":
        return _release_dates(state, args)

    return HISTORY_COMMANDS[args.command](state["commit_history"], args, settings)


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def main(argv: Optional[List[str]] = None) -> int:
    arguments = sys.argv[1:] if argv is None else argv

    try:
        settings = load_settings()
    except ValueError as e:
        logger.error(str(e))
        return 2

    configure_logging("DEBUG" if "--verbose" in arguments else settings.log_level)

    try:
        print(run(arguments, settings))
    except RepositoryError as e:
        logger.error(f"{e}: {e.__cause__}")
        return 1
    except ValueError as e:
        logger.error(str(e))
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
