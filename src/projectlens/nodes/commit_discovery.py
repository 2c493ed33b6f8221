"""
Commit and release tag discovery for a Git repository.

This is the only module that talks to Git. Everything downstream works on the
CommitHistory and ReleaseTag values it produces.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from git import NULL_TREE, Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git.objects.commit import Commit
from loguru import logger

from projectlens.errors import RepositoryError
from projectlens.models.history import CommitHistory
from projectlens.models.version import Version
from projectlens.types.base import RawCommit, ReleaseTag
from projectlens.types.state import ReportState


def open_repository(repo_path: str) -> Repo:
    """Open the Git repository at ``repo_path``."""
    try:
        return Repo(repo_path)
    except (InvalidGitRepositoryError, NoSuchPathError) as cause:
        raise RepositoryError(f"[{repo_path}] is not a Git repository") from cause


def _resolve_timestamp(commit: Commit) -> datetime:
    """Earliest of the author and committer time, as a naive local datetime."""
    return datetime.fromtimestamp(min(commit.authored_date, commit.committed_date))


def _changed_files(commit: Commit) -> List[str]:
    """Paths changed by ``commit`` relative to its first parent."""
    parent = commit.parents[0] if commit.parents else NULL_TREE
    files_changed = []

    for diff in commit.diff(parent):
        path = diff.a_path or diff.b_path
        if path and path not in files_changed:
            files_changed.append(path)

    return files_changed


def _create_raw_commit(commit: Commit) -> RawCommit:
    """Create a RawCommit from a GitPython Commit object."""
    author = commit.author
    return RawCommit(
        hash=commit.hexsha,
        author_name=author.name or author.email or "unknown",
        author_email=author.email or None,
        timestamp=_resolve_timestamp(commit),
        message=commit.message.strip(),
        files_changed=_changed_files(commit),
    )


def load_raw_commits(repo: Repo, rev: Optional[str] = None) -> List[RawCommit]:
    """Read every commit reachable from ``rev``, or from all refs when ``rev`` is not given."""
    if not repo.head.is_valid() and rev is None:
        logger.debug("Repository has no commits yet")
        return []

    try:
        commits = repo.iter_commits(rev) if rev else repo.iter_commits(all=True)
        return [_create_raw_commit(commit) for commit in commits]
    except GitCommandError as cause:
        raise RepositoryError(f"Failed to load commit history for [{rev or 'all refs'}]") from cause


def to_commit_history(raw_commits: Iterable[RawCommit]) -> CommitHistory:
    """Turn raw commits into a CommitHistory, keeping the first of any duplicate hashes."""
    seen = set()
    commit_records = []

    for raw_commit in raw_commits:
        if raw_commit.hash in seen:
            continue
        seen.add(raw_commit.hash)
        commit_records.append(raw_commit.to_commit_record())

    return CommitHistory(commit_records)


def _parse_tag_version(name: str) -> Optional[Version]:
    candidate = name[1:] if name[:1] in ("v", "V") else name
    try:
        return Version.parse(candidate)
    except ValueError:
        return None


def load_release_tags(repo: Repo) -> List[ReleaseTag]:
    """Get all tags that name a version, newest version first."""
    release_tags = []

    for tag in repo.tags:
        version = _parse_tag_version(tag.name)
        if version is None:
            logger.debug(f"Skipping tag {tag.name}: not a version")
            continue
        try:
            commit = tag.commit
        except ValueError:
            logger.debug(f"Skipping tag {tag.name}: does not point to a commit")
            continue

        release_tags.append(
            ReleaseTag(name=tag.name, version=version, hash=commit.hexsha, date=_resolve_timestamp(commit))
        )

    return sorted(release_tags, key=lambda release_tag: release_tag.version)


def commit_discovery_node(state: ReportState) -> ReportState:
    """Load the commit history and release tags of ``state["repo_path"]`` into the state."""
    if "repo_path" not in state:
        raise ValueError("repo_path is required in ReportState")

    logger.info("Executing Commit Discovery Node")

    repo = open_repository(state["repo_path"])
    commit_history = to_commit_history(load_raw_commits(repo, state.get("rev")))
    release_tags = load_release_tags(repo)

    logger.info(f"Discovered {commit_history.size()} commits and {len(release_tags)} release tags")

    return {
        **state,
        "commit_history": commit_history,
        "commit_count": commit_history.size(),
        "release_tags": release_tags,
        "last_release": release_tags[0].name if release_tags else None,
    }
