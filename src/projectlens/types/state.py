"""State passed between projectlens nodes."""

from typing import List, Optional, TypedDict

from projectlens.models.history import CommitHistory
from projectlens.types.base import ReleaseTag


class ReportState(TypedDict, total=False):
    """State container for the report pipeline.

    total=False means all fields are optional; each node adds the fields it produces.
    """

    # Discovery configuration
    repo_path: str  # Path to the Git repository
    rev: Optional[str]  # Revision to walk; all refs when not set

    # Discovery output
    commit_history: CommitHistory  # All discovered commits, most recent first
    commit_count: int  # Number of discovered commits
    release_tags: List[ReleaseTag]  # Tags that parse as versions, newest first
    last_release: Optional[str]  # Name of the newest release tag
