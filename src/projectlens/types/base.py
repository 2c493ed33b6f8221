"""Transport records exchanged with the repository adapter."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from projectlens.models.commit import Author, CommitRecord
from projectlens.models.version import Version


class RawCommit(BaseModel):
    """A commit as read from the repository, before it becomes a CommitRecord."""

    hash: str = Field(..., min_length=1, description="The full commit hash")
    author_name: str = Field(..., min_length=1, description="The author's name")
    author_email: Optional[str] = Field(default=None, description="The author's email address")
    timestamp: datetime = Field(..., description="Earliest of author and committer time, local and naive")
    message: str = Field(default="", description="The full commit message")
    files_changed: List[str] = Field(default_factory=list, description="Paths changed relative to the parent")

    def to_commit_record(self) -> CommitRecord:
        return (
            CommitRecord(Author(self.author_name, self.author_email), self.timestamp, self.hash)
            .with_message(self.message)
            .add(*self.files_changed)
        )


class ReleaseTag(BaseModel):
    """A repository tag whose name parses as a Version."""

    model_config = {"arbitrary_types_allowed": True}

    name: str = Field(..., description="The tag name, e.g. v1.2.0")
    version: Version = Field(..., description="The version parsed from the tag name")
    hash: str = Field(..., description="Hash of the tagged commit")
    date: datetime = Field(..., description="Timestamp of the tagged commit")
