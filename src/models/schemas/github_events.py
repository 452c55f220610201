"""
GitHub Push Event Models

Pydantic schemas for the subset of the GitHub ``push`` webhook payload and
the commit details API that the sync workflow consumes.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GitUser(BaseModel):
    """Author or committer identity embedded in a push commit."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None


class Commit(BaseModel):
    """A commit listed in a push event.

    The added/removed/modified lists are advisory only; the workflow
    re-fetches the full file list for every commit.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., description="Commit SHA")
    message: str = ""
    timestamp: Optional[str] = None
    url: Optional[str] = None
    author: Optional[GitUser] = None
    committer: Optional[GitUser] = None
    added: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)
    modified: List[str] = Field(default_factory=list)


class RepositoryOwner(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    login: Optional[str] = None


class PushRepository(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    full_name: Optional[str] = None
    owner: RepositoryOwner

    @property
    def owner_name(self) -> str:
        """Owner account name; push payloads carry ``name``, other events ``login``."""
        return self.owner.name or self.owner.login or ""


class PushEvent(BaseModel):
    """GitHub ``push`` webhook payload."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    ref: str
    commits: List[Commit] = Field(default_factory=list)
    repository: PushRepository


class ChangedFile(BaseModel):
    """A file entry from ``GET /repos/{owner}/{repo}/commits/{sha}``."""

    model_config = ConfigDict(extra="ignore")

    filename: str
    status: str = "modified"
    raw_url: Optional[str] = None
    patch: Optional[str] = None
    additions: int = 0
    deletions: int = 0
    previous_filename: Optional[str] = None
