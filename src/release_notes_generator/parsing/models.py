"""
Data models for commit classification.

A :class:`RawCommit` is what a provider hands over. The classifier turns
it into a :class:`ClassifiedCommit`, and the categorizer collects those
into a fixed-shape :class:`CommitGroups` record with one ordered list per
:class:`CommitType`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


class CommitType(str, Enum):
    """Closed set of commit types recognised in commit messages."""

    FEATURE = "feat"
    FIX = "fix"
    DOCS = "docs"
    CHORE = "chore"
    UNCATEGORIZED = "uncategorized"


@dataclass(frozen=True)
class RawCommit:
    """A commit as fetched from the source-control host.

    Attributes
    ----------
    hash : str
        Commit SHA, unique within a repository.
    author : str
        Author display name.
    date : datetime
        Authoring timestamp.
    message : str
        Full commit message, possibly spanning several lines.
    pr_number : Optional[int]
        Number of the pull request the commit belongs to, if known.
    """

    hash: str
    author: str
    date: datetime
    message: str
    pr_number: Optional[int] = None


@dataclass(frozen=True)
class ClassifiedCommit:
    """A :class:`RawCommit` enriched with its conventional commit parts."""

    hash: str
    author: str
    date: datetime
    message: str
    type: CommitType
    description: str
    scope: Optional[str] = None
    breaking_change: bool = False
    pr_number: Optional[int] = None


# Attribute of CommitGroups holding each commit type
BUCKET_NAMES: Dict[CommitType, str] = {
    CommitType.FEATURE: "features",
    CommitType.FIX: "fixes",
    CommitType.DOCS: "docs",
    CommitType.CHORE: "chores",
    CommitType.UNCATEGORIZED: "uncategorized",
}


@dataclass
class CommitGroups:
    """Classified commits partitioned by type, in input order."""

    features: List[ClassifiedCommit] = field(default_factory=list)
    fixes: List[ClassifiedCommit] = field(default_factory=list)
    docs: List[ClassifiedCommit] = field(default_factory=list)
    chores: List[ClassifiedCommit] = field(default_factory=list)
    uncategorized: List[ClassifiedCommit] = field(default_factory=list)

    def bucket(self, commit_type: CommitType) -> List[ClassifiedCommit]:
        """Return the list holding commits of ``commit_type``."""
        return getattr(self, BUCKET_NAMES[commit_type])

    @property
    def total(self) -> int:
        return sum(len(self.bucket(commit_type)) for commit_type in CommitType)

    def is_empty(self) -> bool:
        return self.total == 0
