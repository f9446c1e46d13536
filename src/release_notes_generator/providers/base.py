"""
Abstractions shared by source-control providers.

A provider knows how to turn a repository URL into a
:class:`RepositoryInfo` and how to fetch commits and merged pull
requests for a date range. Failures are reported as
:class:`ProviderError` with an :class:`ErrorKind` so that callers can
react without knowing which host produced them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from release_notes_generator.parsing.models import RawCommit


class ErrorKind(str, Enum):
    """Category of a provider failure."""

    NOT_FOUND = "not-found"
    AUTH_FAILED = "auth-failed"
    RATE_LIMITED = "rate-limited"
    NETWORK_ERROR = "network-error"
    OTHER = "other"


class ProviderError(Exception):
    """Raised when a provider request fails.

    Attributes
    ----------
    kind : ErrorKind
        What went wrong, independent of the host.
    status : Optional[int]
        HTTP status code of the failed response, if there was one.
    """

    def __init__(self, kind: ErrorKind, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.status = status


@dataclass(frozen=True)
class RepositoryInfo:
    """Owner and name of a hosted repository."""

    owner: str
    repo: str
    provider: str = "github"


@dataclass(frozen=True)
class PullRequest:
    """A merged pull request and the commits it contains."""

    number: int
    title: str
    merged_at: datetime
    commits: List[RawCommit] = field(default_factory=list)


class VersionControlProvider(ABC):
    """Interface implemented once per supported hosting service."""

    @abstractmethod
    def parse_repository_url(self, url: str) -> RepositoryInfo:
        """Extract owner and repository name from ``url``.

        Raises
        ------
        ValidationError
            If the URL does not point to a repository on this host.
        """

    @abstractmethod
    def fetch_commits(
        self,
        repo: RepositoryInfo,
        start_date: datetime,
        end_date: datetime,
        token: Optional[str] = None,
    ) -> List[RawCommit]:
        """Return commits authored within ``[start_date, end_date]``."""

    @abstractmethod
    def fetch_pull_requests(
        self,
        repo: RepositoryInfo,
        start_date: datetime,
        end_date: datetime,
        token: Optional[str] = None,
    ) -> List[PullRequest]:
        """Return pull requests merged within ``[start_date, end_date]``."""
