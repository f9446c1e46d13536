"""
Source-control providers.

This package contains the provider interface and the GitHub
implementation used to fetch commits and merged pull requests.
"""

from .base import ErrorKind, ProviderError, PullRequest, RepositoryInfo, VersionControlProvider  # noqa: F401
from .factory import select_provider  # noqa: F401
from .github import GitHubProvider  # noqa: F401
