"""
Release note generation service.

Ties the pieces together: select a provider for the repository, fetch
the commits in the requested range, categorize them and render both
documents. Provider and validation errors are not handled here; they
propagate to the caller (normally the CLI), which decides how to report
them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from release_notes_generator.parsing.categorizer import categorize
from release_notes_generator.parsing.models import RawCommit
from release_notes_generator.providers.base import RepositoryInfo, VersionControlProvider
from release_notes_generator.providers.factory import select_provider
from release_notes_generator.rendering.markdown import generate_changelog, generate_release_notes
from release_notes_generator.validation import GenerateRequest


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


SOURCE_COMMITS = "commits"
SOURCE_PULL_REQUESTS = "pull-requests"


@dataclass(frozen=True)
class GeneratedDocuments:
    """The rendered release notes and changelog for one request."""

    release_notes: str
    changelog: str
    commit_count: int = 0

    def to_dict(self) -> Dict[str, str]:
        return {"releaseNotes": self.release_notes, "changelog": self.changelog}


def collect_commits(
    provider: VersionControlProvider,
    repo: RepositoryInfo,
    request: GenerateRequest,
    source: str = SOURCE_COMMITS,
) -> List[RawCommit]:
    """Fetch the commits for ``request`` from ``provider``.

    With ``source="pull-requests"`` the commits of every merged pull
    request are flattened; a commit that appears in several pull requests
    is kept once, at its first occurrence.
    """
    if source == SOURCE_COMMITS:
        return provider.fetch_commits(
            repo, request.start_date, request.end_date, request.access_token
        )
    if source != SOURCE_PULL_REQUESTS:
        raise ValueError(f"Unknown commit source: {source}")

    pull_requests = provider.fetch_pull_requests(
        repo, request.start_date, request.end_date, request.access_token
    )
    commits: List[RawCommit] = []
    seen = set()
    for pull_request in pull_requests:
        for commit in pull_request.commits:
            if commit.hash in seen:
                continue
            seen.add(commit.hash)
            commits.append(commit)
    logger.debug("Collected %d commit(s) from %d pull request(s)", len(commits), len(pull_requests))
    return commits


def generate_documents(
    request: GenerateRequest,
    provider: Optional[VersionControlProvider] = None,
    config: Optional[Dict[str, Any]] = None,
    source: str = SOURCE_COMMITS,
) -> GeneratedDocuments:
    """Generate release notes and a changelog for a validated request.

    Parameters
    ----------
    request : GenerateRequest
        The validated request.
    provider : VersionControlProvider, optional
        Provider to fetch from. Selected from the repository URL when
        omitted.
    config : dict, optional
        Loaded configuration used when selecting a provider.
    source : str, optional
        ``"commits"`` (default) or ``"pull-requests"``.

    Raises
    ------
    ValidationError
        If no provider supports the URL or the URL cannot be parsed.
    ProviderError
        If fetching fails.
    """
    # Never log the access token
    logger.info(
        "Generating release notes for %s from %s to %s",
        request.repository_url,
        request.start_date.isoformat(),
        request.end_date.isoformat(),
    )
    if provider is None:
        provider = select_provider(request.repository_url, request.access_token, config)
    repo = provider.parse_repository_url(request.repository_url)

    commits = collect_commits(provider, repo, request, source)
    groups = categorize(commits)
    logger.debug(
        "Categorized %d commit(s): %d feature(s), %d fix(es), %d doc(s), %d chore(s), %d other",
        groups.total,
        len(groups.features),
        len(groups.fixes),
        len(groups.docs),
        len(groups.chores),
        len(groups.uncategorized),
    )

    return GeneratedDocuments(
        release_notes=generate_release_notes(groups),
        changelog=generate_changelog(groups),
        commit_count=len(commits),
    )
