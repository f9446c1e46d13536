"""
GitHub provider for release_notes_generator.

This client wraps the GitHub REST API using ``requests``. It supports
listing commits in a date range and listing merged pull requests with
their commits. Only the first page of each listing is requested. On
error conditions (HTTP errors, timeouts, unreadable responses) a
:class:`ProviderError` is raised with the matching :class:`ErrorKind`.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from release_notes_generator.parsing.models import RawCommit
from release_notes_generator.providers.base import (
    ErrorKind,
    ProviderError,
    PullRequest,
    RepositoryInfo,
    VersionControlProvider,
)
from release_notes_generator.validation import ValidationError, parse_iso_datetime


logger = logging.getLogger(__name__)
# Attach a null handler to avoid errors when the root logger is missing a
# stream. Messages will still propagate to the root logger if configured.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


DEFAULT_API_URL = "https://api.github.com"

REPOSITORY_URL_PATTERN = re.compile(r"^https://github\.com/([^/]+)/([^/]+?)(?:\.git)?/?$")
PR_NUMBER_PATTERN = re.compile(r"\(#(\d+)\)|PR #(\d+)", re.IGNORECASE)


def extract_pr_number(message: str) -> Optional[int]:
    """Return the pull request number referenced in ``message``, if any.

    Recognises ``(#123)`` as appended by squash merges and ``PR #123``.
    """
    match = PR_NUMBER_PATTERN.search(message)
    if match:
        return int(match.group(1) or match.group(2))
    return None


# Raised while mapping a decoded body that does not have the expected shape
MALFORMED_ERRORS = (KeyError, TypeError, AttributeError, ValueError)


def _malformed_response(exc: Exception) -> ProviderError:
    logger.error("Unexpected structure in GitHub response: %r", exc)
    return ProviderError(ErrorKind.OTHER, "Failed to parse GitHub response")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _isoformat(value: datetime) -> str:
    return _as_utc(value).astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class GitHubProvider(VersionControlProvider):
    """Provider backed by the GitHub REST API.

    Parameters
    ----------
    token : str, optional
        Default access token. A token passed to the fetch methods takes
        precedence.
    api_url : str, optional
        Base URL of the API, ``https://api.github.com`` by default.
    request_timeout : float, optional
        Timeout in seconds for HTTP requests. Defaults to 30 seconds.
    per_page : int, optional
        Page size requested from listing endpoints. Defaults to 100.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        request_timeout: float = 30.0,
        per_page: int = 100,
    ) -> None:
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.request_timeout = request_timeout
        self.per_page = per_page

    # ------------------------------------------------------------------
    # URL handling
    # ------------------------------------------------------------------
    def parse_repository_url(self, url: str) -> RepositoryInfo:
        """Parse ``https://github.com/{owner}/{repo}`` into its parts.

        A ``.git`` suffix and a trailing slash are accepted.
        """
        match = REPOSITORY_URL_PATTERN.match(url.strip())
        if not match:
            raise ValidationError(
                "Invalid GitHub repository URL. Expected format: https://github.com/{owner}/{repo}"
            )
        return RepositoryInfo(owner=match.group(1), repo=match.group(2), provider="github")

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------
    def _headers(self, token: Optional[str]) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        token = token or self.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    def _error_for_response(response: Any, action: str) -> ProviderError:
        status = response.status_code
        body = response.text or ""
        if status == 404:
            return ProviderError(ErrorKind.NOT_FOUND, "Repository not found or inaccessible", status)
        if status == 401:
            return ProviderError(
                ErrorKind.AUTH_FAILED, "Authentication failed or insufficient permissions", status
            )
        if status == 403:
            if "rate limit" in body.lower() or response.headers.get("X-RateLimit-Remaining") == "0":
                return ProviderError(ErrorKind.RATE_LIMITED, "GitHub API rate limit exceeded", status)
            return ProviderError(
                ErrorKind.AUTH_FAILED, "Authentication failed or insufficient permissions", status
            )
        if status == 429:
            return ProviderError(ErrorKind.RATE_LIMITED, "GitHub API rate limit exceeded", status)
        return ProviderError(ErrorKind.OTHER, f"Failed to {action}: status {status}: {body}", status)

    def _get(self, path: str, params: Dict[str, Any], token: Optional[str], action: str) -> Any:
        """Issue a GET request against the API and return the decoded JSON.

        Raises
        ------
        ProviderError
            If the request fails or the response cannot be decoded.
        """
        url = f"{self.api_url}{path}"
        logger.debug("Requesting %s with params: %s", url, params)
        try:
            response = requests.get(
                url,
                params=params,
                headers=self._headers(token),
                timeout=self.request_timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.error("Failed to connect to GitHub: %s", exc)
            raise ProviderError(
                ErrorKind.NETWORK_ERROR, f"Unable to connect to GitHub API: {exc}"
            ) from exc
        except requests.RequestException as exc:
            logger.error("GitHub request failed: %s", exc)
            raise ProviderError(ErrorKind.OTHER, f"Failed to {action}: {exc}") from exc
        if response.status_code != 200:
            logger.error(
                "GitHub returned non-200 status %s for %s: %s",
                response.status_code,
                url,
                response.text,
            )
            raise self._error_for_response(response, action)
        try:
            return response.json()
        except ValueError as exc:
            logger.error("Failed to parse GitHub response: %s", exc)
            raise ProviderError(ErrorKind.OTHER, "Failed to parse GitHub response") from exc

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------
    @staticmethod
    def _commit_date(details: Dict[str, Any], fallback: Optional[str] = None) -> datetime:
        author = details.get("author") or {}
        committer = details.get("committer") or {}
        raw = author.get("date") or committer.get("date") or fallback
        if raw:
            return parse_iso_datetime(raw)
        return datetime.now(timezone.utc)

    def _to_raw_commit(
        self,
        item: Dict[str, Any],
        pr_number: Optional[int] = None,
        fallback_date: Optional[str] = None,
    ) -> RawCommit:
        details = item.get("commit") or {}
        message = details.get("message") or ""
        author = details.get("author") or {}
        return RawCommit(
            hash=item["sha"],
            author=author.get("name") or "Unknown",
            date=self._commit_date(details, fallback_date),
            message=message,
            pr_number=pr_number if pr_number is not None else extract_pr_number(message),
        )

    def fetch_commits(
        self,
        repo: RepositoryInfo,
        start_date: datetime,
        end_date: datetime,
        token: Optional[str] = None,
    ) -> List[RawCommit]:
        """Fetch commits created within the date range.

        Commits repeated in the response are only returned once.

        Raises
        ------
        ProviderError
            If the request fails.
        """
        params = {
            "since": _isoformat(start_date),
            "until": _isoformat(end_date),
            "per_page": self.per_page,
        }
        items = self._get(f"/repos/{repo.owner}/{repo.repo}/commits", params, token, "fetch commits")
        commits: List[RawCommit] = []
        seen = set()
        try:
            for item in items:
                if item.get("sha") in seen:
                    continue
                seen.add(item.get("sha"))
                commits.append(self._to_raw_commit(item))
        except MALFORMED_ERRORS as exc:
            raise _malformed_response(exc) from exc
        logger.debug("Fetched %d commit(s) from %s/%s", len(commits), repo.owner, repo.repo)
        return commits

    # ------------------------------------------------------------------
    # Pull requests
    # ------------------------------------------------------------------
    def fetch_pull_requests(
        self,
        repo: RepositoryInfo,
        start_date: datetime,
        end_date: datetime,
        token: Optional[str] = None,
    ) -> List[PullRequest]:
        """Fetch pull requests merged within the date range, with their commits.

        Raises
        ------
        ProviderError
            If any request fails.
        """
        params = {
            "state": "closed",
            "sort": "updated",
            "direction": "desc",
            "per_page": self.per_page,
        }
        base = f"/repos/{repo.owner}/{repo.repo}/pulls"
        items = self._get(base, params, token, "fetch pull requests")

        pull_requests: List[PullRequest] = []
        try:
            for item in items:
                merged_raw = item.get("merged_at")
                if not merged_raw:
                    continue
                merged_at = parse_iso_datetime(merged_raw)
                if not _as_utc(start_date) <= merged_at <= _as_utc(end_date):
                    continue
                number = item["number"]
                commit_items = self._get(
                    f"{base}/{number}/commits", {"per_page": self.per_page}, token, "fetch pull requests"
                )
                pull_requests.append(
                    PullRequest(
                        number=number,
                        title=item.get("title") or "",
                        merged_at=merged_at,
                        commits=[
                            self._to_raw_commit(commit, pr_number=number, fallback_date=merged_raw)
                            for commit in commit_items
                        ],
                    )
                )
        except MALFORMED_ERRORS as exc:
            raise _malformed_response(exc) from exc
        logger.debug("Fetched %d merged pull request(s) from %s/%s", len(pull_requests), repo.owner, repo.repo)
        return pull_requests
