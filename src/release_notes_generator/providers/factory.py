"""Selection of the provider matching a repository URL."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from release_notes_generator.providers.base import VersionControlProvider
from release_notes_generator.providers.github import DEFAULT_API_URL, GitHubProvider
from release_notes_generator.validation import ValidationError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


def select_provider(
    repository_url: str,
    token: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None,
) -> VersionControlProvider:
    """Return a provider able to handle ``repository_url``.

    Parameters
    ----------
    repository_url : str
        URL of the hosted repository.
    token : str, optional
        Access token passed on to the provider.
    config : dict, optional
        Loaded configuration; see :func:`release_notes_generator.config.load_config`.

    Raises
    ------
    ValidationError
        If no provider supports the URL.
    """
    config = config or {}
    if "github.com" in repository_url:
        logger.debug("Using GitHub provider for %s", repository_url)
        return GitHubProvider(
            token=token,
            api_url=config.get("api_url", DEFAULT_API_URL),
            request_timeout=float(config.get("request_timeout", 30)),
            per_page=int(config.get("per_page", 100)),
        )
    raise ValidationError(
        "Unsupported repository URL. Currently only GitHub repositories are supported."
    )
