"""
Validation of release note generation requests.

The CLI hands raw strings to :func:`validate_generate_request`, which
checks them and returns a :class:`GenerateRequest` with parsed dates.
Any problem is reported as a :class:`ValidationError` carrying a message
suitable for showing to the user.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


GITHUB_URL_PATTERN = re.compile(r"^https://github\.com/[\w-]+/[\w.-]+/?$")


class ValidationError(Exception):
    """Raised when a request or repository URL is invalid."""

    pass


@dataclass(frozen=True)
class GenerateRequest:
    """A validated request to generate release notes and a changelog."""

    repository_url: str
    start_date: datetime
    end_date: datetime
    access_token: Optional[str] = None


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO 8601 date or datetime string into an aware datetime.

    A trailing ``Z`` is accepted as UTC. Date-only and naive values are
    interpreted as UTC.

    Raises
    ------
    ValueError
        If ``value`` is not a valid ISO 8601 string.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _require_string(value: Any, label: str) -> str:
    if not value or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required and must be a string")
    return value.strip()


def validate_generate_request(
    repository_url: Any,
    start_date: Any,
    end_date: Any,
    access_token: Any = None,
) -> GenerateRequest:
    """Validate raw request values.

    Parameters
    ----------
    repository_url : str
        URL of the form ``https://github.com/{owner}/{repo}``.
    start_date, end_date : str
        ISO 8601 bounds of the date range, inclusive.
    access_token : str, optional
        Token used to authenticate against the provider. Empty strings
        are treated as no token.

    Returns
    -------
    GenerateRequest
        The validated request.

    Raises
    ------
    ValidationError
        If any value is missing or malformed, or the range is reversed.
    """
    url = _require_string(repository_url, "Repository URL")
    start_text = _require_string(start_date, "Start date")
    end_text = _require_string(end_date, "End date")

    if not GITHUB_URL_PATTERN.match(url):
        logger.debug("Rejected repository URL: %s", url)
        raise ValidationError(
            "Invalid repository URL format. Expected: https://github.com/{owner}/{repo}"
        )

    try:
        start = parse_iso_datetime(start_text)
    except ValueError as exc:
        raise ValidationError("Invalid start date format. Expected ISO 8601 format") from exc
    try:
        end = parse_iso_datetime(end_text)
    except ValueError as exc:
        raise ValidationError("Invalid end date format. Expected ISO 8601 format") from exc

    if end < start:
        raise ValidationError("End date must not be before start date")

    if access_token is not None and not isinstance(access_token, str):
        raise ValidationError("Access token must be a string")

    return GenerateRequest(
        repository_url=url,
        start_date=start,
        end_date=end,
        access_token=access_token or None,
    )
