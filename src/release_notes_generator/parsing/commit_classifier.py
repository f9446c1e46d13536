"""
Conventional commit parsing.

Commit messages of the form ``type(scope): description`` are split into
their parts. Only the ``feat``, ``fix``, ``docs`` and ``chore`` types are
recognised; anything else, including malformed scopes, falls back to
``uncategorized`` rather than being rejected. The classifier is a pure
function of the commit message so it can be unit tested without any
network access.
"""

from __future__ import annotations

import re

from release_notes_generator.parsing.models import ClassifiedCommit, CommitType, RawCommit


# type(scope): description, or type: description
CONVENTIONAL_COMMIT_PATTERN = re.compile(
    r"^(feat|fix|docs|chore)(?:\(([^)]+)\))?:\s*(.+)",
    re.IGNORECASE,
)

BREAKING_CHANGE_MARKERS = ("BREAKING CHANGE", "!:")


def is_breaking_change(message: str) -> bool:
    """Return True if ``message`` carries a breaking change marker anywhere."""
    return any(marker in message for marker in BREAKING_CHANGE_MARKERS)


def classify(commit: RawCommit) -> ClassifiedCommit:
    """Classify a commit by its conventional commit prefix.

    Parameters
    ----------
    commit : RawCommit
        The commit to classify.

    Returns
    -------
    ClassifiedCommit
        The commit with ``type``, ``scope``, ``description`` and
        ``breaking_change`` filled in. All other fields are copied
        unchanged.

    Notes
    -----
    The type token is matched case-insensitively and normalised to
    lowercase. Breaking change detection scans the whole message and is
    independent of whether the prefix matched.
    """
    match = CONVENTIONAL_COMMIT_PATTERN.match(commit.message)
    if match:
        token, scope, description = match.groups()
        commit_type = CommitType(token.lower())
        description = description.strip()
    else:
        commit_type = CommitType.UNCATEGORIZED
        scope = None
        description = commit.message.strip()

    return ClassifiedCommit(
        hash=commit.hash,
        author=commit.author,
        date=commit.date,
        message=commit.message,
        type=commit_type,
        description=description,
        scope=scope or None,
        breaking_change=is_breaking_change(commit.message),
        pr_number=commit.pr_number,
    )
