"""Grouping of classified commits into release note buckets."""

from __future__ import annotations

from typing import Iterable

from release_notes_generator.parsing.commit_classifier import classify
from release_notes_generator.parsing.models import CommitGroups, RawCommit


def categorize(commits: Iterable[RawCommit]) -> CommitGroups:
    """Classify ``commits`` and partition them by type.

    The partition is stable: commits keep their relative input order
    within each bucket. Every commit lands in exactly one bucket.
    """
    groups = CommitGroups()
    for commit in commits:
        classified = classify(commit)
        groups.bucket(classified.type).append(classified)
    return groups
