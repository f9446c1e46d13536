"""
Commit message parsing for release_notes_generator.

This package classifies commits by their conventional commit prefix and
groups them into buckets. See
:mod:`release_notes_generator.parsing.commit_classifier` and
:mod:`release_notes_generator.parsing.categorizer` for details.
"""

from .categorizer import categorize  # noqa: F401
from .commit_classifier import classify  # noqa: F401
from .models import ClassifiedCommit, CommitGroups, CommitType, RawCommit  # noqa: F401
