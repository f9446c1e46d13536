"""
Markdown rendering of grouped commits.

Two documents are produced from a :class:`CommitGroups` record:

* release notes, listing only features and bug fixes;
* a changelog, listing every bucket including uncategorized commits.

Within each section the entries are sorted chronologically (oldest
first). Empty sections are omitted entirely. Descriptions are emitted
as-is; no markdown escaping is applied.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Sequence, Tuple

from release_notes_generator.parsing.models import ClassifiedCommit, CommitGroups, CommitType


RELEASE_NOTES_TITLE = "Release Notes"
RELEASE_NOTES_EMPTY = "# Release Notes\n\nNo features or bug fixes in this release.\n"
CHANGELOG_TITLE = "Changelog"
CHANGELOG_EMPTY = "# Changelog\n\nNo changes in this period.\n"

SECTION_HEADINGS = {
    CommitType.FEATURE: "Features",
    CommitType.FIX: "Bug Fixes",
    CommitType.DOCS: "Documentation",
    CommitType.CHORE: "Chores",
    CommitType.UNCATEGORIZED: "Other Changes",
}

RELEASE_NOTES_SECTIONS: Tuple[CommitType, ...] = (CommitType.FEATURE, CommitType.FIX)
CHANGELOG_SECTIONS: Tuple[CommitType, ...] = (
    CommitType.FEATURE,
    CommitType.FIX,
    CommitType.DOCS,
    CommitType.CHORE,
    CommitType.UNCATEGORIZED,
)


def _date_key(commit: ClassifiedCommit) -> datetime:
    # Naive timestamps are taken as UTC so they compare with aware ones
    if commit.date.tzinfo is None:
        return commit.date.replace(tzinfo=timezone.utc)
    return commit.date


def sort_chronologically(commits: Iterable[ClassifiedCommit]) -> List[ClassifiedCommit]:
    """Return ``commits`` ordered oldest first; equal dates keep their order."""
    return sorted(commits, key=_date_key)


def format_reference(commit: ClassifiedCommit) -> str:
    """Return ``#<pr>`` when the commit has a pull request, else the short hash.

    A pull request number of ``0`` counts as absent.
    """
    if commit.pr_number:
        return f"#{commit.pr_number}"
    return commit.hash[:7]


def format_commit_item(commit: ClassifiedCommit) -> str:
    """Format one commit as a markdown list item."""
    scope_prefix = f"**{commit.scope}**: " if commit.scope else ""
    return f"- {scope_prefix}{commit.description} ({format_reference(commit)})"


def _render_section(heading: str, commits: Sequence[ClassifiedCommit]) -> str:
    items = [format_commit_item(commit) for commit in sort_chronologically(commits)]
    return f"## {heading}\n\n" + "\n".join(items)


def _render_document(title: str, groups: CommitGroups, sections: Sequence[CommitType]) -> str:
    blocks = [f"# {title}"]
    for commit_type in sections:
        commits = groups.bucket(commit_type)
        if commits:
            blocks.append(_render_section(SECTION_HEADINGS[commit_type], commits))
    return "\n\n".join(blocks) + "\n"


def generate_release_notes(groups: CommitGroups) -> str:
    """Render release notes containing the Features and Bug Fixes sections.

    Documentation, chore and uncategorized commits never appear. When
    there are neither features nor fixes a fixed placeholder document is
    returned.
    """
    if not any(groups.bucket(commit_type) for commit_type in RELEASE_NOTES_SECTIONS):
        return RELEASE_NOTES_EMPTY
    return _render_document(RELEASE_NOTES_TITLE, groups, RELEASE_NOTES_SECTIONS)


def generate_changelog(groups: CommitGroups) -> str:
    """Render a changelog with one section per non-empty bucket.

    Sections appear in the order Features, Bug Fixes, Documentation,
    Chores, Other Changes. An empty ``groups`` yields a fixed placeholder
    document.
    """
    if groups.is_empty():
        return CHANGELOG_EMPTY
    return _render_document(CHANGELOG_TITLE, groups, CHANGELOG_SECTIONS)
