import dataclasses
import unittest
from datetime import datetime, timezone

from release_notes_generator.parsing.models import (
    BUCKET_NAMES,
    ClassifiedCommit,
    CommitGroups,
    CommitType,
    RawCommit,
)


class TestParsingModels(unittest.TestCase):
    def test_raw_commit_is_immutable(self) -> None:
        commit = RawCommit(hash="abc", author="a", date=datetime(2024, 1, 1, tzinfo=timezone.utc), message="m")
        self.assertIsNone(commit.pr_number)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            commit.message = "changed"  # type: ignore[misc]

    def test_every_type_has_a_bucket(self) -> None:
        self.assertEqual(set(BUCKET_NAMES), set(CommitType))
        groups = CommitGroups()
        for commit_type in CommitType:
            self.assertIs(groups.bucket(commit_type), getattr(groups, BUCKET_NAMES[commit_type]))

    def test_groups_total(self) -> None:
        commit = ClassifiedCommit(
            hash="abc",
            author="a",
            date=datetime(2024, 1, 1, tzinfo=timezone.utc),
            message="fix: x",
            type=CommitType.FIX,
            description="x",
        )
        groups = CommitGroups(fixes=[commit], chores=[commit])
        self.assertEqual(groups.total, 2)
        self.assertFalse(groups.is_empty())


if __name__ == "__main__":
    unittest.main()
