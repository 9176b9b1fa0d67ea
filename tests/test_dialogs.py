"""Tests for rename validation and delete-target safety checks."""

from __future__ import annotations

import os
import tempfile
import unittest

from trypick.errors import DeleteSafetyError, RenameValidationError
from trypick.runtime import resolve_delete_targets, validate_rename
from trypick.search import CandidateEntry
from trypick.selection import DeletePath


def _entry(path: str) -> CandidateEntry:
    name = os.path.basename(path)
    return CandidateEntry(text=name, basename=name, path=path, modified_at=0.0, base_score=0.0)


class ValidateRenameTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.base = self._tmp.name
        os.mkdir(os.path.join(self.base, "taken"))

    def test_valid_name_is_cleaned(self) -> None:
        self.assertEqual(validate_rename(self.base, "old", "  new name "), "new-name")

    def test_same_name_is_noop(self) -> None:
        self.assertIsNone(validate_rename(self.base, "old", "old"))

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_dangling_symlink_is_not_a_collision(self) -> None:
        os.symlink(os.path.join(self.base, "gone"), os.path.join(self.base, "ghost"))
        self.assertEqual(validate_rename(self.base, "old", "ghost"), "ghost")

    def test_rejections(self) -> None:
        cases = {
            "   ": "Name cannot be empty",
            "a/b": "Name cannot contain /",
            "taken": "Directory exists: taken",
        }
        for raw, message in cases.items():
            with self.subTest(raw=raw):
                with self.assertRaises(RenameValidationError) as ctx:
                    validate_rename(self.base, "old", raw)
                self.assertEqual(str(ctx.exception), message)


class ResolveDeleteTargetsTests(unittest.TestCase):
    def test_targets_inside_base_are_resolved(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = os.path.join(tmp, "old")
            os.mkdir(target)

            resolved = resolve_delete_targets(tmp, [_entry(target)])

        self.assertEqual(resolved, (DeletePath(os.path.realpath(target), "old"),))

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_link_to_sibling_keeps_link_basename(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            real = os.path.join(tmp, "real")
            link = os.path.join(tmp, "link")
            os.mkdir(real)
            os.symlink(real, link)

            resolved = resolve_delete_targets(tmp, [_entry(link)])

        self.assertEqual(resolved, (DeletePath(os.path.realpath(real), "link"),))

    def test_base_itself_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(DeleteSafetyError):
                resolve_delete_targets(tmp, [_entry(tmp)])

    def test_sibling_with_common_prefix_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            base = os.path.join(tmp, "tries")
            sibling = os.path.join(tmp, "tries-other")
            os.mkdir(base)
            os.mkdir(sibling)

            with self.assertRaises(DeleteSafetyError) as ctx:
                resolve_delete_targets(base, [_entry(os.path.join(base, "..", "tries-other"))])

        self.assertIn("Safety check failed", str(ctx.exception))

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_whole_batch_rejected_when_one_target_escapes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            base = os.path.join(tmp, "tries")
            os.mkdir(base)
            os.mkdir(os.path.join(base, "fine"))
            os.mkdir(os.path.join(tmp, "outside"))
            os.symlink(os.path.join(tmp, "outside"), os.path.join(base, "link"))

            with self.assertRaises(DeleteSafetyError):
                resolve_delete_targets(
                    base,
                    [_entry(os.path.join(base, "fine")), _entry(os.path.join(base, "link"))],
                )


if __name__ == "__main__":
    unittest.main()
