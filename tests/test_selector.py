"""End-to-end selector sessions driven by scripted keys against temp dirs."""

from __future__ import annotations

import contextlib
import os
import tempfile
import unittest
from datetime import datetime

from trypick.errors import TerminalUnavailableError
from trypick.input import keys
from trypick.runtime import NO_TTY_MESSAGE, Selector, SessionOptions, sanitize_new_name
from trypick.script import build_script
from trypick.selection import Cancelled, Cd, Delete, DeletePath, Mkdir, Rename
from trypick.terminal import CLEAR_SCREEN, ResizeSubscription

NOW = 1_715_000_000.0
TODAY = datetime.fromtimestamp(NOW).strftime("%Y-%m-%d")


class FakeTerminal:
    """Records frames instead of touching a real terminal."""

    def __init__(self, *, interactive: bool = False, size: tuple[int, int] = (80, 24), chunks=None) -> None:
        self.interactive = interactive
        self.size = size
        self.chunks = list(chunks or [])
        self.frames: list[str] = []
        self.sessions: list[tuple[bool, bool]] = []
        self.resize_callback = None
        self.unsubscribed = False

    def is_interactive(self) -> bool:
        return self.interactive

    def viewport_size(self, width=None, height=None) -> tuple[int, int]:
        return (width or self.size[0], height or self.size[1])

    def write(self, text: str) -> None:
        self.frames.append(text)

    def clear_screen(self) -> None:
        self.frames.append(CLEAR_SCREEN)

    @contextlib.contextmanager
    def session(self, *, raw: bool = True, alternate_screen: bool = True):
        self.sessions.append((raw, alternate_screen))
        yield self

    def subscribe_resize(self, callback) -> ResizeSubscription:
        self.resize_callback = callback
        terminal = self

        class _Subscription(ResizeSubscription):
            def unsubscribe(self) -> None:
                terminal.unsubscribed = True

        return _Subscription()

    def read_chunk(self) -> bytes:
        if not self.chunks:
            raise EOFError
        chunk = self.chunks.pop(0)
        if chunk is None:
            self.size = (100, 30)
            self.resize_callback()
            return b""
        return chunk


class _BrokenTerminal(FakeTerminal):
    @contextlib.contextmanager
    def session(self, *, raw: bool = True, alternate_screen: bool = True):
        raise TerminalUnavailableError("cannot enter raw mode")
        yield self


class SelectorTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.base = self._tmp.name

    def make_dir(self, name: str, age_hours: float = 0.0) -> str:
        path = os.path.join(self.base, name)
        os.mkdir(path)
        stamp = NOW - age_hours * 3600
        os.utime(path, (stamp, stamp))
        return path

    def selector(self, terminal: FakeTerminal | None = None, **options) -> Selector:
        return Selector(
            self.base,
            terminal or FakeTerminal(),
            SessionOptions(**options),
            clock=lambda: NOW,
        )

    def run_keys(self, key_script: list[str], **options):
        terminal = FakeTerminal()
        selector = self.selector(terminal, key_script=key_script, **options)
        return selector.run(), selector, terminal


class TwoEntryTestCase(SelectorTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.alpha = self.make_dir("2024-05-01-alpha", age_hours=2)
        self.beta = self.make_dir("2024-05-02-beta", age_hours=1)


class BrowsingTests(TwoEntryTestCase):
    def test_query_then_enter_changes_directory(self) -> None:
        result, _, terminal = self.run_keys(["b", "e", "\r"])

        self.assertEqual(result, Cd(path=self.beta))
        self.assertEqual(terminal.sessions, [(False, False)])

    def test_empty_query_ranks_recent_first(self) -> None:
        selector = self.selector()
        names = [match.entry.basename for match in selector.current_matches()]
        self.assertEqual(names, ["2024-05-02-beta", "2024-05-01-alpha"])

    def test_arrow_navigation(self) -> None:
        result, _, _ = self.run_keys(["\x1b[B", "\r"])
        self.assertEqual(result, Cd(path=self.alpha))

        result, _, _ = self.run_keys(["\x0e", "\x10", "\r"])
        self.assertEqual(result, Cd(path=self.beta))

    def test_cursor_clamps_at_list_end(self) -> None:
        result, _, _ = self.run_keys(["\x1b[B"] * 5 + ["\r"])
        self.assertEqual(result, Cd(path=self.alpha))

    def test_escape_cancels(self) -> None:
        result, _, _ = self.run_keys(["\x1b"])
        self.assertEqual(result, Cancelled())

    def test_exhausted_script_cancels(self) -> None:
        result, _, _ = self.run_keys([])
        self.assertEqual(result, Cancelled())

    def test_left_and_right_are_ignored(self) -> None:
        result, _, _ = self.run_keys(["\x1b[D", "\x1b[C", "\r"])
        self.assertEqual(result, Cd(path=self.beta))

    def test_ctrl_t_creates_dated_directory(self) -> None:
        result, _, _ = self.run_keys(["\x14"], query="new thing")
        self.assertEqual(result, Mkdir(path=os.path.join(self.base, f"{TODAY}-new-thing")))

    def test_enter_on_create_row(self) -> None:
        result, _, terminal = self.run_keys(["z", "z", "\r"])

        self.assertEqual(result, Mkdir(path=os.path.join(self.base, f"{TODAY}-zz")))
        self.assertIn(f"Create new: {TODAY}-zz", terminal.frames[-1])

    def test_ctrl_t_with_empty_input_does_nothing(self) -> None:
        result, _, _ = self.run_keys(["\x14"])
        self.assertEqual(result, Cancelled())

    def test_initial_type_wins_over_query(self) -> None:
        selector = self.selector(query="foo", initial_type="bar baz")
        self.assertEqual(selector.state.input_buffer, "bar-baz")
        self.assertEqual(selector.state.input_cursor, 7)

    def test_editing_resets_list_cursor(self) -> None:
        selector = self.selector(query="a")
        selector.handle_key(keys.DOWN)
        self.assertEqual(selector.state.list_cursor, 1)

        selector.handle_key("l")
        self.assertEqual(selector.state.list_cursor, 0)

        selector.handle_key(keys.DOWN)
        selector.handle_key(keys.BACKSPACE)
        self.assertEqual(selector.state.list_cursor, 0)
        self.assertEqual(selector.state.input_buffer, "a")

    def test_line_editing_keys_edit_search(self) -> None:
        selector = self.selector(query="foo bar")
        selector.handle_key(keys.CTRL_W)
        self.assertEqual(selector.state.input_buffer, "foo-")
        selector.handle_key(keys.CTRL_A)
        selector.handle_key(keys.CTRL_K)
        self.assertEqual(selector.state.input_buffer, "")


class RenderModeTests(SelectorTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.make_dir("2024-05-02-beta", age_hours=1)

    def test_render_once_draws_single_frame(self) -> None:
        terminal = FakeTerminal()
        result = self.selector(terminal, render_once=True, query="beta").run()

        self.assertEqual(result, Cancelled())
        self.assertEqual(len(terminal.frames), 1)
        self.assertIn("2024-05-02-beta", terminal.frames[0])
        self.assertEqual(terminal.sessions, [])

    def test_size_overrides_are_used(self) -> None:
        terminal = FakeTerminal()
        self.selector(terminal, render_once=True, width=50, height=10).run()

        self.assertEqual(terminal.frames[0].count("\n"), 9)

    def test_no_tty_without_script_aborts(self) -> None:
        terminal = FakeTerminal(interactive=False)
        with self.assertLogs("trypick.runtime.selector", level="ERROR"):
            result = self.selector(terminal).run()

        self.assertEqual(result, Cancelled(reason=NO_TTY_MESSAGE))
        self.assertEqual(terminal.frames, [])

    def test_terminal_failure_aborts_session(self) -> None:
        terminal = _BrokenTerminal(interactive=True)
        with self.assertLogs("trypick.runtime.selector", level="ERROR"):
            result = self.selector(terminal).run()

        self.assertEqual(result, Cancelled(reason="cannot enter raw mode"))

    def test_live_session_reads_terminal_keys(self) -> None:
        terminal = FakeTerminal(interactive=True, chunks=[b"be\r"])
        result = self.selector(terminal).run()

        self.assertEqual(result, Cd(path=os.path.join(self.base, "2024-05-02-beta")))
        self.assertEqual(terminal.sessions, [(True, True)])
        self.assertTrue(terminal.unsubscribed)

    def test_resize_requeries_size_and_clears(self) -> None:
        terminal = FakeTerminal(interactive=True, chunks=[None, b"\x1b"])
        selector = self.selector(terminal)
        result = selector.run()

        self.assertEqual(result, Cancelled())
        self.assertIn(CLEAR_SCREEN, terminal.frames)
        self.assertEqual((selector.state.width, selector.state.height), (100, 30))

    def test_closed_input_cancels(self) -> None:
        terminal = FakeTerminal(interactive=True, chunks=[])
        self.assertEqual(self.selector(terminal).run(), Cancelled())


class ScrollTests(SelectorTestCase):
    def test_scroll_follows_cursor(self) -> None:
        for idx in range(10):
            self.make_dir(f"dir{idx}", age_hours=idx)
        selector = self.selector(height=9)
        selector.state.width, selector.state.height = selector.viewport()

        for _ in range(5):
            selector.handle_key(keys.DOWN)
            selector.draw()
        self.assertEqual(selector.state.list_cursor, 5)
        self.assertEqual(selector.state.scroll_offset, 3)

        for _ in range(20):
            selector.handle_key(keys.DOWN)
        selector.draw()
        self.assertEqual(selector.state.list_cursor, 9)
        self.assertEqual(selector.state.scroll_offset, 7)

        for _ in range(9):
            selector.handle_key(keys.UP)
            selector.draw()
        self.assertEqual((selector.state.list_cursor, selector.state.scroll_offset), (0, 0))


class DeleteFlowTests(TwoEntryTestCase):
    def _expected_delete(self, *paths: str) -> Delete:
        return Delete(
            base_path=os.path.realpath(self.base),
            paths=tuple(DeletePath(os.path.realpath(p), os.path.basename(p)) for p in paths),
        )

    def test_typed_yes_deletes_marked_entries(self) -> None:
        result, selector, terminal = self.run_keys(
            ["\x04", "\x1b[B", "\x04", "\r", "Y", "E", "S", "\r"]
        )

        self.assertEqual(result, self._expected_delete(self.beta, self.alpha))
        self.assertEqual(selector.state.marked_for_delete, [])
        self.assertFalse(selector.state.delete_mode)
        self.assertTrue(any("Delete 2 directories?" in frame for frame in terminal.frames))

    def test_preset_confirmation(self) -> None:
        result, _, _ = self.run_keys(["\x04", "\r"], confirm_text="YES")
        self.assertEqual(result, self._expected_delete(self.beta))

    def test_wrong_confirmation_cancels_and_clears_marks(self) -> None:
        result, selector, terminal = self.run_keys(["\x04", "\r", "y", "e", "s", "\r"])

        self.assertEqual(result, Cancelled())
        self.assertEqual(selector.state.marked_for_delete, [])
        self.assertTrue(any("Delete cancelled" in frame for frame in terminal.frames))

    def test_escape_in_dialog_cancels(self) -> None:
        selector = self.selector(key_script=["\x1b"])
        selector.handle_key(keys.CTRL_D)

        self.assertIsNone(selector.handle_key(keys.ENTER))
        self.assertEqual(selector.state.status_message, "Delete cancelled")
        self.assertFalse(selector.state.delete_mode)

    def test_toggle_mark_twice_leaves_delete_mode(self) -> None:
        selector = self.selector()
        selector.handle_key(keys.CTRL_D)
        self.assertTrue(selector.state.delete_mode)
        self.assertEqual(selector.state.marked_for_delete, [self.beta])

        selector.handle_key(keys.CTRL_D)
        self.assertFalse(selector.state.delete_mode)
        self.assertEqual(selector.state.marked_for_delete, [])

    def test_escape_in_delete_mode_only_clears_marks(self) -> None:
        result, _, _ = self.run_keys(["\x04", "\x1b", "\r"])
        self.assertEqual(result, Cd(path=self.beta))

    def test_successful_delete_reloads_candidates(self) -> None:
        selector = self.selector(confirm_text="YES")
        selector.handle_key(keys.CTRL_D)
        selector.handle_key(keys.ENTER)
        os.rmdir(self.beta)

        names = [match.entry.basename for match in selector.current_matches()]
        self.assertEqual(names, ["2024-05-01-alpha"])


@unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
class DeleteSafetyTests(unittest.TestCase):
    def test_target_outside_base_is_rejected_and_marks_kept(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            base = os.path.join(tmp, "tries")
            outside = os.path.join(tmp, "outside")
            os.mkdir(base)
            os.mkdir(outside)
            link = os.path.join(base, "link")
            os.symlink(outside, link)

            selector = Selector(
                base,
                FakeTerminal(),
                SessionOptions(key_script=["Y", "E", "S", "\r"]),
                clock=lambda: NOW,
            )
            selector.handle_key(keys.CTRL_D)
            with self.assertLogs("trypick.runtime.selector", level="WARNING"):
                result = selector.handle_key(keys.ENTER)

        self.assertIsNone(result)
        self.assertEqual(selector.state.marked_for_delete, [link])
        self.assertTrue(selector.state.delete_mode)
        self.assertTrue(selector.state.status_message.startswith("Safety check failed: "))

    def test_symlink_to_sibling_deletes_only_the_link(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            base = os.path.realpath(tmp)
            real = os.path.join(base, "2024-01-01-real")
            os.mkdir(real)
            os.symlink(real, os.path.join(base, "2024-01-02-link"))

            selector = Selector(
                base,
                FakeTerminal(),
                SessionOptions(key_script=["l", "i", "n", "k", "\x04", "\r", "Y", "E", "S", "\r"]),
                clock=lambda: NOW,
            )
            result = selector.run()
            commands = build_script(result, cwd=base)

        self.assertEqual(
            result,
            Delete(base_path=base, paths=(DeletePath(real, "2024-01-02-link"),)),
        )
        self.assertIn("test -d 2024-01-02-link && rm -rf 2024-01-02-link", commands)
        self.assertFalse(any("rm -rf 2024-01-01-real" in command for command in commands))


class RenameFlowTests(SelectorTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.make_dir("bar", age_hours=5)
        self.make_dir("foo", age_hours=0)

    def test_rename_to_new_name(self) -> None:
        result, _, _ = self.run_keys(["\x12", "\x17", "b", "a", "z", "\r"])
        self.assertEqual(result, Rename(base_path=self.base, old_name="foo", new_name="baz"))

    def test_rename_turns_spaces_into_hyphens(self) -> None:
        result, _, _ = self.run_keys(["\x12", "\x17", " ", "m", "y", " ", "n", " ", "\r"])
        self.assertEqual(result, Rename(base_path=self.base, old_name="foo", new_name="my-n"))

    def test_existing_name_is_rejected_inline(self) -> None:
        result, _, terminal = self.run_keys(["\x12", "\x17", "b", "a", "r", "\r"])

        self.assertEqual(result, Cancelled())
        self.assertTrue(any("Directory exists: bar" in frame for frame in terminal.frames))

    def test_slash_is_rejected(self) -> None:
        result, _, terminal = self.run_keys(["\x12", "/", "x", "\r"])

        self.assertEqual(result, Cancelled())
        self.assertTrue(any("Name cannot contain /" in frame for frame in terminal.frames))

    def test_empty_name_is_rejected(self) -> None:
        _, _, terminal = self.run_keys(["\x12", "\x17", "\r"])
        self.assertTrue(any("Name cannot be empty" in frame for frame in terminal.frames))

    def test_edit_clears_error(self) -> None:
        _, _, terminal = self.run_keys(["\x12", "\x17", "\r", "q"])

        dialog_frames = [frame for frame in terminal.frames if "Rename directory" in frame]
        self.assertIn("Name cannot be empty", dialog_frames[-2])
        self.assertNotIn("Name cannot be empty", dialog_frames[-1])

    def test_same_name_returns_to_list(self) -> None:
        result, _, terminal = self.run_keys(["\x12", "\r", "\r"])

        self.assertEqual(result, Cd(path=os.path.join(self.base, "foo")))
        dialog_frames = [frame for frame in terminal.frames if "Rename directory" in frame]
        self.assertEqual(len(dialog_frames), 1)
        self.assertNotIn("Name cannot", dialog_frames[0])
        self.assertNotIn("Directory exists", dialog_frames[0])

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_dangling_symlink_does_not_block_rename(self) -> None:
        os.symlink(os.path.join(self.base, "missing"), os.path.join(self.base, "ghost"))

        result, _, _ = self.run_keys(["f", "o", "o", "\x12", "\x17", "g", "h", "o", "s", "t", "\r"])

        self.assertEqual(result, Rename(base_path=self.base, old_name="foo", new_name="ghost"))

    def test_rename_leaves_delete_mode(self) -> None:
        selector = self.selector(key_script=["\x1b"])
        selector.handle_key(keys.CTRL_D)
        self.assertTrue(selector.state.delete_mode)

        self.assertIsNone(selector.handle_key(keys.CTRL_R))
        self.assertFalse(selector.state.delete_mode)


class SanitizeTests(unittest.TestCase):
    def test_sanitize_new_name(self) -> None:
        self.assertEqual(sanitize_new_name("  my  idea "), "my-idea")
        self.assertEqual(sanitize_new_name("a/b\tc"), "a-b-c")
        self.assertEqual(sanitize_new_name("   "), "")


if __name__ == "__main__":
    unittest.main()
