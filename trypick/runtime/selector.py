"""Interactive selector state machine.

The selector renders the ranked candidates, reads one key per iteration and
mutates its state until a key produces a selection result. Sub-dialogs run
modally from inside a key handler.
"""

from __future__ import annotations

import logging
import os
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ..errors import DeleteSafetyError, TerminalUnavailableError
from ..input import (
    KeyComboBinding,
    KeyComboRegistry,
    KeySource,
    ScriptedKeySource,
    TerminalKeySource,
    is_printable_key,
    line_edit_registry,
)
from ..input import keys
from ..render import RenderContext, adjust_scroll, render_main_frame, visible_body_rows
from ..search import CandidateEntry, Matcher, ScoredMatch
from ..selection import Cancelled, Cd, Mkdir, SelectionResult
from ..state import SelectorState
from ..terminal import TerminalController
from ..tries import load_candidates
from ..ui_theme import PLAIN_THEME, UITheme
from .dialogs import DeleteConfirmDialog, DialogContext, RenameDialog

logger = logging.getLogger(__name__)

NO_TTY_MESSAGE = "trypick requires an interactive terminal"
_NAME_SEPARATOR_RE = re.compile(r"[\s/]+")


@dataclass
class SessionOptions:
    """Per-session configuration supplied by the CLI or by tests."""

    query: str = ""
    initial_type: str | None = None
    render_once: bool = False
    key_script: list[str] | None = None
    confirm_text: str | None = None
    width: int | None = None
    height: int | None = None
    theme: UITheme = PLAIN_THEME

    @property
    def scripted(self) -> bool:
        return self.key_script is not None


def sanitize_new_name(text: str) -> str:
    """Turn free-form input into a single directory-name component."""
    return _NAME_SEPARATOR_RE.sub("-", text.strip())


class Selector:
    """Fuzzy directory picker bound to one base directory."""

    def __init__(
        self,
        base_path: str,
        terminal: TerminalController,
        options: SessionOptions | None = None,
        *,
        lister: Callable[..., list[CandidateEntry]] = load_candidates,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.base_path = base_path
        self.terminal = terminal
        self.options = options or SessionOptions()
        self._lister = lister
        self._clock = clock

        seed = self.options.initial_type if self.options.initial_type is not None else self.options.query
        self.state = SelectorState()
        self.state.search.insert(seed.replace(" ", "-"))

        self.key_source: KeySource
        if self.options.scripted:
            self.key_source = ScriptedKeySource(self.options.key_script)
        else:
            self.key_source = TerminalKeySource(terminal)

        self._matcher: Matcher | None = None
        self._matches: list[ScoredMatch] = []
        self._matched_query: str | None = None
        self._needs_resize = False
        self._bindings = self._build_bindings()
        self._line_edit = line_edit_registry(self.state.search)

    def _build_bindings(self) -> KeyComboRegistry:
        return KeyComboRegistry().register_bindings(
            KeyComboBinding((keys.ENTER,), self._select),
            KeyComboBinding((keys.UP, keys.CTRL_P), lambda: self._move(-1)),
            KeyComboBinding((keys.DOWN, keys.CTRL_N), lambda: self._move(1)),
            KeyComboBinding((keys.CTRL_D,), self._toggle_mark),
            KeyComboBinding((keys.CTRL_T,), self._create_new),
            KeyComboBinding((keys.CTRL_R,), self._rename),
            KeyComboBinding((keys.ESC, keys.CTRL_C), self._escape),
            KeyComboBinding((keys.LEFT, keys.RIGHT), lambda: None),
        )

    # Candidates

    def invalidate_candidates(self) -> None:
        self._matcher = None
        self._matched_query = None

    def current_matches(self) -> list[ScoredMatch]:
        if self._matcher is None:
            self._matcher = Matcher(self._lister(self.base_path, now=self._clock()))
            logger.debug("loaded %d candidates from %s", len(self._matcher), self.base_path)
        query = self.state.input_buffer
        if query != self._matched_query:
            self._matches = self._matcher.match(query)
            self._matched_query = query
        return self._matches

    def total_items(self) -> int:
        return len(self.current_matches()) + (1 if self.state.input_buffer else 0)

    def _entry_under_cursor(self) -> CandidateEntry | None:
        matches = self.current_matches()
        if 0 <= self.state.list_cursor < len(matches):
            return matches[self.state.list_cursor].entry
        return None

    # Screen

    def _on_resize(self) -> None:
        self._needs_resize = True

    def _refresh_size(self) -> None:
        self.state.width, self.state.height = self.viewport()

    def viewport(self) -> tuple[int, int]:
        return self.terminal.viewport_size(self.options.width, self.options.height)

    def _today(self) -> str:
        return datetime.fromtimestamp(self._clock()).strftime("%Y-%m-%d")

    def draw(self) -> None:
        """Render the list view and consume the one-shot status message."""
        state = self.state
        matches = self.current_matches()
        state.clamp_cursor(self.total_items())
        state.scroll_offset = adjust_scroll(
            state.list_cursor, state.scroll_offset, visible_body_rows(state.height)
        )
        context = RenderContext(
            width=state.width,
            height=state.height,
            matches=matches,
            input_buffer=state.input_buffer,
            input_cursor=state.input_cursor,
            today=self._today(),
            now=self._clock(),
            list_cursor=state.list_cursor,
            scroll_offset=state.scroll_offset,
            delete_mode=state.delete_mode,
            marked=list(state.marked_for_delete),
            status_message=state.status_message,
            theme=self.options.theme,
        )
        self.terminal.write(render_main_frame(context))
        state.status_message = ""

    def _dialog_context(self) -> DialogContext:
        return DialogContext(
            key_source=self.key_source,
            write=self.terminal.write,
            viewport=self.viewport,
            theme=self.options.theme,
        )

    # Session

    def run(self) -> SelectionResult:
        """Drive one session and return its outcome."""
        self._refresh_size()
        if self.options.render_once:
            self.draw()
            return Cancelled()
        if not self.options.scripted and not self.terminal.is_interactive():
            logger.error(NO_TTY_MESSAGE)
            return Cancelled(reason=NO_TTY_MESSAGE)

        live = not self.options.scripted
        try:
            with self.terminal.session(raw=live, alternate_screen=live):
                subscription = self.terminal.subscribe_resize(self._on_resize) if live else None
                try:
                    return self._loop()
                finally:
                    if subscription is not None:
                        subscription.unsubscribe()
        except TerminalUnavailableError as exc:
            logger.error("terminal unavailable: %s", exc)
            return Cancelled(reason=str(exc))

    def _loop(self) -> SelectionResult:
        while True:
            if self._needs_resize:
                self._needs_resize = False
                self._refresh_size()
                logger.debug("resized to %dx%d", self.state.width, self.state.height)
                self.terminal.clear_screen()
            self.draw()
            key = self.key_source.read_key()
            if not key:
                continue
            result = self.handle_key(key)
            if result is not None:
                return result

    def handle_key(self, key: str) -> SelectionResult | None:
        """Apply one key in browsing mode; return a result when the session ends."""
        if key in self._bindings:
            return self._bindings.dispatch(key)
        if key in self._line_edit:
            self._line_edit.dispatch(key)
            if key == keys.BACKSPACE:
                self.state.list_cursor = 0
            return None
        if is_printable_key(key):
            self.state.search.insert(key)
            self.state.list_cursor = 0
        return None

    # Actions

    def _move(self, delta: int) -> None:
        self.state.move_cursor(delta, self.total_items())

    def _select(self) -> SelectionResult | None:
        if self.state.delete_mode:
            return self._confirm_delete()
        entry = self._entry_under_cursor()
        if entry is not None:
            return Cd(path=entry.path)
        if self.state.input_buffer and self.state.list_cursor == len(self.current_matches()):
            return self._create_new()
        return None

    def _create_new(self) -> SelectionResult | None:
        name = sanitize_new_name(self.state.input_buffer)
        if not name:
            return None
        return Mkdir(path=os.path.join(self.base_path, f"{self._today()}-{name}"))

    def _toggle_mark(self) -> None:
        entry = self._entry_under_cursor()
        if entry is None:
            return
        self.state.toggle_mark(entry.path)

    def _escape(self) -> SelectionResult | None:
        if self.state.delete_mode:
            self.state.clear_marks()
            return None
        return Cancelled()

    def _confirm_delete(self) -> SelectionResult | None:
        by_path = {entry.path: entry for entry in self._matcher.entries} if self._matcher else {}
        targets = [by_path[path] for path in self.state.marked_for_delete if path in by_path]
        dialog = DeleteConfirmDialog(
            self.base_path,
            targets,
            self._dialog_context(),
            confirm_text=self.options.confirm_text,
        )
        try:
            result = dialog.run()
        except DeleteSafetyError as exc:
            logger.warning("%s", exc)
            self.state.status_message = str(exc)
            return None
        if result is None:
            self.state.status_message = "Delete cancelled"
            self.state.clear_marks()
            return None
        self.state.clear_marks()
        self.invalidate_candidates()
        return result

    def _rename(self) -> SelectionResult | None:
        entry = self._entry_under_cursor()
        if entry is None:
            return None
        self.state.clear_marks()
        return RenameDialog(self.base_path, entry, self._dialog_context()).run()
