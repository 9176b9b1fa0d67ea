"""Terminal control helpers for the selector session.

Owns raw-mode lifecycle, alternate-screen switching, size queries, and resize
notification. Resize notification is a subscription object; platforms without
``SIGWINCH`` get a no-op subscription with the same interface.
"""

from __future__ import annotations

import contextlib
import logging
import os
import select
import shutil
import signal
import termios
import threading
import tty
from collections.abc import Callable

from .errors import TerminalUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_SIZE = (80, 24)
WIDTH_ENV = "TRY_WIDTH"
HEIGHT_ENV = "TRY_HEIGHT"
READ_CHUNK_BYTES = 32

ALT_SCREEN_ON = "\x1b[?1049h\x1b[2J\x1b[H\x1b[1 q"
ALT_SCREEN_OFF = "\x1b[0m\x1b[0 q\x1b[?1049l"
CLEAR_SCREEN = "\x1b[2J\x1b[H"


class ResizeSubscription:
    """No-op resize subscription used where resize signals are unavailable."""

    wake_fd: int | None = None

    def unsubscribe(self) -> None:
        return None

    def drain(self) -> None:
        return None


class SignalResizeSubscription(ResizeSubscription):
    """``SIGWINCH`` subscription that also wakes a blocking ``select``.

    The handler runs ``callback`` and writes one byte into a self-pipe whose
    read end is exposed as ``wake_fd``.
    """

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._read_fd, self._write_fd = os.pipe()
        os.set_blocking(self._read_fd, False)
        os.set_blocking(self._write_fd, False)
        self.wake_fd = self._read_fd
        self._previous_handler = signal.signal(signal.SIGWINCH, self._handle)

    def _handle(self, _signum: int, _frame: object) -> None:
        self._callback()
        try:
            os.write(self._write_fd, b"\0")
        except BlockingIOError:
            pass

    def drain(self) -> None:
        try:
            while os.read(self._read_fd, 64):
                pass
        except BlockingIOError:
            pass

    def unsubscribe(self) -> None:
        if self.wake_fd is None:
            return
        signal.signal(signal.SIGWINCH, self._previous_handler or signal.SIG_DFL)
        os.close(self._read_fd)
        os.close(self._write_fd)
        self.wake_fd = None


def _parse_dimension(value: str | None) -> int | None:
    if not value:
        return None
    try:
        parsed = int(value.strip())
    except ValueError:
        return None
    return parsed if parsed > 0 else None


class TerminalController:
    """Manage terminal mode transitions, size queries and raw input."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Bind stdin and output file descriptors; tty state is captured lazily."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state: list | None = None
        self._alternate_screen = False
        self._subscription: ResizeSubscription | None = None

    def is_interactive(self) -> bool:
        """Return whether both input and output are attached to a TTY."""
        return os.isatty(self.stdin_fd) and os.isatty(self.stdout_fd)

    def viewport_size(self, width: int | None = None, height: int | None = None) -> tuple[int, int]:
        """Return ``(columns, rows)``.

        Explicit overrides win, then ``TRY_WIDTH``/``TRY_HEIGHT``, then the real
        terminal size, then 80x24.
        """
        width = width or _parse_dimension(os.environ.get(WIDTH_ENV))
        height = height or _parse_dimension(os.environ.get(HEIGHT_ENV))
        if width is None or height is None:
            try:
                size = os.get_terminal_size(self.stdout_fd)
                columns, lines = size.columns, size.lines
            except OSError:
                columns, lines = shutil.get_terminal_size(DEFAULT_SIZE)
            width = width or (columns if columns > 0 else DEFAULT_SIZE[0])
            height = height or (lines if lines > 0 else DEFAULT_SIZE[1])
        return width, height

    def write(self, text: str) -> None:
        data = text.encode("utf-8", errors="replace")
        while data:
            written = os.write(self.stdout_fd, data)
            data = data[written:]

    def enable_raw_mode(self) -> None:
        try:
            self._saved_tty_state = termios.tcgetattr(self.stdin_fd)
            tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        except (termios.error, OSError) as exc:
            self._saved_tty_state = None
            raise TerminalUnavailableError(f"cannot enter raw mode: {exc}") from exc
        logger.debug("raw mode enabled on fd %d", self.stdin_fd)

    def disable_raw_mode(self) -> None:
        if self._saved_tty_state is None:
            return
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        finally:
            self._saved_tty_state = None
        logger.debug("raw mode disabled on fd %d", self.stdin_fd)

    def enter_alternate_screen(self) -> None:
        # Enter alternate screen, clear it, home the cursor and set a blinking cursor.
        self.write(ALT_SCREEN_ON)
        self._alternate_screen = True

    def exit_alternate_screen(self) -> None:
        if not self._alternate_screen:
            return
        self.write(ALT_SCREEN_OFF)
        self._alternate_screen = False

    def clear_screen(self) -> None:
        self.write(CLEAR_SCREEN)

    def subscribe_resize(self, callback: Callable[[], None]) -> ResizeSubscription:
        """Register ``callback`` for terminal resize events.

        Signal handlers can only be installed from the main thread; elsewhere
        the returned subscription never fires.
        """
        if hasattr(signal, "SIGWINCH") and threading.current_thread() is threading.main_thread():
            subscription: ResizeSubscription = SignalResizeSubscription(callback)
        else:
            subscription = ResizeSubscription()
        self._subscription = subscription
        return subscription

    def read_chunk(self) -> bytes:
        """Block until input arrives and return up to ``READ_CHUNK_BYTES`` bytes.

        Returns ``b""`` when a resize notification interrupts the wait and
        raises ``EOFError`` when the input side is closed.
        """
        watched = [self.stdin_fd]
        wake_fd = self._subscription.wake_fd if self._subscription is not None else None
        if wake_fd is not None:
            watched.append(wake_fd)
        ready, _, _ = select.select(watched, [], [])
        if wake_fd is not None and wake_fd in ready:
            self._subscription.drain()
            return b""
        data = os.read(self.stdin_fd, READ_CHUNK_BYTES)
        if not data:
            raise EOFError("terminal input closed")
        return data

    @contextlib.contextmanager
    def session(self, *, raw: bool = True, alternate_screen: bool = True):
        """Context manager bracketing an interactive session.

        Whatever was entered is restored on every exit path.
        """
        try:
            if alternate_screen:
                self.enter_alternate_screen()
            if raw:
                self.enable_raw_mode()
            yield self
        finally:
            try:
                self.disable_raw_mode()
            finally:
                self.exit_alternate_screen()
