"""File watcher for the CS2 console log using polling.

The console log is only ever appended to while the game runs, but it is
truncated or recreated when the client restarts with -condebug. We poll the
file size every POLL_INTERVAL seconds and read the bytes between the last
consumed offset and the size seen by that poll.

Filesystem events (watchdog) are used only to wake the loop early: they get
coalesced or dropped on some platforms, so every wake still goes through the
size/offset comparison.
"""

from __future__ import annotations

import enum
import logging
import threading
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.25  # seconds


class Action(enum.Enum):
    """What a poll tick should do for a given file size."""

    RESET = "reset"  # file shrank: truncated or replaced
    SKIP = "skip"  # nothing new
    READ = "read"  # file grew


@dataclass
class CursorState:
    """Byte offset up to which the console log has been consumed."""

    offset: int = 0


def decide(state: CursorState, size: int) -> Action:
    """Pick the tick action from the consumed offset and the observed size."""
    if size < state.offset:
        return Action.RESET
    if size == state.offset:
        return Action.SKIP
    return Action.READ


def read_delta(file_path: Path, start: int, end: int) -> tuple[list[str], int]:
    """Read bytes [start, end) and split them into complete lines.

    Only bytes up to the last newline are consumed; a trailing line the game
    has not finished writing is left for the next tick.

    Returns:
        (lines, consumed) where consumed is the byte count to advance by.
    """
    with open(file_path, "rb") as f:
        f.seek(start)
        data = f.read(end - start)

    last_newline = data.rfind(b"\n")
    if last_newline == -1:
        return [], 0

    consumed = last_newline + 1
    text = data[:consumed].decode("utf-8", errors="replace")
    lines = [line.rstrip("\r") for line in text.split("\n")[:-1]]
    return lines, consumed


def poll_once(
    file_path: Path,
    state: CursorState,
    on_new_line: Callable[[str], None],
) -> int:
    """Run one poll tick against the file. Returns the number of lines delivered.

    I/O errors abandon the tick without moving the offset, so the same range
    is retried next time.
    """
    try:
        size = file_path.stat().st_size
    except OSError as e:
        logger.warning("Cannot stat console log: %s", e)
        return 0

    action = decide(state, size)
    if action is Action.SKIP:
        return 0

    if action is Action.RESET:
        logger.info(
            "Console log truncated or recreated (%d < %d), resetting position",
            size, state.offset,
        )
        state.offset = 0
        if size == 0:
            return 0

    try:
        lines, consumed = read_delta(file_path, state.offset, size)
    except OSError as e:
        logger.warning("Cannot read console log: %s", e)
        return 0

    logger.debug(
        "Read %d/%d bytes at offset %d (size %d)",
        consumed, size - state.offset, state.offset, size,
    )
    state.offset += consumed

    delivered = 0
    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue
        # offset already covers this line; a failing handler drops only it
        try:
            on_new_line(stripped)
        except Exception:
            logger.exception("Error handling line: %r", stripped[:120])
            continue
        delivered += 1
    return delivered


class _WakeHandler(FileSystemEventHandler):
    """Wakes the poll loop when the watched file changes."""

    def __init__(self, file_path: Path, wake: threading.Event) -> None:
        self._file_path = str(file_path)
        self._wake = wake

    def on_any_event(self, event: FileSystemEvent) -> None:
        paths = {str(event.src_path), str(getattr(event, "dest_path", "") or "")}
        if self._file_path in paths:
            self._wake.set()


class ConsoleLogWatcher:
    """Monitors console.log for new lines by polling file size.

    Usage:
        watcher = ConsoleLogWatcher(Path("console.log"), handle_line)
        watcher.start()
        watcher.run_forever()  # until stop() or Ctrl+C
    """

    def __init__(
        self,
        file_path: Path,
        on_new_line: Callable[[str], None],
        poll_interval: float = POLL_INTERVAL,
        use_file_events: bool = True,
    ) -> None:
        self._file_path = file_path.resolve()
        self._on_new_line = on_new_line
        self._poll_interval = poll_interval
        self._use_file_events = use_file_events
        self._state = CursorState()
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._observer: Observer | None = None

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def position(self) -> int:
        return self._state.offset

    def read_tail(self, max_lines: int = 50) -> list[str]:
        """Read last N lines from the file (diagnostics on startup)."""
        try:
            with open(self._file_path, encoding="utf-8", errors="replace") as f:
                tail = deque(f, maxlen=max_lines)
        except OSError:
            return []
        result = []
        for line in tail:
            stripped = line.strip()
            if stripped:
                result.append(stripped)
        return result

    def start(self) -> None:
        """Seek to the end of the log so only new lines are reported.

        Raises:
            OSError: the log file cannot be stat'ed.
        """
        self._state.offset = self._file_path.stat().st_size
        self._stop_event.clear()
        if self._use_file_events:
            self._start_observer()
        logger.info("Watching %s (offset %d)", self._file_path, self._state.offset)

    def poll(self) -> int:
        """Run a single tick. Returns the number of lines delivered."""
        return poll_once(self._file_path, self._state, self._on_new_line)

    def run_forever(self) -> None:
        """Poll in the calling thread until stop() is called."""
        while not self._stop_event.is_set():
            self.poll()
            self._wake_event.wait(self._poll_interval)
            self._wake_event.clear()

    def stop(self) -> None:
        """Stop polling."""
        self._stop_event.set()
        self._wake_event.set()
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None
        logger.info("Stopped watching")

    def _start_observer(self) -> None:
        observer = Observer()
        observer.schedule(
            _WakeHandler(self._file_path, self._wake_event),
            str(self._file_path.parent),
            recursive=False,
        )
        try:
            observer.start()
        except OSError as e:
            logger.warning("File events unavailable, polling only: %s", e)
            return
        self._observer = observer
