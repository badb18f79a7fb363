"""Single-instance guard for the desktop host.

A second launch must focus the running window instead of starting another
backend. The first process holds an exclusive `flock` on the lock file and
writes its pid there; a later process fails the lock, reads that pid and
sends it `SIGUSR1`, which the owner maps to its focus callback.
"""

from __future__ import annotations

import fcntl
import logging
import os
import signal
import threading
from pathlib import Path
from typing import Callable, TextIO

logger = logging.getLogger(__name__)

FOCUS_SIGNAL = signal.SIGUSR1


class SingleInstance:
    def __init__(self, lock_path: Path, on_focus: Callable[[], None] | None = None) -> None:
        self.lock_path = lock_path
        self.on_focus = on_focus
        self.existing_pid: int | None = None
        self._lock_file: TextIO | None = None
        self._previous_handler = None

    @property
    def acquired(self) -> bool:
        return self._lock_file is not None

    def acquire(self) -> bool:
        """Take the lock. False means another instance owns it."""

        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock_file = open(self.lock_path, "a+", encoding="utf-8")
        try:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError:
            lock_file.seek(0)
            existing = lock_file.read().strip()
            lock_file.close()
            self.existing_pid = int(existing) if existing.isdigit() else None
            logger.info("another instance is running (pid %s)", existing or "unknown")
            return False

        lock_file.seek(0)
        lock_file.truncate()
        lock_file.write(str(os.getpid()))
        lock_file.flush()
        self._lock_file = lock_file
        self._install_focus_handler()
        return True

    def _install_focus_handler(self) -> None:
        if self.on_focus is None:
            return
        # signal.signal only works from the main thread.
        if threading.current_thread() is not threading.main_thread():
            logger.debug("not on the main thread; focus requests are ignored")
            return

        on_focus = self.on_focus

        def _handler(signum, frame) -> None:
            logger.debug("focus requested by a second instance")
            on_focus()

        self._previous_handler = signal.signal(FOCUS_SIGNAL, _handler)

    def notify_existing(self) -> bool:
        """Ask the owning instance to focus itself."""

        if self.existing_pid is None:
            return False
        try:
            os.kill(self.existing_pid, FOCUS_SIGNAL)
        except (ProcessLookupError, PermissionError) as exc:
            logger.warning("could not reach instance %s: %s", self.existing_pid, exc)
            return False
        return True

    def release(self) -> None:
        if self._lock_file is None:
            return
        if self._previous_handler is not None:
            signal.signal(FOCUS_SIGNAL, self._previous_handler)
            self._previous_handler = None
        # Never unlink: every instance must lock the same inode.
        try:
            self._lock_file.seek(0)
            self._lock_file.truncate()
            self._lock_file.flush()
        finally:
            fcntl.flock(self._lock_file.fileno(), fcntl.LOCK_UN)
            self._lock_file.close()
            self._lock_file = None

    def __enter__(self) -> "SingleInstance":
        self.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()
