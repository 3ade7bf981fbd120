"""Cross-process exclusion for controller invocations."""

from __future__ import annotations

import fcntl
import logging
import os
from pathlib import Path
from types import TracebackType

from btspoof.core.errors import ConcurrentOperationError, PermissionDeniedError

LOGGER = logging.getLogger(__name__)


class InstallLock:
    """Exclusive, non-blocking ``flock`` on a fixed path.

    The kernel drops the lock when the descriptor is closed, which includes
    the process dying, so no cleanup step is needed for correctness.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._fd: int | None = None

    @property
    def held(self) -> bool:
        return self._fd is not None

    def acquire(self) -> None:
        if self._fd is not None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_RDONLY | os.O_CREAT | os.O_CLOEXEC, 0o644)
        except PermissionError as exc:
            raise PermissionDeniedError(f"Cannot open lock file {self.path}: run as root (sudo)") from exc
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError as exc:
            os.close(fd)
            raise ConcurrentOperationError(
                f"Another bt-mac-spoof operation is running (lock {self.path} is held)"
            ) from exc
        except OSError:
            os.close(fd)
            raise
        LOGGER.debug("acquired lock %s", self.path)
        self._fd = fd

    def release(self) -> None:
        if self._fd is None:
            return
        os.close(self._fd)
        self._fd = None
        LOGGER.debug("released lock %s", self.path)

    def __enter__(self) -> InstallLock:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
