"""
Concurrent access control for xbuildkit sysroots.

Several xbuildkit processes may build against the same sysroot at once (two
projects sharing a sysroot, parallel CI jobs). Each target triple directory
is guarded by a shared/exclusive advisory lock on a sentinel file:

- any number of readers may hold the lock together
- a writer excludes every reader and every other writer
- locks on different triples never interact

Locks are backed by ``filelock.ReadWriteLock``. Ownership belongs to the
process, so the operating system drops the lock if the process dies without
releasing it.

Usage:
    from xbuildkit.core.locking import LockMode, SysrootLock

    with SysrootLock.acquire(sentinel, LockMode.READ, "thumbv7m-none-eabi's sysroot"):
        # read precompiled artifacts
        pass
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from filelock import ReadWriteLock, Timeout as LockTimeout

logger = logging.getLogger(__name__)


class LockMode(Enum):
    """Lock modes for a sysroot directory."""

    READ = "read-only"
    WRITE = "read-write"

    @property
    def shared(self) -> bool:
        return self is LockMode.READ


class SysrootLock:
    """
    Handle to a held sysroot lock.

    Instances are created already holding the lock (see :meth:`acquire`) and
    release it when the ``with`` block that owns them exits, whichever way it
    exits. :meth:`release` is idempotent.

    Attributes:
        path: Sentinel file the lock is taken on
        mode: Shared (READ) or exclusive (WRITE)
        description: Human-readable name of the guarded resource
    """

    def __init__(self, path: Path, mode: LockMode, description: str, lock: ReadWriteLock):
        self.path = path
        self.mode = mode
        self.description = description
        self._lock: Optional[ReadWriteLock] = lock

    @classmethod
    def acquire(
        cls,
        path: Path,
        mode: LockMode,
        description: str,
        timeout: float = -1,
        blocking: bool = True,
    ) -> "SysrootLock":
        """
        Acquire a lock on ``path`` and return the handle holding it.

        A contended blocking acquisition logs that it is waiting before it
        blocks.

        Args:
            path: Sentinel file (created if absent; its directory must exist)
            mode: Lock mode
            description: Human-readable resource name used in log messages
            timeout: Seconds to wait, ``-1`` to wait indefinitely
            blocking: If False, fail immediately when the lock is contended

        Returns:
            Handle holding the lock

        Raises:
            filelock.Timeout: If the lock is contended and not obtained in time
            OSError: If the sentinel cannot be created or opened
        """
        lock = ReadWriteLock(path, timeout=timeout, blocking=blocking, is_singleton=False)
        try:
            try:
                cls._take(lock, mode, blocking=False)
            except LockTimeout:
                if not blocking:
                    raise
                logger.info(f"Blocking waiting for file lock on {description}")
                cls._take(lock, mode, timeout=timeout, blocking=True)
        except BaseException:
            lock.close()
            raise

        logger.debug(f"Acquired {mode.value} lock on {description}: {path}")
        return cls(path, mode, description, lock)

    @staticmethod
    def _take(lock: ReadWriteLock, mode: LockMode, timeout: float = -1, blocking: bool = True):
        if mode.shared:
            lock.acquire_read(timeout, blocking=blocking)
        else:
            lock.acquire_write(timeout, blocking=blocking)

    @property
    def held(self) -> bool:
        return self._lock is not None

    def release(self) -> None:
        """Release the lock if it is still held."""
        if self._lock is None:
            return
        lock, self._lock = self._lock, None
        lock.close()
        logger.debug(f"Released {self.mode.value} lock on {self.description}: {self.path}")

    def __enter__(self) -> "SysrootLock":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "held" if self.held else "released"
        return f"SysrootLock({str(self.path)!r}, {self.mode.name}, {state})"


__all__ = [
    "LockMode",
    "SysrootLock",
    "LockTimeout",
]
