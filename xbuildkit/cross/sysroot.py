"""
Sysroot location and per-target locking.

The sysroot holds one directory of precompiled artifacts per target triple::

    <sysroot>/lib/rustlib/<triple>/

Builds running in separate processes may share a sysroot. Each triple
directory carries a ``.sentinel`` file that is locked shared while a build
reads the artifacts and exclusively while they are rebuilt.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional, Union

from xbuildkit.core.environment import SYSROOT_PATH_VAR, current_env
from xbuildkit.core.exceptions import LockAcquisitionError
from xbuildkit.core.locking import LockMode, SysrootLock

logger = logging.getLogger(__name__)

SENTINEL_NAME = ".sentinel"


class SysrootHome:
    """
    Root directory of a cross-compiled sysroot.

    Attributes:
        path: Sysroot root directory
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def display(self) -> str:
        return str(self.path)

    def triple_dir(self, triple: str) -> Path:
        """Directory holding the precompiled artifacts for ``triple``."""
        return self.path / "lib" / "rustlib" / triple

    def sentinel(self, triple: str) -> Path:
        return self.triple_dir(triple) / SENTINEL_NAME

    def lock_read(self, triple: str, timeout: float = -1, blocking: bool = True) -> SysrootLock:
        """
        Lock the sysroot of ``triple`` for reading.

        Any number of readers may hold the lock at the same time.

        Args:
            triple: Target triple (canonical form)
            timeout: Seconds to wait, ``-1`` to wait indefinitely
            blocking: If False, fail immediately when a writer holds the lock

        Returns:
            Handle holding the lock; use it as a context manager

        Raises:
            LockAcquisitionError: If the lock cannot be acquired

        Example:
            >>> home = SysrootHome('/work/crate/target/sysroot')
            >>> with home.lock_read('thumbv7m-none-eabi'):
            ...     run_build()
        """
        return self._lock(triple, LockMode.READ, timeout, blocking)

    def lock_write(self, triple: str, timeout: float = -1, blocking: bool = True) -> SysrootLock:
        """
        Lock the sysroot of ``triple`` for writing.

        Excludes every reader and every other writer of the same triple.

        Args:
            triple: Target triple (canonical form)
            timeout: Seconds to wait, ``-1`` to wait indefinitely
            blocking: If False, fail immediately when the lock is held

        Returns:
            Handle holding the lock; use it as a context manager

        Raises:
            LockAcquisitionError: If the lock cannot be acquired
        """
        return self._lock(triple, LockMode.WRITE, timeout, blocking)

    def _lock(self, triple: str, mode: LockMode, timeout: float, blocking: bool) -> SysrootLock:
        directory = self.triple_dir(triple)
        description = f"{triple}'s sysroot"
        try:
            directory.mkdir(parents=True, exist_ok=True)
            return SysrootLock.acquire(
                directory / SENTINEL_NAME,
                mode,
                description,
                timeout=timeout,
                blocking=blocking,
            )
        except Exception as e:
            logger.error(f"Could not lock {description} as {mode.value}: {e}")
            raise LockAcquisitionError(triple, mode.value, directory) from e

    def __repr__(self) -> str:
        return f"SysrootHome({self.display()!r})"


def resolve_home(
    root: Union[str, Path],
    settings,
    env: Optional[Mapping[str, str]] = None,
) -> SysrootHome:
    """
    Compute the sysroot location for a project.

    ``XBUILD_SYSROOT_PATH`` takes precedence; otherwise the sysroot lives at
    ``root / settings.sysroot_path``.

    Args:
        root: Project root directory
        settings: Tool settings exposing ``sysroot_path``
        env: Environment to consult (default: process environment)

    Returns:
        SysrootHome for the project
    """
    override = current_env(env).get(SYSROOT_PATH_VAR)
    if override is not None:
        logger.debug(f"Using sysroot from {SYSROOT_PATH_VAR}: {override}")
        return SysrootHome(Path(override))
    return SysrootHome(Path(root) / settings.sysroot_path)
