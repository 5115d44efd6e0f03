"""
Sysroot cache validity.

A sysroot built for one set of inputs is reused as long as the inputs have
not changed. The inputs are summarized in a fingerprint (SHA-256 hex digest)
that is recorded next to the artifacts of each triple:

    <sysroot>/lib/rustlib/<triple>/.hash

This module only decides whether recorded artifacts are still valid; it never
stores or restores artifacts itself.
"""

import hashlib
import logging
from pathlib import Path
from typing import Optional

from xbuildkit.caching.flags import FlagSet, hash_token
from xbuildkit.caching.profile import Profile
from xbuildkit.core.locking import LockMode, SysrootLock
from xbuildkit.core.filesystem import atomic_write
from xbuildkit.cross.sysroot import SysrootHome

logger = logging.getLogger(__name__)

STAMP_NAME = ".hash"


def sysroot_fingerprint(
    flags: FlagSet,
    profile: Optional[Profile],
    target: str,
    toolchain_version: Optional[str] = None,
    settings=None,
) -> str:
    """
    Compute the fingerprint of the inputs a sysroot is built from.

    Args:
        flags: Resolved compiler flags (linker arguments do not count)
        profile: Release profile of the manifest, if any (``lto`` does not count)
        target: Canonical target triple, as returned by ``resolve_target``;
            a relative ``.json`` path is hashed as given
        toolchain_version: Version string of the compiler, if known
        settings: Tool settings (``XBuildSettings``), if any

    Returns:
        Hex digest
    """
    hasher = hashlib.sha256()
    hash_token(hasher, "flags")
    flags.contribute_to_hash(hasher)
    hash_token(hasher, "profile")
    if profile is not None:
        profile.contribute_to_hash(hasher)
    hash_token(hasher, "target")
    hash_token(hasher, target)
    if toolchain_version is not None:
        hash_token(hasher, "toolchain")
        hash_token(hasher, toolchain_version)
    if settings is not None:
        hash_token(hasher, "settings")
        settings.contribute_to_hash(hasher)
    return hasher.hexdigest()


class SysrootStamp:
    """
    Recorded fingerprint of the artifacts built for one triple.

    Args:
        home: Sysroot the artifacts live in
        triple: Canonical target triple
    """

    def __init__(self, home: SysrootHome, triple: str):
        self.home = home
        self.triple = triple

    @property
    def path(self) -> Path:
        return self.home.triple_dir(self.triple) / STAMP_NAME

    def read(self) -> Optional[str]:
        """Return the recorded fingerprint, or None if nothing was recorded."""
        try:
            return self.path.read_text(encoding="utf-8").strip() or None
        except FileNotFoundError:
            return None

    def is_fresh(self, fingerprint: str) -> bool:
        """Check whether the recorded artifacts were built from ``fingerprint``."""
        recorded = self.read()
        fresh = recorded == fingerprint
        logger.debug(
            f"Sysroot for {self.triple} is {'up to date' if fresh else 'stale'} "
            f"(recorded {recorded}, expected {fingerprint})"
        )
        return fresh

    def record(self, fingerprint: str, lock: SysrootLock) -> None:
        """
        Record the fingerprint of freshly built artifacts.

        Args:
            fingerprint: Fingerprint the artifacts were built from
            lock: Write lock on this triple, held by the caller

        Raises:
            ValueError: If ``lock`` is not a held write lock on this triple
        """
        if (
            not lock.held
            or lock.mode is not LockMode.WRITE
            or lock.path != self.home.sentinel(self.triple)
        ):
            raise ValueError(
                f"Recording the sysroot of {self.triple} requires holding its write lock"
            )
        atomic_write(self.path, fingerprint + "\n")
        logger.debug(f"Recorded sysroot fingerprint for {self.triple}: {fingerprint}")
