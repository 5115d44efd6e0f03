"""
Core functionality for xbuildkit.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    XBuildKitError,
    ConfigFormatError,
    PathResolutionError,
    ConstraintViolationError,
    LockAcquisitionError,
    describe_error,
)

from .locking import (
    LockMode,
    SysrootLock,
    LockTimeout,
)

from .filesystem import (
    search_upwards,
    load_toml,
    atomic_write,
)

__all__ = [
    "XBuildKitError",
    "ConfigFormatError",
    "PathResolutionError",
    "ConstraintViolationError",
    "LockAcquisitionError",
    "describe_error",
    "LockMode",
    "SysrootLock",
    "LockTimeout",
    "search_upwards",
    "load_toml",
    "atomic_write",
]
