"""
Centralized exception hierarchy for xbuildkit.

Every failure the orchestration core can report is one of four kinds:
configuration-format, path-resolution, constraint-violation and
lock-acquisition errors. None of them is retried; they propagate to the
invoking layer with their underlying cause chained via ``raise ... from``.
"""

from pathlib import Path
from typing import List, Optional, Union


# ============================================================================
# Base Exceptions
# ============================================================================


class XBuildKitError(Exception):
    """Base exception for all xbuildkit errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigFormatError(XBuildKitError):
    """Raised when a configuration key exists but has the wrong shape."""

    def __init__(self, key: str, expected: str, source: Optional[str] = None):
        self.key = key
        self.expected = expected
        self.source = source
        prefix = f"{source}: " if source else ""
        super().__init__(f"{prefix}{key} must be {expected}")


# ============================================================================
# Path Exceptions
# ============================================================================


class PathResolutionError(XBuildKitError):
    """Raised when a referenced file does not exist or cannot be read."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{reason}: {path}")


# ============================================================================
# Constraint Exceptions
# ============================================================================


class ConstraintViolationError(XBuildKitError):
    """Raised when an input violates a constraint of the downstream toolchain."""

    pass


# ============================================================================
# Locking Exceptions
# ============================================================================


class LockAcquisitionError(XBuildKitError):
    """Raised when a sysroot lock cannot be acquired."""

    def __init__(self, triple: str, mode: str, path: Optional[Path] = None):
        self.triple = triple
        self.mode = mode
        self.path = path
        location = f" in {path}" if path is not None else ""
        super().__init__(f"couldn't lock {triple}'s sysroot{location} as {mode}")


def describe_error(error: BaseException) -> str:
    """
    Render an exception and its chained causes as human-readable lines.

    Args:
        error: Exception to describe

    Returns:
        ``error: <message>`` followed by one ``caused by: <message>`` line per
        chained cause.

    Example:
        >>> try:
        ...     raise LockAcquisitionError("thumbv7m-none-eabi", "read-only") from OSError("denied")
        ... except XBuildKitError as e:
        ...     print(describe_error(e))
        error: couldn't lock thumbv7m-none-eabi's sysroot as read-only
        caused by: denied
    """
    lines: List[str] = [f"error: {error}"]
    seen = {id(error)}
    cause = error.__cause__ or error.__context__
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        lines.append(f"caused by: {cause}")
        cause = cause.__cause__ or cause.__context__
    return "\n".join(lines)
