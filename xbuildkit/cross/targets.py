"""
Cross-compilation target identification.

A target triple is either a built-in name such as ``thumbv7em-none-eabihf``
or a path to a custom target description file ending in ``.json``. Custom
targets are canonicalized to an absolute path so that the same file reached
through different relative paths produces the same cache key and the same
sysroot directory.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from xbuildkit.core.exceptions import PathResolutionError

logger = logging.getLogger(__name__)

TARGET_SPEC_SUFFIX = ".json"


def is_target_spec(identifier: str) -> bool:
    """Check whether ``identifier`` names a target description file."""
    return identifier.endswith(TARGET_SPEC_SUFFIX)


def resolve_target(identifier: str, base_dir: Optional[Path] = None) -> str:
    """
    Resolve a target identifier to its canonical form.

    Args:
        identifier: Triple name or path to a ``.json`` target description
        base_dir: Directory relative description paths are resolved against
            (default: current directory)

    Returns:
        ``identifier`` unchanged for built-in triples, or the canonical
        absolute path of the description file

    Raises:
        PathResolutionError: If the description file does not exist or its
            path is not valid UTF-8

    Example:
        >>> resolve_target('thumbv7m-none-eabi')
        'thumbv7m-none-eabi'
        >>> resolve_target('targets/custom.json', Path('/work/crate'))
        '/work/crate/targets/custom.json'
    """
    if not is_target_spec(identifier):
        return identifier

    target_path = Path(identifier)
    if not target_path.is_absolute():
        target_path = (base_dir or Path.cwd()) / target_path

    try:
        canonical = target_path.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise PathResolutionError(target_path, "target JSON file does not exist") from e

    as_string = str(canonical)
    try:
        as_string.encode("utf-8")
    except UnicodeEncodeError as e:
        raise PathResolutionError(canonical, "target path not valid utf8") from e

    if not canonical.is_file():
        raise PathResolutionError(canonical, "target JSON file is not a regular file")

    logger.debug(f"Resolved target {identifier} to {as_string}")
    return as_string


@dataclass(frozen=True)
class CompilationMode:
    """
    Whether a build targets the host or cross-compiles.

    Attributes:
        triple: Target triple (canonical form)
        is_native: True when ``triple`` is the host triple
    """

    triple: str
    is_native: bool = False

    @classmethod
    def for_host(cls, host: str) -> "CompilationMode":
        return cls(triple=host, is_native=True)

    @classmethod
    def cross(cls, target: str, base_dir: Optional[Path] = None) -> "CompilationMode":
        """
        Cross-compilation mode for ``target``.

        A ``.json`` target is canonicalized with :func:`resolve_target`, so
        the sysroot is locked under the absolute path of the description file.

        Raises:
            PathResolutionError: If a ``.json`` target cannot be resolved
        """
        return cls(triple=resolve_target(target, base_dir), is_native=False)

    @classmethod
    def detect(
        cls, target: Optional[str], host: str, base_dir: Optional[Path] = None
    ) -> "CompilationMode":
        """Native mode when no target is given or it equals the host."""
        if target is None or target == host:
            return cls.for_host(host)
        return cls.cross(target, base_dir)
