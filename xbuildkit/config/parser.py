"""TOML configuration sources for xbuildkit.

Two documents are read per invocation:

- the project configuration (``.cargo/config.toml`` or ``.cargo/config``),
  found by searching upwards from the current directory
- the manifest (``Cargo.toml``) at the project root, which carries the
  release profile and the ``[package.metadata.cargo-xbuild]`` settings
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from xbuildkit.caching.flags import hash_token
from xbuildkit.caching.profile import Profile
from xbuildkit.config.values import (
    ConfigScalar,
    ConfigTable,
    ConfigValue,
    as_string,
    lookup,
)
from xbuildkit.core.exceptions import ConfigFormatError
from xbuildkit.core.filesystem import load_toml, search_upwards
from xbuildkit.cross.targets import resolve_target

logger = logging.getLogger(__name__)

CONFIG_CANDIDATES = (".cargo/config.toml", ".cargo/config")
MANIFEST_NAME = "Cargo.toml"
SETTINGS_KEY = "package.metadata.cargo-xbuild"


@dataclass
class CargoConfig:
    """
    Parsed project configuration.

    Attributes:
        parent_path: Directory containing the ``.cargo`` directory
        table: Typed configuration tree
        source: Display name of the file, used in error messages
    """

    parent_path: Path
    table: ConfigValue
    source: str = ".cargo/config"

    def get(self, key) -> Optional[ConfigValue]:
        return lookup(self.table, key)

    def target(self) -> Optional[str]:
        """
        Get the default target from ``build.target``.

        Returns:
            Canonical target identifier, or None if not configured. A
            ``.json`` target is resolved relative to :attr:`parent_path`.

        Raises:
            ConfigFormatError: If ``build.target`` is not a string
            PathResolutionError: If a ``.json`` target does not exist
        """
        value = self.get("build.target")
        if value is None:
            return None
        target = as_string(value, "build.target", self.source)
        return resolve_target(target, self.parent_path)


def load_cargo_config(cwd: Optional[Path] = None) -> Optional[CargoConfig]:
    """
    Locate and parse the project configuration.

    Args:
        cwd: Directory to start searching from (default: current directory)

    Returns:
        Parsed configuration, or None if no configuration file exists

    Raises:
        PathResolutionError: If the file cannot be read or parsed
    """
    start = Path.cwd() if cwd is None else Path(cwd)
    path = search_upwards(start, *CONFIG_CANDIDATES)
    if path is None:
        logger.debug(f"No project configuration found above {start}")
        return None

    parent_path = path.parent.parent
    source = str(path.relative_to(parent_path))
    logger.debug(f"Loading project configuration from {path}")
    return CargoConfig(
        parent_path=parent_path,
        table=ConfigValue.from_raw(load_toml(path)),
        source=source,
    )


@dataclass
class XBuildSettings:
    """
    Tool settings from ``[package.metadata.cargo-xbuild]``.

    Attributes:
        sysroot_path: Sysroot location relative to the project root
        memcpy: Build the compiler builtins with the ``mem`` feature
        panic_immediate_abort: Build core with ``panic_immediate_abort``
    """

    sysroot_path: str = "target/sysroot"
    memcpy: bool = True
    panic_immediate_abort: bool = False

    @classmethod
    def from_table(cls, table: Optional[ConfigValue]) -> "XBuildSettings":
        settings = cls()
        if table is None:
            return settings
        if not isinstance(table, ConfigTable):
            raise ConfigFormatError(SETTINGS_KEY, "a table", MANIFEST_NAME)

        value = table.get("sysroot_path")
        if value is not None:
            settings.sysroot_path = as_string(
                value, f"{SETTINGS_KEY}.sysroot_path", MANIFEST_NAME
            )
        for name in ("memcpy", "panic_immediate_abort"):
            value = table.get(name)
            if value is None:
                continue
            if not (isinstance(value, ConfigScalar) and isinstance(value.value, bool)):
                raise ConfigFormatError(f"{SETTINGS_KEY}.{name}", "a boolean", MANIFEST_NAME)
            setattr(settings, name, value.value)
        return settings

    def contribute_to_hash(self, hasher) -> None:
        """Fold the settings that shape the built sysroot into a running hash."""
        hash_token(hasher, f"sysroot_path={self.sysroot_path}")
        hash_token(hasher, f"memcpy={str(self.memcpy).lower()}")
        hash_token(hasher, f"panic_immediate_abort={str(self.panic_immediate_abort).lower()}")


@dataclass
class Manifest:
    """
    Parsed project manifest.

    Attributes:
        root: Project root directory
        table: Typed manifest tree
    """

    root: Path
    table: ConfigValue

    def profile(self) -> Optional[Profile]:
        """``profile.release`` of the manifest, if present."""
        value = lookup(self.table, "profile.release")
        if value is None:
            return None
        return Profile(value.to_plain())

    def settings(self) -> XBuildSettings:
        return XBuildSettings.from_table(lookup(self.table, SETTINGS_KEY))


def load_manifest(root: Path) -> Manifest:
    """
    Parse ``Cargo.toml`` in ``root``.

    Raises:
        PathResolutionError: If the manifest is missing or not valid TOML
    """
    root = Path(root)
    return Manifest(root=root, table=ConfigValue.from_raw(load_toml(root / MANIFEST_NAME)))
