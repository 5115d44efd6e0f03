"""Configuration module for xbuildkit.

This module provides the typed configuration tree, the project configuration
and manifest sources, and layered flag resolution.
"""

from xbuildkit.config.values import (
    ConfigValue,
    ConfigString,
    ConfigScalar,
    ConfigArray,
    ConfigTable,
    lookup,
    as_string,
    as_string_list,
)
from xbuildkit.config.parser import (
    CargoConfig,
    Manifest,
    XBuildSettings,
    load_cargo_config,
    load_manifest,
)
from xbuildkit.config.resolver import (
    resolve_flags,
    rustflags,
)

__all__ = [
    "ConfigValue",
    "ConfigString",
    "ConfigScalar",
    "ConfigArray",
    "ConfigTable",
    "lookup",
    "as_string",
    "as_string_list",
    "CargoConfig",
    "Manifest",
    "XBuildSettings",
    "load_cargo_config",
    "load_manifest",
    "resolve_flags",
    "rustflags",
]
