"""
Process environment variables consulted by xbuildkit.

All helpers take an optional ``env`` mapping so callers can pass an explicit
environment instead of reading ``os.environ``.
"""

import os
from typing import Mapping, Optional

# Overrides the sysroot location computed from the manifest settings
SYSROOT_PATH_VAR = "XBUILD_SYSROOT_PATH"

# Allows a sysroot path containing spaces (any value, including empty)
ALLOW_SYSROOT_SPACES_VAR = "XBUILD_ALLOW_SYSROOT_SPACES"

# Name or path of the external driver binary
CARGO_VAR = "CARGO"
DEFAULT_CARGO = "cargo"

# Environment variable the rendered flag string is passed through
RUSTFLAGS_VAR = "RUSTFLAGS"


def current_env(env: Optional[Mapping[str, str]] = None) -> Mapping[str, str]:
    """Return ``env`` if given, the process environment otherwise."""
    return os.environ if env is None else env


def env_flag_set(name: str, env: Optional[Mapping[str, str]] = None) -> bool:
    """
    Check whether a variable is present in the environment.

    Presence alone counts; an empty value still sets the flag.
    """
    return name in current_env(env)


def cargo_binary(env: Optional[Mapping[str, str]] = None) -> str:
    """Get the external driver binary, honouring ``CARGO``."""
    return current_env(env).get(CARGO_VAR) or DEFAULT_CARGO
