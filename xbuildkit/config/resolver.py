"""Flag resolution from layered configuration sources.

Flags for a tool category (``rustflags``) are taken from the first source
that provides them, in this order:

1. the environment variable named after the category (``RUSTFLAGS``),
   split on whitespace; when set, nothing else is consulted
2. ``target.<triple>.<category>`` in the project configuration
3. ``build.<category>`` in the project configuration
4. nothing: an empty list

A configuration entry that is present but not an array of strings is an
error. An absent entry is not.
"""

import logging
from typing import List, Mapping, Optional

from xbuildkit.caching.flags import FlagSet
from xbuildkit.config.parser import CargoConfig
from xbuildkit.config.values import as_string_list
from xbuildkit.core.environment import current_env

logger = logging.getLogger(__name__)

RUSTFLAGS_CATEGORY = "rustflags"


def resolve_flags(
    config: Optional[CargoConfig],
    target: str,
    category: str,
    env: Optional[Mapping[str, str]] = None,
) -> List[str]:
    """
    Resolve the flags for ``category``.

    Args:
        config: Project configuration, or None if the project has none
        target: Canonical target triple
        category: Tool category, e.g. ``"rustflags"``
        env: Environment to consult (default: process environment)

    Returns:
        Flag tokens in order

    Raises:
        ConfigFormatError: If the matched configuration entry is not an array
            of strings; the message names the target-scoped or build-wide key

    Example:
        >>> resolve_flags(None, 'thumbv7m-none-eabi', 'rustflags', {'RUSTFLAGS': '-C opt-level=s'})
        ['-C', 'opt-level=s']
    """
    variable = category.upper()
    override = current_env(env).get(variable)
    if override is not None:
        logger.debug(f"Using {category} from {variable}")
        return override.split()

    if config is None:
        return []

    for key in (("target", target, category), ("build", category)):
        value = config.get(key)
        if value is not None:
            logger.debug(f"Using {category} from {config.source}: {'.'.join(key)}")
            return as_string_list(value, key, config.source)

    return []


def rustflags(
    config: Optional[CargoConfig],
    target: str,
    env: Optional[Mapping[str, str]] = None,
) -> FlagSet:
    """Resolve the compiler flags for ``target``."""
    return FlagSet(resolve_flags(config, target, RUSTFLAGS_CATEGORY, env))
