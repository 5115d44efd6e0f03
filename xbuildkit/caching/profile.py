"""
Release-profile cache-key contribution.

The ``[profile.release]`` table of the manifest influences how the sysroot
libraries are compiled, so it takes part in the sysroot cache key. ``lto``
only matters when linking the final binary, not when building ``.rlib``
files, and is left out.
"""

import copy
import datetime
from typing import Any, Mapping

import yaml

from xbuildkit.caching.flags import hash_token

IGNORED_PROFILE_KEYS = ("lto",)

TIME_TAG = "!time"


class CanonicalDumper(yaml.SafeDumper):
    """SafeDumper that also represents TOML local times."""


def _represent_time(dumper: yaml.SafeDumper, value: datetime.time) -> yaml.ScalarNode:
    return dumper.represent_scalar(TIME_TAG, value.isoformat())


CanonicalDumper.add_representer(datetime.time, _represent_time)


def canonical_text(value: Any) -> str:
    """
    Serialize a plain tree to text that does not depend on key insertion order.

    Keys are sorted at every nesting level. Dates and datetimes are written as
    YAML timestamps and local times carry a ``!time`` tag, so none of them
    collides with a string that reads the same.
    """
    return yaml.dump(
        value,
        Dumper=CanonicalDumper,
        sort_keys=True,
        default_flow_style=True,
        allow_unicode=True,
        width=float("inf"),
    )


class Profile:
    """
    The release profile subtree of a manifest.

    Args:
        table: ``profile.release`` as plain Python containers
    """

    def __init__(self, table: Mapping[str, Any]):
        self.table = table

    def hashed_subtree(self) -> Any:
        """Copy of the profile with ignored keys removed."""
        tree = copy.deepcopy(self.table)
        if isinstance(tree, dict):
            for key in IGNORED_PROFILE_KEYS:
                tree.pop(key, None)
        return tree

    def contribute_to_hash(self, hasher) -> None:
        """
        Fold the profile into a running hash.

        Nothing is hashed when only ignored keys were set, so a profile with
        just ``lto = true`` keys the same as no profile at all.
        """
        tree = self.hashed_subtree()
        if isinstance(tree, dict) and not tree:
            return
        hash_token(hasher, canonical_text(tree))

    def __str__(self) -> str:
        return canonical_text({"profile": {"release": self.table}})

    def __repr__(self) -> str:
        return f"Profile({self.table!r})"
