"""Typed model for parsed configuration trees.

Configuration files are nested key-value documents whose leaves are strings,
arrays or other scalars. Instead of probing raw dictionaries, callers convert
the parsed document once with :meth:`ConfigValue.from_raw` and query it with
:func:`lookup`, then narrow the result with :func:`as_string` or
:func:`as_string_list`. A shape mismatch surfaces as
:class:`~xbuildkit.core.exceptions.ConfigFormatError`.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from xbuildkit.core.exceptions import ConfigFormatError

KeyPath = Union[str, Sequence[str]]


class ConfigValue:
    """Base class for configuration tree nodes."""


    @staticmethod
    def from_raw(raw: Any) -> "ConfigValue":
        """Convert a parsed TOML value into a typed tree."""
        if isinstance(raw, str):
            return ConfigString(raw)
        if isinstance(raw, dict):
            return ConfigTable({str(k): ConfigValue.from_raw(v) for k, v in raw.items()})
        if isinstance(raw, (list, tuple)):
            return ConfigArray(tuple(ConfigValue.from_raw(v) for v in raw))
        return ConfigScalar(raw)

    def to_plain(self) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class ConfigString(ConfigValue):
    value: str

    def to_plain(self) -> str:
        return self.value


@dataclass(frozen=True)
class ConfigScalar(ConfigValue):
    """Integer, float, boolean or datetime leaf."""

    value: Any

    def to_plain(self) -> Any:
        return self.value


@dataclass(frozen=True)
class ConfigArray(ConfigValue):
    items: Tuple[ConfigValue, ...] = ()

    def __iter__(self) -> Iterator[ConfigValue]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def to_plain(self) -> List[Any]:
        return [item.to_plain() for item in self.items]


@dataclass(frozen=True)
class ConfigTable(ConfigValue):
    entries: Dict[str, ConfigValue] = field(default_factory=dict)

    def get(self, key: str) -> Optional[ConfigValue]:
        return self.entries.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def to_plain(self) -> Dict[str, Any]:
        return {key: value.to_plain() for key, value in self.entries.items()}


def split_key(path: KeyPath) -> Tuple[str, ...]:
    """Split a dotted key path, or pass a segment sequence through."""
    if isinstance(path, str):
        return tuple(path.split("."))
    return tuple(path)


def join_key(path: KeyPath) -> str:
    return path if isinstance(path, str) else ".".join(path)


def lookup(tree: Optional[ConfigValue], path: KeyPath) -> Optional[ConfigValue]:
    """
    Look up a nested value.

    Segments may be given as a dotted string (``"build.rustflags"``) or as a
    sequence, which is required when a segment itself contains dots (for
    example a target description file path).

    Args:
        tree: Root of the tree
        path: Key path

    Returns:
        The value, or None if any segment is absent or a non-table value is
        met before the last segment
    """
    node = tree
    for segment in split_key(path):
        if not isinstance(node, ConfigTable):
            return None
        node = node.get(segment)
        if node is None:
            return None
    return node


def as_string(value: ConfigValue, key: KeyPath, source: Optional[str] = None) -> str:
    """Narrow ``value`` to a string or raise ConfigFormatError naming ``key``."""
    if isinstance(value, ConfigString):
        return value.value
    raise ConfigFormatError(join_key(key), "a string", source)


def as_string_list(value: ConfigValue, key: KeyPath, source: Optional[str] = None) -> List[str]:
    """Narrow ``value`` to a list of strings or raise ConfigFormatError naming ``key``."""
    if isinstance(value, ConfigArray) and all(isinstance(item, ConfigString) for item in value):
        return [item.value for item in value]
    raise ConfigFormatError(join_key(key), "an array of strings", source)
