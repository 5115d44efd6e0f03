"""
Compiler flag sets and their cache-key contribution.

A :class:`FlagSet` is the ordered list of tokens resolved for a tool category
(for example ``RUSTFLAGS``). It feeds two consumers:

- the sysroot cache key, through :meth:`FlagSet.contribute_to_hash`
- the driver invocation, through :meth:`FlagSet.render_for_invocation`

Linker arguments (``-C link-arg=...`` / ``-C link-args=...``) are left out of
the cache key: they change with the machine and build directory but do not
affect the precompiled sysroot libraries. They are still passed to the
driver.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Union

from xbuildkit.core.environment import ALLOW_SYSROOT_SPACES_VAR, env_flag_set
from xbuildkit.core.exceptions import ConstraintViolationError

logger = logging.getLogger(__name__)

CODEGEN_MARKER = "-C"
LINKER_ARG_PREFIXES = ("link-arg=", "link-args=")

# Terminates every token fed to a hasher so adjacent tokens cannot merge
TOKEN_TERMINATOR = b"\xff"

SPACES_ISSUE_URL = "https://github.com/rust-lang/cargo/issues/6139"


def is_linker_argument(token: str) -> bool:
    return token.startswith(LINKER_ARG_PREFIXES)


def hash_token(hasher, token: str) -> None:
    """Feed one token to ``hasher`` (any object with ``update(bytes)``)."""
    hasher.update(token.encode("utf-8"))
    hasher.update(TOKEN_TERMINATOR)


class FlagSet:
    """
    Ordered collection of compiler flags.

    Args:
        flags: Flag tokens in command-line order
    """

    def __init__(self, flags: Optional[Iterable[str]] = None):
        self.flags: List[str] = list(flags or [])

    def contribute_to_hash(self, hasher) -> None:
        """
        Fold the flags into a running hash.

        ``-C`` and its argument are hashed as a unit. A pair whose argument is
        a linker argument is skipped entirely; a trailing ``-C`` without an
        argument is hashed on its own.

        Args:
            hasher: Hash object exposing ``update(bytes)`` (e.g. ``hashlib.sha256()``)

        Example:
            >>> import hashlib
            >>> a, b = hashlib.sha256(), hashlib.sha256()
            >>> FlagSet(['-C', 'link-arg=/tmp/x', '-O']).contribute_to_hash(a)
            >>> FlagSet(['-C', 'link-arg=/opt/y', '-O']).contribute_to_hash(b)
            >>> a.digest() == b.digest()
            True
        """
        flags = self.flags
        i = 0
        while i < len(flags):
            flag = flags[i]
            if flag == CODEGEN_MARKER and i + 1 < len(flags):
                value = flags[i + 1]
                if not is_linker_argument(value):
                    hash_token(hasher, flag)
                    hash_token(hasher, value)
                i += 2
                continue
            hash_token(hasher, flag)
            i += 1

    def render_for_invocation(
        self,
        sysroot_path: Union[str, Path],
        env: Optional[Mapping[str, str]] = None,
    ) -> str:
        """
        Stringify the flags for the driver, pointing it at the sysroot.

        Args:
            sysroot_path: Sysroot root directory, appended verbatim
            env: Environment to consult (default: process environment)

        Returns:
            Flags followed by ``--sysroot <path>``, joined by single spaces

        Raises:
            ConstraintViolationError: If the path contains a space and
                ``XBUILD_ALLOW_SYSROOT_SPACES`` is not set
        """
        sysroot = str(sysroot_path)
        if " " in sysroot and not env_flag_set(ALLOW_SYSROOT_SPACES_VAR, env):
            raise ConstraintViolationError(
                "Sysroot must not contain spaces!\n"
                f"See issue {SPACES_ISSUE_URL}\n\n"
                f"The sysroot is `{sysroot}`.\n\n"
                "To override this error, you can set the "
                f"`{ALLOW_SYSROOT_SPACES_VAR}` environment variable."
            )
        return " ".join([*self.flags, "--sysroot", sysroot])

    def __iter__(self):
        return iter(self.flags)

    def __len__(self) -> int:
        return len(self.flags)

    def __eq__(self, other) -> bool:
        if not isinstance(other, FlagSet):
            return NotImplemented
        return self.flags == other.flags

    def __str__(self) -> str:
        return " ".join(self.flags)

    def __repr__(self) -> str:
        return f"FlagSet({self.flags!r})"
