"""
Cache-key computation for xbuildkit.

This package decides when a previously built sysroot is still valid: flag
and profile contributions to the key, and the recorded per-triple
fingerprint.
"""

from xbuildkit.caching.flags import FlagSet, is_linker_argument
from xbuildkit.caching.profile import Profile, canonical_text
from xbuildkit.caching.fingerprint import SysrootStamp, sysroot_fingerprint

__all__ = [
    "FlagSet",
    "is_linker_argument",
    "Profile",
    "canonical_text",
    "SysrootStamp",
    "sysroot_fingerprint",
]
