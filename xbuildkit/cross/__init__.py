"""
Cross-compilation support for xbuildkit.

This package identifies compilation targets and manages the on-disk sysroot
shared by concurrent builds.
"""

from xbuildkit.cross.targets import CompilationMode, resolve_target, is_target_spec
from xbuildkit.cross.sysroot import SysrootHome, resolve_home

__all__ = [
    "CompilationMode",
    "resolve_target",
    "is_target_spec",
    "SysrootHome",
    "resolve_home",
]
