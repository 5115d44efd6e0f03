"""
Toolchain invocation for xbuildkit.

Drives the external ``cargo`` binary against the cross-compiled sysroot.
"""

from xbuildkit.toolchain.invoker import run, run_plain

__all__ = [
    "run",
    "run_plain",
]
