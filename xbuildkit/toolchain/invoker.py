"""
External driver invocation.

Runs ``cargo`` (or the binary named by ``CARGO``) with the resolved flags and
the cross-compiled sysroot injected through ``RUSTFLAGS``. While the driver
runs, the sysroots of the host and of the compilation target are locked for
reading so a concurrent rebuild cannot replace artifacts underneath it.

The driver's exit status is returned as-is; interpreting a nonzero status is
up to the caller.
"""

import logging
import subprocess
from contextlib import ExitStack
from typing import Dict, List, Mapping, Optional, Sequence

from xbuildkit.caching.flags import FlagSet
from xbuildkit.core.environment import RUSTFLAGS_VAR, cargo_binary, current_env
from xbuildkit.core.exceptions import PathResolutionError
from xbuildkit.cross.sysroot import SysrootHome
from xbuildkit.cross.targets import CompilationMode

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "build"


def run(
    args: Sequence[str],
    compilation_mode: CompilationMode,
    flags: FlagSet,
    home: SysrootHome,
    host_triple: str,
    command_name: str = DEFAULT_COMMAND,
    env: Optional[Mapping[str, str]] = None,
    lock_timeout: float = -1,
) -> int:
    """
    Run the driver against the cross-compiled sysroot.

    Args:
        args: Arguments passed through to the driver subcommand
        compilation_mode: Target of the build
        flags: Resolved compiler flags
        home: Sysroot to inject
        host_triple: Triple of the machine running the build
        command_name: Driver subcommand (``build``, ``check``, ...)
        env: Base environment for the driver (default: process environment)
        lock_timeout: Seconds to wait for each sysroot lock, ``-1`` to wait
            indefinitely

    Returns:
        Raw exit status of the driver

    Raises:
        ConstraintViolationError: If the sysroot path contains a space and
            spaces are not allowed
        LockAcquisitionError: If a sysroot lock cannot be acquired
        PathResolutionError: If the driver binary cannot be found

    Example:
        >>> status = run(['--release'], CompilationMode.cross('thumbv7m-none-eabi'),
        ...              FlagSet(['-C', 'opt-level=s']), home, 'x86_64-unknown-linux-gnu')
    """
    environment: Dict[str, str] = dict(current_env(env))
    rendered = flags.render_for_invocation(home.display(), environment)
    logger.info(f'+ {RUSTFLAGS_VAR}="{rendered}"')
    environment[RUSTFLAGS_VAR] = rendered

    command = [cargo_binary(environment), command_name, *args]

    with ExitStack() as locks:
        locks.enter_context(home.lock_read(host_triple, timeout=lock_timeout))
        locks.enter_context(home.lock_read(compilation_mode.triple, timeout=lock_timeout))
        return _spawn(command, environment)


def run_plain(args: Sequence[str], env: Optional[Mapping[str, str]] = None) -> int:
    """
    Run ``cargo build`` without sysroot injection or locking.

    Used when the target is supported by the installed toolchain and no
    custom sysroot is needed.
    """
    environment = dict(current_env(env))
    return _spawn([cargo_binary(environment), DEFAULT_COMMAND, *args], environment)


def _spawn(command: List[str], environment: Dict[str, str]) -> int:
    """Run ``command`` with inherited stdio and wait for it to exit."""
    logger.info(f"+ {' '.join(command)}")
    try:
        result = subprocess.run(command, env=environment)
    except FileNotFoundError as e:
        raise PathResolutionError(command[0], "driver binary not found") from e

    logger.debug(f"{command[0]} exited with status {result.returncode}")
    return result.returncode
