"""
Filesystem helpers for xbuildkit.

Provides upward directory search used to locate project configuration and
TOML loading with errors mapped onto the xbuildkit exception hierarchy.
"""

import logging
import tempfile
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

from xbuildkit.core.exceptions import PathResolutionError

logger = logging.getLogger(__name__)


def search_upwards(start: Path, *candidates: Union[str, Path]) -> Optional[Path]:
    """
    Find the nearest file matching one of ``candidates``.

    The search starts at ``start`` itself and walks up through its parents
    until the filesystem root. Within one directory, earlier candidates win.

    Args:
        start: Directory to start searching from
        *candidates: Relative file paths to look for in each directory

    Returns:
        Path of the first file found, or None if no ancestor has one

    Example:
        >>> search_upwards(Path('/work/crate/src'), '.cargo/config.toml', '.cargo/config')
        PosixPath('/work/crate/.cargo/config.toml')
    """
    start = Path(start)
    for directory in (start, *start.parents):
        for relative in candidates:
            path = directory / relative
            if path.is_file():
                logger.debug(f"Found {relative} in {directory}")
                return path
    return None


def load_toml(path: Path) -> Dict[str, Any]:
    """
    Parse a TOML file into a plain dictionary.

    Args:
        path: File to parse

    Returns:
        Parsed document

    Raises:
        PathResolutionError: If the file is missing, not UTF-8 or not valid TOML
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise PathResolutionError(path, "file does not exist") from e
    except UnicodeDecodeError as e:
        raise PathResolutionError(path, "file is not valid UTF-8") from e
    except tomllib.TOMLDecodeError as e:
        raise PathResolutionError(path, f"couldn't parse TOML ({e})") from e
    except OSError as e:
        raise PathResolutionError(path, f"couldn't read file ({e})") from e


def atomic_write(file_path: Union[str, Path], content: str, encoding: str = "utf-8") -> None:
    """
    Write a text file atomically using temp file + rename.

    Readers never observe a partially-written file. If the write fails, the
    original file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Text to write
        encoding: Text encoding
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Same directory keeps the rename on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        with open(temp_fd, "w", encoding=encoding) as f:
            f.write(content)
        temp_path.replace(file_path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
