"""
Pytest configuration and shared fixtures for xbuildkit tests.
"""

import textwrap
from pathlib import Path

import pytest

from xbuildkit.core.environment import (
    ALLOW_SYSROOT_SPACES_VAR,
    CARGO_VAR,
    RUSTFLAGS_VAR,
    SYSROOT_PATH_VAR,
)
from xbuildkit.cross.sysroot import SysrootHome


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove xbuildkit-related variables inherited from the test runner."""
    for name in (RUSTFLAGS_VAR, SYSROOT_PATH_VAR, ALLOW_SYSROOT_SPACES_VAR, CARGO_VAR):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def write_file():
    """Write dedented text to a file, creating parent directories."""

    def _write(path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def crate_dir(tmp_path: Path, write_file) -> Path:
    """Create a minimal crate with a manifest and project configuration."""
    crate = tmp_path / "crate"
    write_file(
        crate / "Cargo.toml",
        """
        [package]
        name = "firmware"
        version = "0.1.0"

        [profile.release]
        opt-level = "s"
        lto = true
        """,
    )
    write_file(
        crate / ".cargo" / "config.toml",
        """
        [build]
        target = "thumbv7m-none-eabi"
        rustflags = ["-C", "link-arg=-Tlink.x"]
        """,
    )
    (crate / "src").mkdir()
    return crate


@pytest.fixture
def sysroot_home(tmp_path: Path) -> SysrootHome:
    """Sysroot rooted in a temporary directory."""
    return SysrootHome(tmp_path / "sysroot")
