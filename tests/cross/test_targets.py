"""
Unit tests for target identification.
"""

import pytest

from xbuildkit.core.exceptions import PathResolutionError
from xbuildkit.cross.targets import CompilationMode, is_target_spec, resolve_target


class TestResolveTarget:
    """Tests for resolve_target()."""

    def test_builtin_unchanged(self, tmp_path):
        assert resolve_target("thumbv7m-none-eabi", tmp_path) == "thumbv7m-none-eabi"

    def test_relative_json_canonicalized(self, tmp_path, write_file):
        target_file = write_file(tmp_path / "targets" / "custom.json", "{}\n")

        assert resolve_target("targets/custom.json", tmp_path) == str(target_file.resolve())

    def test_equivalent_paths_agree(self, tmp_path, write_file):
        """Test different relative spellings resolve to the same identifier."""
        write_file(tmp_path / "targets" / "custom.json", "{}\n")
        (tmp_path / "sub").mkdir()

        a = resolve_target("targets/custom.json", tmp_path)
        b = resolve_target("../targets/./custom.json", tmp_path / "sub")

        assert a == b

    def test_absolute_json(self, tmp_path, write_file):
        target_file = write_file(tmp_path / "custom.json", "{}\n")

        assert resolve_target(str(target_file), tmp_path / "elsewhere") == str(target_file.resolve())

    def test_defaults_to_cwd(self, tmp_path, write_file, monkeypatch):
        target_file = write_file(tmp_path / "custom.json", "{}\n")
        monkeypatch.chdir(tmp_path)

        assert resolve_target("custom.json") == str(target_file.resolve())

    def test_missing_json(self, tmp_path):
        with pytest.raises(PathResolutionError) as exc_info:
            resolve_target("missing.json", tmp_path)

        assert exc_info.value.path == tmp_path / "missing.json"
        assert exc_info.value.__cause__ is not None

    def test_directory_rejected(self, tmp_path):
        (tmp_path / "dir.json").mkdir()

        with pytest.raises(PathResolutionError):
            resolve_target("dir.json", tmp_path)

    def test_is_target_spec(self):
        assert is_target_spec("x.json")
        assert not is_target_spec("x86_64-unknown-linux-gnu")


class TestCompilationMode:
    """Tests for CompilationMode."""

    def test_cross(self):
        mode = CompilationMode.cross("thumbv7m-none-eabi")

        assert mode.triple == "thumbv7m-none-eabi"
        assert not mode.is_native

    def test_native(self):
        mode = CompilationMode.for_host("x86_64-unknown-linux-gnu")

        assert mode.is_native
        assert mode.triple == "x86_64-unknown-linux-gnu"

    def test_detect(self):
        host = "x86_64-unknown-linux-gnu"

        assert CompilationMode.detect(None, host).is_native
        assert CompilationMode.detect(host, host).is_native
        assert CompilationMode.detect("thumbv7m-none-eabi", host) == CompilationMode.cross(
            "thumbv7m-none-eabi"
        )

    def test_cross_resolves_target_file(self, tmp_path, write_file):
        """Test a relative description path is locked under its absolute path."""
        target_file = write_file(tmp_path / "targets" / "custom.json", "{}\n")

        mode = CompilationMode.cross("targets/custom.json", tmp_path)

        assert mode.triple == str(target_file.resolve())
        assert CompilationMode.cross(mode.triple) == mode

    def test_cross_missing_target_file(self, tmp_path):
        with pytest.raises(PathResolutionError):
            CompilationMode.cross("targets/missing.json", tmp_path)

    def test_detect_resolves_target_file(self, tmp_path, write_file):
        target_file = write_file(tmp_path / "custom.json", "{}\n")

        mode = CompilationMode.detect("custom.json", "x86_64-unknown-linux-gnu", tmp_path)

        assert not mode.is_native
        assert mode.triple == str(target_file.resolve())
