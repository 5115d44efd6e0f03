"""
Unit tests for release-profile hashing.
"""

import datetime
import hashlib
import tomllib

from xbuildkit.caching.profile import Profile, canonical_text
from xbuildkit.config.parser import Manifest
from xbuildkit.config.values import ConfigValue


def digest(table):
    hasher = hashlib.sha256()
    Profile(table).contribute_to_hash(hasher)
    return hasher.hexdigest()


EMPTY_DIGEST = hashlib.sha256().hexdigest()


class TestContributeToHash:
    """Tests for Profile.contribute_to_hash()."""

    def test_lto_ignored(self):
        assert digest({"opt-level": 3, "lto": True}) == digest({"opt-level": 3, "lto": "fat"})
        assert digest({"opt-level": 3, "lto": True}) == digest({"opt-level": 3})

    def test_only_lto_contributes_nothing(self):
        """Test a profile with only lto does not touch the hash."""
        assert digest({"lto": True}) == EMPTY_DIGEST

    def test_empty_contributes_nothing(self):
        assert digest({}) == EMPTY_DIGEST

    def test_remaining_keys_contribute(self):
        assert digest({"opt-level": 3, "lto": True}) != EMPTY_DIGEST

    def test_relevant_change_detected(self):
        assert digest({"opt-level": 3}) != digest({"opt-level": "s"})

    def test_key_order_irrelevant(self):
        a = {"opt-level": 3, "debug": True, "overrides": {"b": {"x": 1}, "a": {"y": 2}}}
        b = {"overrides": {"a": {"y": 2}, "b": {"x": 1}}, "debug": True, "opt-level": 3}

        assert digest(a) == digest(b)

    def test_nested_lto_kept(self):
        """Test only the top-level lto key is dropped."""
        assert digest({"package": {"foo": {"lto": True}}}) != digest({"package": {"foo": {}}})

    def test_original_table_untouched(self):
        table = {"lto": True, "opt-level": 2}

        digest(table)

        assert table == {"lto": True, "opt-level": 2}


class TestTomlDatetimes:
    """Tests for profiles holding TOML date and time values."""

    def manifest_profile(self, tmp_path, body):
        table = ConfigValue.from_raw(tomllib.loads("[profile.release]\n" + body))
        return Manifest(tmp_path, table).profile()

    def test_local_time(self, tmp_path):
        profile = self.manifest_profile(tmp_path, "opt-level = 3\nstamp = 07:32:00\n")
        hasher = hashlib.sha256()

        profile.contribute_to_hash(hasher)

        assert hasher.hexdigest() != EMPTY_DIGEST

    def test_local_date(self, tmp_path):
        profile = self.manifest_profile(tmp_path, "stamp = 1979-05-27\n")
        hasher = hashlib.sha256()

        profile.contribute_to_hash(hasher)

        assert hasher.hexdigest() != EMPTY_DIGEST

    def test_offset_datetime(self, tmp_path):
        profile = self.manifest_profile(tmp_path, "stamp = 1979-05-27T07:32:00-08:00\n")
        hasher = hashlib.sha256()

        profile.contribute_to_hash(hasher)

        assert hasher.hexdigest() != EMPTY_DIGEST

    def test_time_change_detected(self):
        assert digest({"stamp": datetime.time(7, 32)}) != digest({"stamp": datetime.time(7, 33)})

    def test_time_differs_from_string(self):
        assert digest({"stamp": datetime.time(7, 32)}) != digest({"stamp": "07:32:00"})

    def test_date_differs_from_string(self):
        assert digest({"stamp": datetime.date(1979, 5, 27)}) != digest({"stamp": "1979-05-27"})


class TestCanonicalText:
    def test_sorted_keys(self):
        assert canonical_text({"b": 1, "a": {"d": 2, "c": 3}}) == canonical_text(
            {"a": {"c": 3, "d": 2}, "b": 1}
        )

    def test_single_line(self):
        assert canonical_text({"a": [1, 2], "b": "x y"}).count("\n") == 1


class TestDisplay:
    def test_str_names_section(self):
        text = str(Profile({"opt-level": 3}))

        assert "profile" in text
        assert "release" in text
        assert "opt-level" in text
