"""
Tests for crossrs_toolchain.core.environment module.
"""

import pytest

from crossrs_toolchain.core.environment import (
    EnvironmentSnapshot,
    WATCHED_VARIABLES,
)


class TestFromEnviron:
    """Tests for EnvironmentSnapshot.from_environ."""

    def test_reads_all_variables(self):
        """Test that every variable is captured."""
        snapshot = EnvironmentSnapshot.from_environ(
            {
                "TARGET": "aarch64-unknown-linux-gnu",
                "CROSS_TOOLCHAIN_PREFIX": "aarch64-linux-gnu-",
                "CROSS_TOOLCHAIN_SUFFIX": "-12",
                "CROSS_SYSROOT": "/usr/aarch64-linux-gnu",
                "PATH": "/usr/bin",
            }
        )

        assert snapshot.target == "aarch64-unknown-linux-gnu"
        assert snapshot.prefix == "aarch64-linux-gnu-"
        assert snapshot.suffix == "-12"
        assert snapshot.sysroot == "/usr/aarch64-linux-gnu"
        assert snapshot.path == "/usr/bin"

    def test_unset_is_none(self):
        """Test that unset TARGET and prefix stay None."""
        snapshot = EnvironmentSnapshot.from_environ({})

        assert snapshot.target is None
        assert snapshot.prefix is None
        assert snapshot.suffix == ""
        assert snapshot.path == ""

    def test_empty_prefix_is_kept(self):
        """Test that an empty prefix is distinct from an unset one."""
        snapshot = EnvironmentSnapshot.from_environ(
            {"TARGET": "x86_64-unknown-linux-gnu", "CROSS_TOOLCHAIN_PREFIX": ""}
        )

        assert snapshot.prefix == ""

    def test_defaults_to_os_environ(self, monkeypatch):
        """Test reading the process environment."""
        monkeypatch.setenv("TARGET", "armv7-linux-androideabi")
        monkeypatch.delenv("CROSS_TOOLCHAIN_PREFIX", raising=False)

        snapshot = EnvironmentSnapshot.from_environ()

        assert snapshot.target == "armv7-linux-androideabi"
        assert snapshot.prefix is None


class TestActivation:
    """Tests for EnvironmentSnapshot.is_active."""

    @pytest.mark.parametrize(
        "target,prefix,active",
        [
            (None, None, False),
            ("x86_64-unknown-linux-gnu", None, False),
            (None, "aarch64-linux-gnu-", False),
            ("x86_64-unknown-linux-gnu", "", True),
            ("aarch64-unknown-linux-gnu", "aarch64-linux-gnu-", True),
        ],
    )
    def test_requires_target_and_prefix(self, target, prefix, active):
        """Test that both variables must be present."""
        snapshot = EnvironmentSnapshot(target=target, prefix=prefix)
        assert snapshot.is_active is active


class TestFingerprint:
    """Tests for EnvironmentSnapshot.fingerprint."""

    def test_stable(self):
        """Test that equal snapshots hash equally."""
        a = EnvironmentSnapshot(target="x-y", prefix="", path="/bin")
        b = EnvironmentSnapshot(target="x-y", prefix="", path="/bin")

        assert a.fingerprint() == b.fingerprint()
        assert len(a.fingerprint()) == 64

    def test_unset_differs_from_empty(self):
        """Test that unset and empty prefixes hash differently."""
        unset = EnvironmentSnapshot(target="x-y", prefix=None)
        empty = EnvironmentSnapshot(target="x-y", prefix="")

        assert unset.fingerprint() != empty.fingerprint()

    def test_path_change_changes_fingerprint(self):
        """Test that PATH is watched."""
        a = EnvironmentSnapshot(target="x-y", prefix="", path="/bin")
        b = EnvironmentSnapshot(target="x-y", prefix="", path="/usr/bin")

        assert a.fingerprint() != b.fingerprint()

    def test_watched_variables(self):
        """Test the list of watched variables."""
        assert set(WATCHED_VARIABLES) == {
            "TARGET",
            "CROSS_TOOLCHAIN_PREFIX",
            "CROSS_TOOLCHAIN_SUFFIX",
            "CROSS_SYSROOT",
            "PATH",
        }
