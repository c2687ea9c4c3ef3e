"""Tests for pkg-config discovery — subprocess is mocked, no pkg-config needed."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from system_deps.exceptions import BuildInternalClosureFailure, DiscoveryError, PkgConfigError
from system_deps.models.library import LibrarySource
from system_deps.pkg_config import (
    PKG_CONFIG_PATH_VAR,
    Discovery,
    PkgConfig,
    from_internal_pkg_config,
    parse_flags,
)
from system_deps.testing import FakeDiscovery, fake_library


def _completed(stdout: str = "", stderr: str = "", returncode: int = 0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestParseFlags:
    def test_libs_and_cflags(self):
        lib = parse_flags("-L/usr/lib/x86_64-linux-gnu -ltest -I/usr/include/testlib\n")
        assert lib.source is LibrarySource.DISCOVERED
        assert lib.libs == ["test"]
        assert lib.link_paths == ["/usr/lib/x86_64-linux-gnu"]
        assert lib.include_paths == ["/usr/include/testlib"]

    def test_frameworks(self):
        lib = parse_flags("-F/Library/Frameworks -framework someframework -framework Other")
        assert lib.framework_paths == ["/Library/Frameworks"]
        assert lib.frameworks == ["someframework", "Other"]

    def test_defines(self):
        lib = parse_flags("-DBADGER=yes -DNOVALUE -DEMPTY=")
        assert lib.defines == {"BADGER": "yes", "NOVALUE": None, "EMPTY": ""}

    def test_quoted_path(self):
        lib = parse_flags("'-I/opt/my include'")
        assert lib.include_paths == ["/opt/my include"]

    def test_unknown_flags_ignored(self):
        lib = parse_flags("-pthread -Wl,--as-needed -lm")
        assert lib.libs == ["m"]
        assert lib.link_paths == []

    def test_empty(self):
        lib = parse_flags("")
        assert lib.is_empty_link()
        assert lib.version == ""


class TestPkgConfig:
    def test_satisfies_protocol(self):
        assert isinstance(PkgConfig("pkg-config"), Discovery)
        assert isinstance(FakeDiscovery(), Discovery)

    def test_executable_from_env(self):
        with patch.dict(os.environ, {"PKG_CONFIG": "/opt/bin/pkgconf"}):
            assert PkgConfig().executable == "/opt/bin/pkgconf"

    def test_probe(self):
        with patch("system_deps.pkg_config.subprocess.run") as run:
            run.side_effect = [_completed("-L/usr/lib -ltest\n"), _completed("1.2.3\n")]
            lib = PkgConfig("pkg-config").probe("testlib", "1")

        assert lib.libs == ["test"]
        assert lib.version == "1.2.3"
        first, second = (c.args[0] for c in run.call_args_list)
        assert first == ["pkg-config", "--print-errors", "--libs", "--cflags", "testlib >= 1"]
        assert second == ["pkg-config", "--print-errors", "--modversion", "testlib"]

    def test_not_found(self):
        with patch("system_deps.pkg_config.subprocess.run") as run:
            run.return_value = _completed(
                stderr="Package testlib was not found in the pkg-config search path.\n",
                returncode=1,
            )
            with pytest.raises(PkgConfigError) as exc:
                PkgConfig("pkg-config").probe("testlib", "1")

        msg = str(exc.value)
        assert msg.startswith("`pkg-config --print-errors --libs --cflags 'testlib >= 1'` did not exit successfully")
        assert "--- stderr\nPackage testlib was not found" in msg
        assert isinstance(exc.value, DiscoveryError)

    def test_executable_missing(self):
        with patch("system_deps.pkg_config.subprocess.run") as run:
            run.side_effect = FileNotFoundError(2, "No such file or directory")
            with pytest.raises(PkgConfigError) as exc:
                PkgConfig("no-such-pkg-config").probe("testlib", "1")

        assert exc.value.reason is not None
        assert str(exc.value).startswith("Could not run `no-such-pkg-config")

    def test_timeout(self):
        with patch("system_deps.pkg_config.subprocess.run") as run:
            run.side_effect = subprocess.TimeoutExpired(cmd="pkg-config", timeout=1)
            with pytest.raises(PkgConfigError):
                PkgConfig("pkg-config", timeout=1).probe("testlib", "1")


class RecordingDiscovery(FakeDiscovery):
    """FakeDiscovery that also records PKG_CONFIG_PATH at probe time."""

    def __init__(self, installed=None) -> None:
        super().__init__(installed)
        self.search_paths: list[str | None] = []

    def probe(self, name, version):
        self.search_paths.append(os.environ.get(PKG_CONFIG_PATH_VAR))
        return super().probe(name, version)


class TestFromInternalPkgConfig:
    def test_prepends_search_path(self, tmp_path: Path):
        discovery = RecordingDiscovery({"testlib": fake_library("1.2.3")})
        with patch.dict(os.environ, {PKG_CONFIG_PATH_VAR: "/usr/share/pkgconfig"}):
            lib = from_internal_pkg_config(tmp_path, "testlib", "1.0", discovery=discovery)
            assert os.environ[PKG_CONFIG_PATH_VAR] == "/usr/share/pkgconfig"

        assert lib.version == "1.2.3"
        assert discovery.search_paths == [os.pathsep.join([str(tmp_path), "/usr/share/pkgconfig"])]

    def test_unset_search_path_restored(self, tmp_path: Path):
        discovery = RecordingDiscovery({"testlib": fake_library("1.2.3")})
        with patch.dict(os.environ, {}):
            os.environ.pop(PKG_CONFIG_PATH_VAR, None)
            from_internal_pkg_config(tmp_path, "testlib", "1.0", discovery=discovery)
            assert PKG_CONFIG_PATH_VAR not in os.environ

        assert discovery.search_paths == [str(tmp_path)]

    def test_failure(self, tmp_path: Path):
        discovery = RecordingDiscovery()
        with patch.dict(os.environ, {PKG_CONFIG_PATH_VAR: "/usr/share/pkgconfig"}):
            with pytest.raises(BuildInternalClosureFailure) as exc:
                from_internal_pkg_config(tmp_path, "testlib", "1.0", discovery=discovery)
            assert os.environ[PKG_CONFIG_PATH_VAR] == "/usr/share/pkgconfig"

        assert isinstance(exc.value.discovery_error, PkgConfigError)
        assert "Package testlib was not found" in str(exc.value)
