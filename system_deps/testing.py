"""Test doubles for system_deps — use in build-script and integration tests.

Usage::

    from system_deps.testing import FakeDiscovery

    discovery = FakeDiscovery({"testlib": fake_library(version="1.2.3")})
    config = ConfigBuilder().discovery(discovery).build()
"""

from __future__ import annotations

import copy

from system_deps.exceptions import PkgConfigError
from system_deps.models.library import Library, LibrarySource
from system_deps.version import version_at_least


def fake_library(
    version: str,
    libs: list[str] | None = None,
    link_paths: list[str] | None = None,
    frameworks: list[str] | None = None,
    framework_paths: list[str] | None = None,
    include_paths: list[str] | None = None,
) -> Library:
    """Build a discovered :class:`Library` from plain strings."""
    return Library(
        source=LibrarySource.DISCOVERED,
        libs=list(libs or []),
        link_paths=list(link_paths or []),
        frameworks=list(frameworks or []),
        framework_paths=list(framework_paths or []),
        include_paths=list(include_paths or []),
        version=version,
    )


class FakeDiscovery:
    """Drop-in replacement for :class:`~system_deps.pkg_config.PkgConfig`.

    Knows a fixed set of installed libraries. A probe fails like pkg-config
    would when the library is unknown or older than requested. Every probe
    gets a fresh copy, so overrides never leak between passes.
    """

    def __init__(self, installed: dict[str, Library] | None = None) -> None:
        self.installed = dict(installed or {})
        self._calls: list[tuple[str, str]] = []

    @property
    def calls(self) -> list[tuple[str, str]]:
        """(name, version) pairs received — useful for assertions in tests."""
        return self._calls

    def probe(self, name: str, version: str) -> Library:
        self._calls.append((name, version))
        command = f"pkg-config --libs --cflags '{name} >= {version}'"
        lib = self.installed.get(name)
        if lib is None:
            raise PkgConfigError(command, output=f"Package {name} was not found")
        if not version_at_least(lib.version, version):
            raise PkgConfigError(
                command,
                output=f"Requested '{name} >= {version}' but version of {name} is {lib.version}",
            )
        return copy.deepcopy(lib)
