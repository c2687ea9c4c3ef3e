"""Shared pytest fixtures for system-deps tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from system_deps.config import Config, ConfigBuilder
from system_deps.env import MockEnvironment
from system_deps.prober import BuildStrategy
from system_deps.testing import FakeDiscovery, fake_library

GOOD_MANIFEST = """\
[project]
name = "demo"

[tool.system-deps]
testdata = "4"
testlib = { version = "1", feature = "test-feature" }
testmore = { version = "2", feature = "another-test-feature" }
"""

FEATURE_VERSIONS_MANIFEST = """\
[tool.system-deps.testdata]
version = "4"
v5 = { version = "5" }
v6 = { version = "6" }
"""

# Always enabled, like the feature a crate under test would build with
BASE_ENV = {"SYSTEM_DEPS_FEATURE_TEST_FEATURE": ""}


def installed_libraries() -> dict:
    return {
        "testlib": fake_library(
            version="1.2.3",
            libs=["test"],
            link_paths=["/usr/lib/x86_64-linux-gnu"],
            frameworks=["someframework"],
            framework_paths=["/usr/lib/x86_64-linux-gnu"],
            include_paths=["/usr/include/testlib"],
        ),
        "testdata": fake_library(version="4.5.6"),
        "testmore": fake_library(version="2.0"),
    }


@pytest.fixture
def discovery() -> FakeDiscovery:
    return FakeDiscovery(installed_libraries())


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[[str], Path]:
    """Write ``pyproject.toml`` into a fresh directory and return that directory."""

    def _write(content: str) -> Path:
        project = tmp_path / "project"
        project.mkdir(exist_ok=True)
        (project / "pyproject.toml").write_text(content)
        return project

    return _write


@pytest.fixture
def make_config(write_manifest, discovery) -> Callable[..., Config]:
    """Build a Config over a manifest text, extra env vars and build strategies."""

    def _make(
        manifest: str = GOOD_MANIFEST,
        env: dict[str, str] | None = None,
        strategies: dict[str, BuildStrategy] | None = None,
    ) -> Config:
        values = dict(BASE_ENV)
        values.update(env or {})
        builder = (
            ConfigBuilder()
            .manifest_dir(write_manifest(manifest))
            .env(MockEnvironment(values))
            .discovery(discovery)
        )
        for key, strategy in (strategies or {}).items():
            builder.add_build_internal(key, strategy)
        return builder.build()

    return _make


@pytest.fixture
def good_manifest() -> str:
    return GOOD_MANIFEST


@pytest.fixture
def feature_versions_manifest() -> str:
    return FEATURE_VERSIONS_MANIFEST
