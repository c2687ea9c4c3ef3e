"""Resolution pass configuration and the ``probe()`` entry point.

Usage::

    from system_deps import ConfigBuilder

    libraries = ConfigBuilder().build().probe()

    # with a build-internal strategy
    config = (
        ConfigBuilder()
        .add_build_internal("testlib", build_testlib)
        .build()
    )
    libraries, flags = config.probe_full()
"""

from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import IO

from system_deps.core.logging import get_logger
from system_deps.env import (
    DEFAULT_FEATURE_PREFIX,
    DEFAULT_OVERRIDE_PREFIX,
    MANIFEST_DIR_VAR,
    Environment,
    EnvVariables,
    feature_var,
)
from system_deps.flags import generate_flags
from system_deps.metadata import DEFAULT_MANIFEST_NAME, DEFAULT_TABLE, load_metadata
from system_deps.models.flags import DEFAULT_DIRECTIVE_PREFIX, BuildFlags
from system_deps.models.library import Library
from system_deps.overrides import OverrideApplier
from system_deps.pkg_config import Discovery, PkgConfig
from system_deps.prober import BuildStrategy, Prober
from system_deps.version import resolve_dependency

log = get_logger("system_deps.config")


@dataclass(frozen=True)
class Config:
    """Immutable settings of one resolution pass. Create with :class:`ConfigBuilder`."""

    env: EnvVariables
    manifest_path: Path
    discovery: Discovery
    table: str = DEFAULT_TABLE
    override_prefix: str = DEFAULT_OVERRIDE_PREFIX
    feature_prefix: str = DEFAULT_FEATURE_PREFIX
    directive_prefix: str = DEFAULT_DIRECTIVE_PREFIX
    features: frozenset[str] = frozenset()
    strategies: Mapping[str, BuildStrategy] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def is_feature_enabled(self, feature: str) -> bool:
        if feature in self.features:
            return True
        return self.env.contains(feature_var(self.feature_prefix, feature))

    def probe_full(self) -> tuple[dict[str, Library], BuildFlags]:
        """Run one pass: parse, resolve, probe, override, generate directives.

        Returns the libraries keyed by dependency key, in manifest order,
        and the generated directives. Any error aborts the whole pass.
        """
        meta = load_metadata(self.manifest_path, self.table)
        prober = Prober(
            self.env,
            self.discovery,
            strategies=self.strategies,
            override_prefix=self.override_prefix,
        )

        libraries: dict[str, Library] = {}
        for dep in meta.deps:
            resolved = resolve_dependency(dep, self.is_feature_enabled, meta.table)
            if resolved is None:
                continue
            libraries[dep.key] = prober.probe(resolved)

        OverrideApplier(self.env, self.override_prefix).apply_all(libraries)
        flags = generate_flags(libraries, self.override_prefix)
        log.info(
            "config.probed",
            manifest=str(self.manifest_path),
            libraries=len(libraries),
            directives=len(flags),
        )
        return libraries, flags

    def probe(self, stream: IO[str] | None = None) -> dict[str, Library]:
        """Run a pass and write the directive lines to ``stream`` (stdout by default)."""
        libraries, flags = self.probe_full()
        out = stream if stream is not None else sys.stdout
        out.write(flags.render(self.directive_prefix))
        out.flush()
        return libraries


class ConfigBuilder:
    """Mutable builder for :class:`Config`; every setter returns the builder."""

    def __init__(self) -> None:
        self._env: EnvVariables | None = None
        self._manifest_dir: Path | None = None
        self._manifest_name = DEFAULT_MANIFEST_NAME
        self._table = DEFAULT_TABLE
        self._override_prefix = DEFAULT_OVERRIDE_PREFIX
        self._feature_prefix = DEFAULT_FEATURE_PREFIX
        self._directive_prefix = DEFAULT_DIRECTIVE_PREFIX
        self._discovery: Discovery | None = None
        self._features: set[str] = set()
        self._strategies: dict[str, BuildStrategy] = {}

    def env(self, env: EnvVariables) -> ConfigBuilder:
        self._env = env
        return self

    def manifest_dir(self, path: str | Path) -> ConfigBuilder:
        self._manifest_dir = Path(path)
        return self

    def manifest_name(self, name: str) -> ConfigBuilder:
        self._manifest_name = name
        return self

    def table(self, table: str) -> ConfigBuilder:
        self._table = table
        return self

    def override_prefix(self, prefix: str) -> ConfigBuilder:
        self._override_prefix = prefix
        return self

    def feature_prefix(self, prefix: str) -> ConfigBuilder:
        self._feature_prefix = prefix
        return self

    def directive_prefix(self, prefix: str) -> ConfigBuilder:
        self._directive_prefix = prefix
        return self

    def discovery(self, discovery: Discovery) -> ConfigBuilder:
        self._discovery = discovery
        return self

    def enable_feature(self, feature: str) -> ConfigBuilder:
        self._features.add(feature)
        return self

    def add_build_internal(self, key: str, strategy: BuildStrategy) -> ConfigBuilder:
        """Register the build strategy for dependency ``key``, replacing any previous one."""
        self._strategies[key] = strategy
        return self

    def build(self) -> Config:
        env = self._env if self._env is not None else Environment()
        manifest_dir = self._manifest_dir
        if manifest_dir is None:
            manifest_dir = Path(env.get(MANIFEST_DIR_VAR) or Path.cwd())

        return Config(
            env=env,
            manifest_path=manifest_dir / self._manifest_name,
            discovery=self._discovery if self._discovery is not None else PkgConfig(),
            table=self._table,
            override_prefix=self._override_prefix,
            feature_prefix=self._feature_prefix,
            directive_prefix=self._directive_prefix,
            features=frozenset(self._features),
            strategies=MappingProxyType(dict(self._strategies)),
        )


def probe(stream: IO[str] | None = None) -> dict[str, Library]:
    """Probe every dependency of the manifest using the process environment."""
    return ConfigBuilder().build().probe(stream)
