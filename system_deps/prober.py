"""Probe one resolved dependency — discovery, build-internal fallback, or skip.

Per dependency, the policy and discovery outcome decide what happens:

    no-pkg-config override     -> empty manually specified library
    ALWAYS                     -> build strategy, discovery never called
    AUTO   + discovery fails   -> build strategy
    NEVER  + discovery fails   -> discovery error propagates
    any    + discovery works   -> discovered library
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Callable

from system_deps.core.logging import get_logger
from system_deps.env import EnvVariables, override_var
from system_deps.exceptions import (
    ACCEPTED_POLICIES,
    BuildInternalClosureError,
    BuildInternalClosureFailure,
    BuildInternalInvalidError,
    BuildInternalNoClosureError,
    BuildInternalWrongVersionError,
    DiscoveryError,
)
from system_deps.models.library import BuildFallbackPolicy, Library
from system_deps.models.metadata import ResolvedDependency
from system_deps.pkg_config import Discovery
from system_deps.version import version_at_least

log = get_logger("system_deps.prober")

# (minimum_version) -> Library; raise BuildInternalClosureFailure or DiscoveryError on failure
BuildStrategy = Callable[[str], Library]

NO_PKG_CONFIG = "NO_PKG_CONFIG"
BUILD_INTERNAL = "BUILD_INTERNAL"


def parse_policy(variable: str, value: str) -> BuildFallbackPolicy:
    """Parse a build-internal policy value; unknown values are an error."""
    if value not in ACCEPTED_POLICIES:
        raise BuildInternalInvalidError(variable, value)
    return BuildFallbackPolicy(value)


class Prober:
    """Resolve :class:`ResolvedDependency` records into :class:`Library` records.

    ``strategies`` is copied; each strategy is handed out at most once per
    prober, so a fresh prober is created for every resolution pass.
    """

    def __init__(
        self,
        env: EnvVariables,
        discovery: Discovery,
        strategies: Mapping[str, BuildStrategy] | None = None,
        override_prefix: str = "SYSTEM_DEPS",
    ) -> None:
        self._env = env
        self._discovery = discovery
        self._strategies: dict[str, BuildStrategy] = dict(strategies or {})
        self._prefix = override_prefix

    def policy_for(self, key: str) -> BuildFallbackPolicy:
        """Per-dependency policy, then the global one, then NEVER."""
        for variable in (
            override_var(self._prefix, key, BUILD_INTERNAL),
            f"{self._prefix}_{BUILD_INTERNAL}",
        ):
            value = self._env.get(variable)
            if value is not None:
                return parse_policy(variable, value)
        return BuildFallbackPolicy.NEVER

    def probe(self, dep: ResolvedDependency) -> Library:
        if self._env.contains(override_var(self._prefix, dep.key, NO_PKG_CONFIG)):
            log.info("prober.skip_discovery", dependency=dep.key)
            return Library.manually_specified()

        policy = self.policy_for(dep.key)
        if policy is BuildFallbackPolicy.ALWAYS:
            return self._build_internal(dep)

        try:
            lib = self._discovery.probe(dep.lib_name, dep.version)
        except DiscoveryError as e:
            if policy is BuildFallbackPolicy.AUTO:
                log.info(
                    "prober.discovery_failed_fallback",
                    dependency=dep.key,
                    version=dep.version,
                    error=str(e),
                )
                return self._build_internal(dep)
            raise

        log.info("prober.discovered", dependency=dep.key, version=lib.version)
        return lib

    def _build_internal(self, dep: ResolvedDependency) -> Library:
        strategy = self._strategies.pop(dep.key, None)
        if strategy is None:
            raise BuildInternalNoClosureError(dep.key, dep.version)

        log.info("prober.build_internal", dependency=dep.key, version=dep.version)
        try:
            lib = strategy(dep.version)
        except BuildInternalClosureFailure as e:
            raise BuildInternalClosureError(dep.key, e) from e
        except DiscoveryError as e:
            failure = BuildInternalClosureFailure.from_discovery(e)
            raise BuildInternalClosureError(dep.key, failure) from e

        if not version_at_least(lib.version, dep.version):
            raise BuildInternalWrongVersionError(dep.key, lib.version, dep.version)
        return lib
