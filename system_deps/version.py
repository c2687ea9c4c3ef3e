"""Feature gating and effective-version selection."""

from __future__ import annotations

import re
from typing import Callable

from system_deps.core.logging import get_logger
from system_deps.exceptions import InvalidMetadataError
from system_deps.models.metadata import Dependency, ResolvedDependency, VersionOverride

log = get_logger("system_deps.version")

_LEADING_DIGITS_RE = re.compile(r"^(\d*)(.*)$")


def _component_key(component: str) -> tuple[int, str]:
    digits, rest = _LEADING_DIGITS_RE.match(component).groups()  # type: ignore[union-attr]
    return (int(digits) if digits else 0, rest)


def version_key(version: str) -> tuple[tuple[int, str], ...]:
    """Sort key for dotted-numeric versions.

    Components compare left to right; a version that is a strict prefix of
    another sorts first ("1.2" < "1.2.1").
    """
    return tuple(_component_key(c) for c in version.strip().split("."))


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` is lower than, equal to or higher than ``b``."""
    ka, kb = version_key(a), version_key(b)
    return (ka > kb) - (ka < kb)


def version_at_least(version: str, minimum: str) -> bool:
    return compare_versions(version, minimum) >= 0


def _highest_override(overrides: list[VersionOverride]) -> VersionOverride:
    # max() keeps the first of equal elements, i.e. declaration order on ties
    return max(overrides, key=lambda o: version_key(o.version))


def resolve_dependency(
    dep: Dependency,
    is_enabled: Callable[[str], bool],
    table: str,
) -> ResolvedDependency | None:
    """Decide whether ``dep`` is active and compute its effective requirement.

    Returns ``None`` when the dependency is gated behind a disabled feature.
    """
    if dep.feature is not None and not is_enabled(dep.feature):
        log.debug("version.feature_disabled", dependency=dep.key, feature=dep.feature)
        return None

    enabled = [o for o in dep.version_overrides if is_enabled(o.key)]
    if enabled:
        chosen = _highest_override(enabled)
        log.debug(
            "version.override_selected",
            dependency=dep.key,
            override=chosen.key,
            version=chosen.version,
        )
        return ResolvedDependency(
            key=dep.key,
            lib_name=chosen.name or dep.lib_name,
            version=chosen.version,
            optional=dep.optional if chosen.optional is None else chosen.optional,
        )

    if dep.version is None:
        raise InvalidMetadataError(f"No version in {table}.{dep.key}")

    return ResolvedDependency(
        key=dep.key,
        lib_name=dep.lib_name,
        version=dep.version,
        optional=dep.optional,
    )
