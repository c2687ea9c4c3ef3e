"""Data models for the parsed dependency table."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class VersionOverride:
    """Alternate requirement for a dependency, active when feature ``key`` is enabled."""

    key: str  # e.g. "v1_2", doubles as the gating feature name
    version: str
    name: str | None = None
    optional: bool | None = None


@dataclass(frozen=True)
class Dependency:
    """One entry of the manifest dependency table."""

    key: str
    version: str | None = None
    name: str | None = None
    feature: str | None = None
    optional: bool = False
    version_overrides: tuple[VersionOverride, ...] = ()

    @property
    def lib_name(self) -> str:
        return self.name or self.key


@dataclass
class MetaData:
    """All dependencies of a manifest, in declaration order."""

    table: str
    deps: list[Dependency] = field(default_factory=list)


@dataclass(frozen=True)
class ResolvedDependency:
    """A dependency after feature gating and version-override selection."""

    key: str
    lib_name: str
    version: str  # always a single minimum version, never a range
    optional: bool = False
