"""Data models for probed libraries and the build-internal policy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class LibrarySource(Enum):
    """Where a resolved library came from."""

    DISCOVERED = "discovered"
    MANUALLY_SPECIFIED = "manually_specified"


class BuildFallbackPolicy(Enum):
    """When to call the registered build strategy instead of discovery."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


@dataclass
class Library:
    """Linkage metadata for one dependency.

    Paths are kept as the text pkg-config or the user gave, so they are
    emitted unchanged.

    Created by the prober, rewritten in place by the override step,
    then only read when generating directives.
    """

    source: LibrarySource = LibrarySource.DISCOVERED
    libs: list[str] = field(default_factory=list)
    link_paths: list[str] = field(default_factory=list)
    frameworks: list[str] = field(default_factory=list)
    framework_paths: list[str] = field(default_factory=list)
    include_paths: list[str] = field(default_factory=list)
    defines: dict[str, str | None] = field(default_factory=dict)
    version: str = ""

    @classmethod
    def manually_specified(cls) -> Library:
        return cls(source=LibrarySource.MANUALLY_SPECIFIED)

    def is_empty_link(self) -> bool:
        return not self.libs and not self.frameworks
