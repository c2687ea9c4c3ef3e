"""Apply user-supplied environment overrides to probed libraries."""

from __future__ import annotations

import os
from typing import Callable

from system_deps.core.logging import get_logger
from system_deps.env import EnvVariables, override_var
from system_deps.models.library import Library

log = get_logger("system_deps.overrides")

SEARCH_NATIVE = "SEARCH_NATIVE"
SEARCH_FRAMEWORK = "SEARCH_FRAMEWORK"
LIB = "LIB"
LIB_FRAMEWORK = "LIB_FRAMEWORK"
INCLUDE = "INCLUDE"


def split_paths(value: str) -> list[str]:
    """Split on the platform path-list separator, keeping each entry verbatim.

    Empty entries are dropped, so "" is an empty list.
    """
    return [p for p in value.split(os.pathsep) if p]


def split_names(value: str) -> list[str]:
    """Split on single spaces; "" is an empty list."""
    if not value:
        return []
    return value.split(" ")


# (variable suffix, Library attribute, splitter)
_SLOTS: list[tuple[str, str, Callable[[str], list]]] = [
    (SEARCH_NATIVE, "link_paths", split_paths),
    (SEARCH_FRAMEWORK, "framework_paths", split_paths),
    (LIB, "libs", split_names),
    (LIB_FRAMEWORK, "frameworks", split_names),
    (INCLUDE, "include_paths", split_paths),
]


class OverrideApplier:
    """Each present override replaces the whole field, never merges."""

    def __init__(self, env: EnvVariables, override_prefix: str = "SYSTEM_DEPS") -> None:
        self._env = env
        self._prefix = override_prefix

    def _get(self, key: str, suffix: str) -> str | None:
        return self._env.get(override_var(self._prefix, key, suffix))

    def apply(self, key: str, lib: Library) -> None:
        for suffix, attr, split in _SLOTS:
            value = self._get(key, suffix)
            if value is not None:
                setattr(lib, attr, split(value))
                log.debug("overrides.replaced", dependency=key, field=attr)

    def apply_all(self, libraries: dict[str, Library]) -> None:
        for key, lib in libraries.items():
            self.apply(key, lib)
        log.debug("overrides.applied", count=len(libraries))
