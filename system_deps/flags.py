"""Turn resolved libraries into build directives."""

from __future__ import annotations

import os
from collections.abc import Mapping

from system_deps.env import override_var
from system_deps.exceptions import MissingLibError
from system_deps.models.flags import BuildFlags, DirectiveKind
from system_deps.models.library import Library, LibrarySource
from system_deps.overrides import LIB, LIB_FRAMEWORK


def generate_flags(
    libraries: Mapping[str, Library],
    override_prefix: str = "SYSTEM_DEPS",
) -> BuildFlags:
    """Build the directive list for ``libraries`` in their iteration order.

    Include paths of every library are collected into one trailing
    INCLUDE_PATH directive. Raises :class:`MissingLibError` for a manually
    specified library that has neither libs nor frameworks.
    """
    flags = BuildFlags()
    include_paths: list[str] = []

    for key, lib in libraries.items():
        if lib.source is LibrarySource.MANUALLY_SPECIFIED and lib.is_empty_link():
            raise MissingLibError(
                key,
                override_var(override_prefix, key, LIB),
                override_var(override_prefix, key, LIB_FRAMEWORK),
            )

        for path in lib.link_paths:
            flags.add(DirectiveKind.SEARCH_NATIVE, path)
        for path in lib.framework_paths:
            flags.add(DirectiveKind.SEARCH_FRAMEWORK, path)
        for name in lib.libs:
            flags.add(DirectiveKind.LIB, name)
        for name in lib.frameworks:
            flags.add(DirectiveKind.LIB_FRAMEWORK, name)
        include_paths.extend(lib.include_paths)

    if include_paths:
        flags.add(DirectiveKind.INCLUDE_PATH, os.pathsep.join(include_paths))

    return flags
