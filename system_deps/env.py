"""Environment access — real process environment or an injected mapping."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

DEFAULT_OVERRIDE_PREFIX = "SYSTEM_DEPS"
DEFAULT_FEATURE_PREFIX = "SYSTEM_DEPS_FEATURE_"
MANIFEST_DIR_VAR = "SYSTEM_DEPS_MANIFEST_DIR"


class EnvVariables(ABC):
    """Read-only view of named environment values."""

    @abstractmethod
    def get(self, name: str) -> str | None:
        """Return the value of ``name`` or ``None`` when unset."""
        ...

    def contains(self, name: str) -> bool:
        return self.get(name) is not None


class Environment(EnvVariables):
    """The process environment."""

    def get(self, name: str) -> str | None:
        return os.environ.get(name)


class MockEnvironment(EnvVariables):
    """Fixed mapping, for deterministic tests."""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values = dict(values or {})

    def get(self, name: str) -> str | None:
        return self._values.get(name)


def normalize_key(key: str) -> str:
    """``gtk-3.0`` -> ``GTK_3.0``; uppercased with dashes as underscores."""
    return key.upper().replace("-", "_")


def override_var(prefix: str, key: str, suffix: str) -> str:
    """Name of the per-dependency override variable, e.g. ``SYSTEM_DEPS_TESTLIB_LIB``."""
    return f"{prefix}_{normalize_key(key)}_{suffix}"


def feature_var(prefix: str, feature: str) -> str:
    return f"{prefix}{normalize_key(feature)}"


@contextmanager
def scoped_env_var(name: str, value: str) -> Iterator[None]:
    """Set a process environment variable for the duration of the block.

    The previous value (or its absence) is restored on every exit path.
    """
    previous = os.environ.get(name)
    os.environ[name] = value
    try:
        yield
    finally:
        if previous is None:
            os.environ.pop(name, None)
        else:
            os.environ[name] = previous
