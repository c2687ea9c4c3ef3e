"""Error types raised by a resolution pass.

Every variant carries structured fields; the human-readable message is built
in one place by :func:`render_error`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

ACCEPTED_POLICIES = ("auto", "always", "never")


class SystemDepsError(Exception):
    """Base exception for all resolution errors."""

    def __str__(self) -> str:
        return render_error(self)


class InvalidMetadataError(SystemDepsError):
    """Manifest table is structurally or semantically wrong."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class FailToReadError(SystemDepsError):
    """Manifest could not be opened or read."""

    def __init__(self, action: str, path: Path, cause: OSError):
        self.action = action  # "opening" | "reading"
        self.path = path
        self.cause = cause
        super().__init__(action, path, cause)


class MissingLibError(SystemDepsError):
    """A manually specified library ended up with nothing to link."""

    def __init__(self, key: str, lib_var: str, framework_var: str):
        self.key = key
        self.lib_var = lib_var
        self.framework_var = framework_var
        super().__init__(key, lib_var, framework_var)


class BuildInternalInvalidError(SystemDepsError):
    """A build-internal policy variable holds an unknown value."""

    def __init__(self, variable: str, value: str):
        self.variable = variable
        self.value = value
        super().__init__(variable, value)


class BuildInternalNoClosureError(SystemDepsError):
    """Building internally was requested but no strategy is registered."""

    def __init__(self, name: str, version: str):
        self.name = name
        self.version = version
        super().__init__(name, version)


class BuildInternalWrongVersionError(SystemDepsError):
    """The internally built library is older than required."""

    def __init__(self, name: str, got: str, required: str):
        self.name = name
        self.got = got
        self.required = required
        super().__init__(name, got, required)


class BuildInternalClosureError(SystemDepsError):
    """A registered build strategy reported failure."""

    def __init__(self, name: str, cause: BuildInternalClosureFailure):
        self.name = name
        self.cause = cause
        super().__init__(name, cause)


class DiscoveryError(SystemDepsError):
    """Base class for failures reported by a discovery collaborator."""


class PkgConfigError(DiscoveryError):
    """pkg-config could not be run or did not find the library."""

    def __init__(self, command: str, output: str = "", reason: str | None = None):
        self.command = command
        self.output = output
        self.reason = reason
        super().__init__(command, output, reason)


class BuildInternalClosureFailure(Exception):
    """Raised by a build strategy to report that it could not build the library.

    Wraps either a free-form failure message or a discovery error hit while
    locating the freshly built library.
    """

    def __init__(self, message: str, discovery_error: DiscoveryError | None = None):
        self.message = message
        self.discovery_error = discovery_error
        super().__init__(message)

    @classmethod
    def failed(cls, message: str) -> BuildInternalClosureFailure:
        return cls(message)

    @classmethod
    def from_discovery(cls, err: DiscoveryError) -> BuildInternalClosureFailure:
        return cls(str(err), discovery_error=err)


def _render_pkg_config(e: PkgConfigError) -> str:
    if e.reason:
        return f"Could not run `{e.command}`: {e.reason}"
    msg = f"`{e.command}` did not exit successfully"
    output = e.output.strip()
    if output:
        msg += f"\n--- stderr\n{output}"
    return msg


_RENDERERS: dict[type, Callable] = {
    InvalidMetadataError: lambda e: e.message,
    FailToReadError: lambda e: f"Error {e.action} {e.path}: {e.cause}",
    MissingLibError: lambda e: (
        f"You should define at least one lib using {e.lib_var} or {e.framework_var}"
    ),
    BuildInternalInvalidError: lambda e: (
        f"Invalid value in {e.variable}: {e.value} (allowed: "
        + ", ".join(f"'{p}'" for p in ACCEPTED_POLICIES)
        + ")"
    ),
    BuildInternalNoClosureError: lambda e: (
        f"Missing build internal closure for {e.name} (version {e.version})"
    ),
    BuildInternalWrongVersionError: lambda e: (
        f"Internally built {e.name} {e.got} but minimum required version is {e.required}"
    ),
    BuildInternalClosureError: lambda e: f"Failed to build {e.name}: {e.cause}",
    PkgConfigError: _render_pkg_config,
}


def render_error(err: SystemDepsError) -> str:
    """Format the message for any error variant."""
    for cls in type(err).__mro__:
        renderer = _RENDERERS.get(cls)
        if renderer is not None:
            return renderer(err)
    return Exception.__str__(err)
