"""system-deps: declare native library dependencies in the project manifest.

Dependencies live in a table of ``pyproject.toml``::

    [tool.system-deps]
    testlib = "1.2"
    testdata = { version = "4.5", feature = "some-feature" }

and are resolved through pkg-config at build time.
"""

__version__ = "0.1.0"

from system_deps.config import Config, ConfigBuilder, probe
from system_deps.env import Environment, EnvVariables, MockEnvironment
from system_deps.exceptions import (
    BuildInternalClosureError,
    BuildInternalClosureFailure,
    BuildInternalInvalidError,
    BuildInternalNoClosureError,
    BuildInternalWrongVersionError,
    DiscoveryError,
    FailToReadError,
    InvalidMetadataError,
    MissingLibError,
    PkgConfigError,
    SystemDepsError,
)
from system_deps.models.flags import BuildDirective, BuildFlags, DirectiveKind
from system_deps.models.library import BuildFallbackPolicy, Library, LibrarySource
from system_deps.pkg_config import PkgConfig, from_internal_pkg_config

__all__ = [
    "BuildDirective",
    "BuildFallbackPolicy",
    "BuildFlags",
    "BuildInternalClosureError",
    "BuildInternalClosureFailure",
    "BuildInternalInvalidError",
    "BuildInternalNoClosureError",
    "BuildInternalWrongVersionError",
    "Config",
    "ConfigBuilder",
    "DirectiveKind",
    "DiscoveryError",
    "EnvVariables",
    "Environment",
    "FailToReadError",
    "InvalidMetadataError",
    "Library",
    "LibrarySource",
    "MissingLibError",
    "MockEnvironment",
    "PkgConfig",
    "PkgConfigError",
    "SystemDepsError",
    "from_internal_pkg_config",
    "probe",
]
