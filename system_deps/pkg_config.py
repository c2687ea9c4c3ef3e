"""pkg-config discovery — locate installed libraries via the pkg-config tool."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Protocol, runtime_checkable

from system_deps.env import scoped_env_var
from system_deps.exceptions import BuildInternalClosureFailure, DiscoveryError, PkgConfigError
from system_deps.models.library import Library, LibrarySource

logger = logging.getLogger(__name__)

PKG_CONFIG_PATH_VAR = "PKG_CONFIG_PATH"


@runtime_checkable
class Discovery(Protocol):
    """Interface of the external library-discovery collaborator."""

    def probe(self, name: str, version: str) -> Library:
        """Locate ``name`` at ``version`` or newer; raise DiscoveryError on failure."""
        ...


def parse_flags(output: str) -> Library:
    """Turn ``pkg-config --libs --cflags`` output into a :class:`Library`."""
    lib = Library(source=LibrarySource.DISCOVERED)
    tokens = shlex.split(output)
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok == "-framework" and i + 1 < len(tokens):
            lib.frameworks.append(tokens[i + 1])
            i += 2
            continue
        if tok.startswith("-L") and len(tok) > 2:
            lib.link_paths.append(tok[2:])
        elif tok.startswith("-F") and len(tok) > 2:
            lib.framework_paths.append(tok[2:])
        elif tok.startswith("-I") and len(tok) > 2:
            lib.include_paths.append(tok[2:])
        elif tok.startswith("-l") and len(tok) > 2:
            lib.libs.append(tok[2:])
        elif tok.startswith("-D") and len(tok) > 2:
            name, sep, value = tok[2:].partition("=")
            lib.defines[name] = value if sep else None
        else:
            logger.debug("Ignoring pkg-config flag: %s", tok)
        i += 1
    return lib


class PkgConfig:
    """Discovery backed by the ``pkg-config`` executable.

    The executable is taken from ``$PKG_CONFIG`` when set; the search path is
    whatever ``PKG_CONFIG_PATH`` holds in the process environment.
    """

    def __init__(self, executable: str | None = None, timeout: float = 60) -> None:
        self.executable = executable or os.environ.get("PKG_CONFIG", "pkg-config")
        self.timeout = timeout

    def probe(self, name: str, version: str) -> Library:
        flags = self._run(["--libs", "--cflags", f"{name} >= {version}"])
        lib = parse_flags(flags)
        lib.version = self._run(["--modversion", name]).strip()
        logger.info("pkg-config found %s %s", name, lib.version)
        return lib

    def _run(self, args: list[str]) -> str:
        cmd = [self.executable, "--print-errors", *args]
        command = shlex.join(cmd)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise PkgConfigError(command, reason=str(e)) from e
        if result.returncode != 0:
            raise PkgConfigError(command, output=result.stderr)
        return result.stdout


def from_internal_pkg_config(
    pkg_config_dir: str | Path,
    lib: str,
    version: str,
    discovery: Discovery | None = None,
) -> Library:
    """Locate a library just built by a build strategy.

    ``pkg_config_dir`` is prepended to ``PKG_CONFIG_PATH`` only for the
    duration of this discovery call. Failures are reported as
    :class:`BuildInternalClosureFailure` so a strategy can simply return
    the result.
    """
    discovery = discovery or PkgConfig()
    current = os.environ.get(PKG_CONFIG_PATH_VAR)
    search = os.pathsep.join(p for p in (str(pkg_config_dir), current) if p)

    with scoped_env_var(PKG_CONFIG_PATH_VAR, search):
        try:
            return discovery.probe(lib, version)
        except DiscoveryError as e:
            raise BuildInternalClosureFailure.from_discovery(e) from e
