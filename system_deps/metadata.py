"""Parse the dependency table of the project manifest."""

from __future__ import annotations

import datetime
import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from system_deps.core.logging import get_logger
from system_deps.exceptions import FailToReadError, InvalidMetadataError
from system_deps.models.metadata import Dependency, MetaData, VersionOverride

log = get_logger("system_deps.metadata")

DEFAULT_MANIFEST_NAME = "pyproject.toml"
DEFAULT_TABLE = "tool.system-deps"

# Sub-tables whose key starts with this marker are version overrides
VERSION_OVERRIDE_MARKER = "v"


def toml_type_name(value: Any) -> str:
    """TOML type name of a decoded value, as shown in error messages."""
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return "datetime"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "table"
    return type(value).__name__


def _unexpected(path: str, key: str, value: Any) -> InvalidMetadataError:
    return InvalidMetadataError(f"Unexpected key {path}.{key} type {toml_type_name(value)}")


def _lookup_table(data: dict[str, Any], table: str) -> Any:
    node: Any = data
    for part in table.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def parse_metadata(content: str, table: str = DEFAULT_TABLE, source: str = "<string>") -> MetaData:
    """Parse manifest text into :class:`MetaData`.

    ``source`` only appears in error messages (usually the manifest path).
    """
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise InvalidMetadataError(f"Error parsing TOML from {source}: {e}") from e

    meta = _lookup_table(data, table)
    if meta is None:
        raise InvalidMetadataError(f"No {table} in {source}")
    if not isinstance(meta, dict):
        raise InvalidMetadataError(f"{table} not a table in {source}")

    deps = [_parse_dependency(table, key, value) for key, value in meta.items()]
    log.debug("metadata.parsed", table=table, source=source, count=len(deps))
    return MetaData(table=table, deps=deps)


def load_metadata(path: Path, table: str = DEFAULT_TABLE) -> MetaData:
    """Read and parse the manifest file at ``path``."""
    try:
        fh = path.open("rb")
    except OSError as e:
        raise FailToReadError("opening", path, e) from e
    with fh:
        try:
            raw = fh.read()
        except OSError as e:
            raise FailToReadError("reading", path, e) from e
    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidMetadataError(f"Error parsing TOML from {path}: {e}") from e
    return parse_metadata(content, table=table, source=str(path))


def _parse_dependency(table: str, key: str, value: Any) -> Dependency:
    path = f"{table}.{key}"

    # somelib = "1.0"
    if isinstance(value, str):
        return Dependency(key=key, version=value)
    if not isinstance(value, dict):
        raise InvalidMetadataError(f"{path} not a string or table")

    fields: dict[str, Any] = {}
    overrides: list[VersionOverride] = []
    for tkey, tvalue in value.items():
        if tkey in ("version", "name", "feature") and isinstance(tvalue, str):
            fields[tkey] = tvalue
        elif tkey == "optional" and isinstance(tvalue, bool):
            fields["optional"] = tvalue
        elif (
            tkey != "version"
            and tkey.startswith(VERSION_OVERRIDE_MARKER)
            and isinstance(tvalue, dict)
        ):
            overrides.append(_parse_override(path, tkey, tvalue))
        else:
            raise _unexpected(path, tkey, tvalue)

    return Dependency(key=key, version_overrides=tuple(overrides), **fields)


def _parse_override(dep_path: str, key: str, settings: dict[str, Any]) -> VersionOverride:
    path = f"{dep_path}.{key}"
    version: str | None = None
    name: str | None = None
    optional: bool | None = None

    for skey, svalue in settings.items():
        if skey == "version" and isinstance(svalue, str):
            version = svalue
        elif skey == "name" and isinstance(svalue, str):
            name = svalue
        elif skey == "optional" and isinstance(svalue, bool):
            optional = svalue
        else:
            raise _unexpected(path, skey, svalue)

    if version is None:
        raise InvalidMetadataError(f"No version in {path}")
    return VersionOverride(key=key, version=version, name=name, optional=optional)
