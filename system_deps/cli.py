"""CLI entry point: system-deps.

Subcommands:
    system-deps probe                          # resolve and print directives
    system-deps probe --feature v1_14          # enable a feature explicitly
    system-deps list --manifest-dir ./project  # show the declared dependencies
"""

from __future__ import annotations

import json
import sys
from dataclasses import asdict

import click

from system_deps.config import ConfigBuilder
from system_deps.core.logging import setup_logging
from system_deps.exceptions import SystemDepsError
from system_deps.metadata import DEFAULT_TABLE, load_metadata


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """system-deps: native library dependencies declared in the project manifest."""
    setup_logging(verbose)


def _builder(manifest_dir: str | None, table: str) -> ConfigBuilder:
    builder = ConfigBuilder().table(table)
    if manifest_dir:
        builder.manifest_dir(manifest_dir)
    return builder


@main.command("probe")
@click.option("--manifest-dir", default=None, type=click.Path(file_okay=False), help="Directory holding the manifest")
@click.option("--table", default=DEFAULT_TABLE, show_default=True, help="Dotted path of the dependency table")
@click.option("--feature", "features", multiple=True, help="Enable a feature (repeatable)")
def probe(manifest_dir: str | None, table: str, features: tuple[str, ...]) -> None:
    """Resolve every dependency and print the build directives."""
    builder = _builder(manifest_dir, table)
    for feature in features:
        builder.enable_feature(feature)

    try:
        builder.build().probe(sys.stdout)
    except SystemDepsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command("list")
@click.option("--manifest-dir", default=None, type=click.Path(file_okay=False), help="Directory holding the manifest")
@click.option("--table", default=DEFAULT_TABLE, show_default=True, help="Dotted path of the dependency table")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
def list_deps(manifest_dir: str | None, table: str, as_json: bool) -> None:
    """List the dependencies declared in the manifest, without probing."""
    config = _builder(manifest_dir, table).build()
    try:
        meta = load_metadata(config.manifest_path, config.table)
    except SystemDepsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([asdict(d) for d in meta.deps], indent=2))
        return

    if not meta.deps:
        click.echo("No dependencies declared.")
        return

    click.echo(f"{len(meta.deps)} dependencies in {config.manifest_path}\n")
    for dep in meta.deps:
        version = dep.version or "-"
        name = f" ({dep.name})" if dep.name else ""
        feature = f"  [feature: {dep.feature}]" if dep.feature else ""
        optional = "  optional" if dep.optional else ""
        click.echo(f"  {dep.key}{name} >= {version}{feature}{optional}")
        for override in dep.version_overrides:
            oname = f" ({override.name})" if override.name else ""
            click.echo(f"    {override.key}: >= {override.version}{oname}")


if __name__ == "__main__":
    main()
