"""
CLI commands for mise configuration.

Thin wrapper over ``src.core.services.manifest.projection``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from src.core.config.loader import ManifestError
from src.core.services.manifest.projection import generate_mise_config
from src.core.services.manifest.session import ResolutionSession


@click.group()
def mise() -> None:
    """mise — generate config.toml from packages.yaml."""


@mise.command("config")
@click.argument("output", type=click.Path(dir_okay=False))
@click.option(
    "--template",
    "-t",
    type=click.Path(dir_okay=False),
    default=None,
    help="Template config.toml whose pre-[tools] section is kept.",
)
@click.pass_context
def config(ctx: click.Context, output: str, template: str | None) -> None:
    """Write mise config.toml to OUTPUT."""
    settings = ctx.obj["settings"]
    session = ResolutionSession.from_settings(settings)
    template_path = Path(template) if template else settings.mise_template

    try:
        written = generate_mise_config(session, Path(output), template_path)
    except ManifestError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
        return

    click.secho(f"✅ Wrote {written}", fg="green", err=True)
