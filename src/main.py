"""
devbase packs — CLI entrypoint.

Usage:
    python -m src.main --help
    python -m src.main packs list system
    python -m src.main --packs "node go" packs version node
    python -m src.main mise config ~/.config/mise/config.toml
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from src.core.config.loader import find_overlay
from src.core.config.settings import load_settings, parse_packs
from src.core.observability.logging_config import resolve_level, setup_logging

from src import __version__


@click.group()
@click.version_option(version=__version__, prog_name="devbase-packs")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--manifest",
    "-m",
    "manifest_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to packages.yaml (default: $PACKAGES_YAML or $DEVBASE_DOT).",
)
@click.option(
    "--overlay",
    "overlay_path",
    type=click.Path(exists=False),
    default=None,
    help="Overlay file, or a custom config directory holding packages-custom.yaml.",
)
@click.option("--packs", "packs", default=None, help='Selected packs, e.g. "java node".')
@click.option("--package-manager", default=None, help="Package manager (apt, dnf).")
@click.option("--app-store", default=None, help="App store (snap, flatpak, none).")
@click.option("--wsl/--no-wsl", "wsl", default=None, help="Override WSL detection.")
@click.option(
    "--dedupe/--no-dedupe",
    default=None,
    help="Drop repeated system/snap/flatpak names across packs.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    manifest_path: str | None,
    overlay_path: str | None,
    packs: str | None,
    package_manager: str | None,
    app_store: str | None,
    wsl: bool | None,
    dedupe: bool | None,
) -> None:
    """devbase packs — resolve packages.yaml into installer plans."""
    ctx.ensure_object(dict)

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet, env=os.environ),
        log_file=os.environ.get("DEVBASE_LOG_FILE"),
        log_file_level=os.environ.get("DEVBASE_LOG_FILE_LEVEL"),
    )

    # ── Settings: environment first, CLI options on top ─────────
    settings = load_settings()
    if manifest_path:
        settings.manifest_path = Path(manifest_path)
    if overlay_path:
        overlay = Path(overlay_path)
        settings.overlay_path = find_overlay(overlay) if overlay.is_dir() else overlay
    if packs is not None:
        settings.selected_packs = parse_packs(packs)
    if package_manager:
        settings.package_manager = package_manager
    if app_store:
        settings.app_store = app_store
    if wsl is not None:
        settings.is_wsl = wsl
    if dedupe is not None:
        settings.dedupe = dedupe

    ctx.obj["settings"] = settings


# ── Register sub-command groups from src/ui/cli/ ──────────────────

from src.ui.cli.mise import mise
from src.ui.cli.packs import packs as packs_group

cli.add_command(packs_group)
cli.add_command(mise)


if __name__ == "__main__":
    cli()
