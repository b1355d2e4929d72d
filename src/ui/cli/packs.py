"""
CLI commands for package manifest resolution.

Thin wrappers over ``src.core.services.manifest``.  Line output goes
to stdout (installers read it); errors go to stderr.
"""

from __future__ import annotations

import json
import sys

import click

from src.core.config.loader import ManifestError
from src.core.models.manifest import Category
from src.core.services.manifest.projection import format_lines
from src.core.services.manifest.session import ResolutionSession


def _open_session(ctx: click.Context) -> ResolutionSession:
    """Build a session from the settings the root command collected."""
    return ResolutionSession.from_settings(ctx.obj["settings"])


def _fail(error: ManifestError) -> None:
    click.secho(f"❌ {error}", fg="red", err=True)
    sys.exit(1)


def _echo_entries(entries: list, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return
    for line in format_lines(entries):
        click.echo(line)


@click.group()
def packs() -> None:
    """Packs — list, version, show, available, runtimes."""


# ── Resolve ─────────────────────────────────────────────────────


@packs.command("list")
@click.argument("category")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_entries(ctx: click.Context, category: str, as_json: bool) -> None:
    """List resolved entries for CATEGORY.

    CATEGORY is one of: system, snap, flatpak, mise, custom, vscode.
    Unknown categories print nothing.
    """
    session = _open_session(ctx)
    try:
        entries = session.resolve(category)
    except ManifestError as e:
        _fail(e)
        return
    _echo_entries(entries, as_json)


@packs.command("app-store")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def app_store(ctx: click.Context, as_json: bool) -> None:
    """List snap or flatpak entries, whichever store this system uses."""
    session = _open_session(ctx)
    try:
        entries = session.app_store_packages()
    except ManifestError as e:
        _fail(e)
        return
    _echo_entries(entries, as_json)


# ── Lookups ─────────────────────────────────────────────────────


@packs.command()
@click.argument("tool")
@click.pass_context
def version(ctx: click.Context, tool: str) -> None:
    """Print the pinned version of TOOL (empty if none)."""
    session = _open_session(ctx)
    try:
        found = session.get_tool_version(tool)
    except ManifestError as e:
        _fail(e)
        return
    click.echo(found)


@packs.command()
@click.argument("pack")
@click.option("--no-vscode", is_flag=True, help="Leave VS Code extensions out.")
@click.pass_context
def show(ctx: click.Context, pack: str, no_vscode: bool) -> None:
    """Show what PACK installs."""
    session = _open_session(ctx)
    try:
        lines = session.get_pack_contents(pack, show_vscode=not no_vscode)
    except ManifestError as e:
        _fail(e)
        return
    for line in lines:
        click.echo(line)


@packs.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def available(ctx: click.Context, as_json: bool) -> None:
    """List every pack in the manifest as name|description."""
    session = _open_session(ctx)
    try:
        infos = session.available_packs()
    except ManifestError as e:
        _fail(e)
        return

    if as_json:
        click.echo(json.dumps([p.model_dump() for p in infos], indent=2))
        return
    for info in infos:
        click.echo(f"{info.name}|{info.description}")


@packs.command()
@click.pass_context
def runtimes(ctx: click.Context) -> None:
    """Print the language runtimes implied by the selected packs."""
    session = _open_session(ctx)
    click.echo(" ".join(session.core_runtimes()))


@packs.command()
def categories() -> None:
    """List the categories `list` understands."""
    for category in Category:
        click.echo(category.value)
