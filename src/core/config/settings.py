"""
Resolver settings — where the manifests live and which packs are selected.

Everything comes from environment variables set by the bootstrap
(``DEVBASE_*``, ``PACKAGES_*``).  CLI options override them.

Manifest paths, in precedence order:
    base:     PACKAGES_YAML  >  $DEVBASE_DOT/.config/devbase/packages.yaml
    overlay:  PACKAGES_CUSTOM_YAML  >  $DEVBASE_CUSTOM_PACKAGES/packages-custom.yaml
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from src.core.config.loader import MANIFEST_FILE, find_overlay

# Packs selected when the user has not chosen any
DEFAULT_PACKS: tuple[str, ...] = ("java", "node", "python", "go", "ruby")

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def parse_packs(value: str | None) -> tuple[str, ...]:
    """Split a space-separated pack list, keeping order."""
    if not value:
        return ()
    return tuple(value.split())


def parse_flag(value: str | None) -> bool | None:
    """Parse a yes/no env value.  Anything unrecognized → None."""
    if value is None:
        return None
    token = value.strip().lower()
    if token in _TRUTHY:
        return True
    if token in _FALSY:
        return False
    return None


@dataclass
class ResolverSettings:
    """Resolved configuration for one resolution session."""

    manifest_path: Path
    overlay_path: Path | None = None
    selected_packs: tuple[str, ...] = DEFAULT_PACKS
    package_manager: str | None = None
    app_store: str | None = None
    is_wsl: bool | None = None
    dedupe: bool = False
    mise_template: Path | None = None


def default_manifest_path(env: Mapping[str, str]) -> Path:
    """Base manifest location derived from the dotfiles root."""
    explicit = env.get("PACKAGES_YAML")
    if explicit:
        return Path(explicit)
    dot = env.get("DEVBASE_DOT")
    root = Path(dot) if dot else Path.cwd() / "dot"
    return root / ".config" / "devbase" / MANIFEST_FILE


def load_settings(env: Mapping[str, str] | None = None) -> ResolverSettings:
    """Build settings from the environment.

    Args:
        env: Mapping to read from (default: ``os.environ``).
    """
    env = os.environ if env is None else env

    overlay: Path | None = None
    if env.get("PACKAGES_CUSTOM_YAML"):
        overlay = Path(env["PACKAGES_CUSTOM_YAML"])
    elif env.get("DEVBASE_CUSTOM_PACKAGES"):
        overlay = find_overlay(Path(env["DEVBASE_CUSTOM_PACKAGES"]))

    packs = (
        parse_packs(env.get("DEVBASE_SELECTED_PACKS"))
        or parse_packs(env.get("DEVBASE_DEFAULT_PACKS"))
        or DEFAULT_PACKS
    )

    template = env.get("DEVBASE_MISE_TEMPLATE")
    if not template and env.get("DEVBASE_DOT"):
        template = str(Path(env["DEVBASE_DOT"]) / ".config" / "mise" / "config.toml")

    return ResolverSettings(
        manifest_path=default_manifest_path(env),
        overlay_path=overlay,
        selected_packs=packs,
        package_manager=env.get("DEVBASE_PKG_MANAGER") or None,
        app_store=env.get("DEVBASE_APP_STORE") or None,
        is_wsl=parse_flag(env.get("DEVBASE_WSL")),
        dedupe=bool(parse_flag(env.get("DEVBASE_DEDUPE"))),
        mise_template=Path(template) if template else None,
    )
