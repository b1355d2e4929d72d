"""
Manifest store — reads packages.yaml (+ optional overlay) into one document.

The base manifest is mandatory: without it nothing can be resolved.
The overlay (an organization's packages-custom.yaml) is best-effort:
if it is missing or broken, we log and carry on with the base alone.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from src.core.config.merge import deep_merge

logger = logging.getLogger(__name__)

# Default file names
MANIFEST_FILE = "packages.yaml"
OVERLAY_FILE = "packages-custom.yaml"


class ManifestError(Exception):
    """Base class for manifest loading failures."""


class ConfigurationMissing(ManifestError):
    """Raised when the base manifest does not exist."""


class ConfigurationMalformed(ManifestError):
    """Raised when a manifest cannot be read or parsed."""


def find_overlay(custom_dir: Path | None) -> Path | None:
    """Locate the overlay inside an organization's custom config directory.

    Returns:
        Path to ``packages-custom.yaml``, or None if not present.
    """
    if custom_dir is None:
        return None
    candidate = Path(custom_dir) / OVERLAY_FILE
    return candidate if candidate.is_file() else None


def read_manifest(path: Path) -> dict[str, Any]:
    """Read and parse a single manifest file.

    An empty file is an empty manifest.

    Raises:
        ConfigurationMissing: If the file does not exist.
        ConfigurationMalformed: If it is unreadable, invalid YAML,
            or not a mapping.
    """
    if not path.is_file():
        raise ConfigurationMissing(f"Package configuration not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationMalformed(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationMalformed(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationMalformed(
            f"Expected a YAML mapping in {path}, got {type(data).__name__}"
        )
    return data


class ManifestStore:
    """Loads and memoizes the merged manifest.

    Args:
        base_path: Path to packages.yaml.
        overlay_path: Optional path to packages-custom.yaml.
    """

    def __init__(self, base_path: Path, overlay_path: Path | None = None) -> None:
        self.base_path = Path(base_path)
        self.overlay_path = Path(overlay_path) if overlay_path else None
        self._merged: dict[str, Any] | None = None

    def load(self) -> dict[str, Any]:
        """Return the merged manifest, reading files on first call only."""
        if self._merged is not None:
            return self._merged

        logger.debug("Loading package manifest from %s", self.base_path)
        base = read_manifest(self.base_path)
        overlay = self._load_overlay()
        self._merged = deep_merge(base, overlay)

        logger.info(
            "Loaded manifest %s%s (%d packs)",
            self.base_path,
            f" + {self.overlay_path}" if overlay is not None else "",
            len(self._merged.get("packs") or {}),
        )
        return self._merged

    def invalidate(self) -> None:
        """Drop the cached document; the next load() re-reads the files."""
        self._merged = None

    def _load_overlay(self) -> dict[str, Any] | None:
        if self.overlay_path is None:
            return None
        try:
            return read_manifest(self.overlay_path)
        except ConfigurationMissing:
            logger.warning("Overlay %s not found, using base manifest only", self.overlay_path)
        except ConfigurationMalformed as e:
            logger.warning("Ignoring overlay: %s", e)
        return None
