"""
Manifest models — typed entries resolved from packages.yaml.

The manifest itself stays a plain merged mapping (it is patched by
overlays and read best-effort).  What comes OUT of resolution is typed:
one variant per category, all sharing ``name`` and ``tags``.

    core:
      common:   {git: {}, curl: {}}
      apt:      {build-essential: {}}
      mise:     {node: {version: "20"}}
    packs:
      python:
        description: "Python development"
        common:  {python3: {tags: ["@skip-wsl"]}}
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(StrEnum):
    """Tool kinds a manifest can declare."""

    SYSTEM = "system"
    SNAP = "snap"
    FLATPAK = "flatpak"
    MISE = "mise"
    CUSTOM = "custom"
    VSCODE = "vscode"


# Manager-agnostic key for system packages (sits next to apt/dnf/...)
COMMON_KEY = "common"

DEFAULT_FLATPAK_REMOTE = "flathub"


def _as_text(value: Any) -> str:
    """YAML scalars → string.  ``version: 20`` must read as ``"20"``."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        raise ValueError(f"expected a scalar, got {type(value).__name__}")
    return str(value)


class ManifestEntry(BaseModel):
    """Fields every entry carries, whatever its category."""

    model_config = ConfigDict(frozen=True)

    name: str
    tags: tuple[str, ...] = ()

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,) if value else ()
        if isinstance(value, (list, tuple, set)):
            return tuple(_as_text(v) for v in value if v is not None)
        raise ValueError(f"tags must be a list, got {type(value).__name__}")


class SystemEntry(ManifestEntry):
    """A distro package (apt/dnf), from ``common`` or the manager key."""

    kind: Literal["system"] = "system"


class SnapEntry(ManifestEntry):
    kind: Literal["snap"] = "snap"
    options: str = ""

    @field_validator("options", mode="before")
    @classmethod
    def coerce_scalar(cls, value: Any) -> str:
        return _as_text(value)


class FlatpakEntry(ManifestEntry):
    kind: Literal["flatpak"] = "flatpak"
    remote: str = DEFAULT_FLATPAK_REMOTE

    @field_validator("remote", mode="before")
    @classmethod
    def default_remote(cls, value: Any) -> str:
        return _as_text(value) or DEFAULT_FLATPAK_REMOTE


class MiseEntry(ManifestEntry):
    """A tool managed by mise.

    ``backend`` overrides the registry key, e.g. ``aqua:mikefarah/yq``
    for an entry named ``yq``.
    """

    kind: Literal["mise"] = "mise"
    version: str = ""
    backend: str = ""

    @field_validator("version", "backend", mode="before")
    @classmethod
    def coerce_scalar(cls, value: Any) -> str:
        return _as_text(value)

    @property
    def tool_key(self) -> str:
        return self.backend or self.name


class CustomEntry(ManifestEntry):
    """A tool installed by a dedicated installer script."""

    kind: Literal["custom"] = "custom"
    version: str = ""
    installer: str = ""

    @field_validator("version", "installer", mode="before")
    @classmethod
    def coerce_scalar(cls, value: Any) -> str:
        return _as_text(value)


class VscodeEntry(ManifestEntry):
    """A VS Code extension; ``name`` is the extension id."""

    kind: Literal["vscode"] = "vscode"
    version: str = ""

    @field_validator("version", mode="before")
    @classmethod
    def coerce_scalar(cls, value: Any) -> str:
        return _as_text(value)


Entry = Union[
    SystemEntry, SnapEntry, FlatpakEntry, MiseEntry, CustomEntry, VscodeEntry
]

ENTRY_TYPES: dict[Category, type[ManifestEntry]] = {
    Category.SYSTEM: SystemEntry,
    Category.SNAP: SnapEntry,
    Category.FLATPAK: FlatpakEntry,
    Category.MISE: MiseEntry,
    Category.CUSTOM: CustomEntry,
    Category.VSCODE: VscodeEntry,
}


class ExecutionContext(BaseModel):
    """Runtime facts supplied by distro / WSL detection."""

    model_config = ConfigDict(frozen=True)

    package_manager: str = "apt"
    app_store: str = "none"
    is_wsl: bool = False


class PackInfo(BaseModel):
    """A selectable pack as listed to the user."""

    name: str
    description: str = ""


class Scope(BaseModel):
    """One manifest sub-tree contributing entries to a resolution."""

    label: str  # dotted path, e.g. "packs.python.common"
    entries: dict[Any, Any] = Field(default_factory=dict)
