"""
Resolution session — the manifest, the pack selection and the context, together.

A session owns its merged document.  To resolve against a changed
environment (new packs, overlay, WSL status), build a new session;
nothing here is process-global.

Resolution never raises on manifest content: once the document is
loaded, malformed sub-trees and entries just produce fewer results.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from pydantic import ValidationError

from src.core.config.loader import ManifestStore
from src.core.config.settings import ResolverSettings
from src.core.models.manifest import (
    COMMON_KEY,
    ENTRY_TYPES,
    Category,
    CustomEntry,
    Entry,
    ExecutionContext,
    MiseEntry,
    PackInfo,
)
from src.core.services.manifest.environment import detect_execution_context
from src.core.services.manifest.scope import get_pack, iter_scopes
from src.core.services.manifest.tags import should_skip

logger = logging.getLogger(__name__)

# Categories whose output can be deduplicated by name
DEDUPABLE = frozenset({Category.SYSTEM, Category.SNAP, Category.FLATPAK})

# Core language runtimes implied by each pack
PACK_RUNTIMES: dict[str, tuple[str, ...]] = {
    "java": ("java", "maven", "gradle"),
    "node": ("node",),
    "python": ("python",),
    "go": ("go",),
    "ruby": ("ruby",),
    "rust": ("rust",),
}


def _coerce_category(category: Category | str) -> Category | None:
    if isinstance(category, Category):
        return category
    try:
        return Category(category)
    except ValueError:
        return None


def build_entry(category: Category, name: Any, attrs: Any) -> Entry | None:
    """Turn one manifest ``name: {attrs}`` pair into a typed entry.

    Returns None (and logs) when the attributes cannot be interpreted.
    """
    if attrs is None:
        attrs = {}
    if not isinstance(attrs, dict) and category == Category.SYSTEM:
        # System packages need only their name; a stray scalar value
        # (``weird: "x"``) still names a package.
        attrs = {}
    if not isinstance(attrs, dict):
        logger.debug("Entry '%s' (%s) is not a mapping, skipping", name, category)
        return None

    data = {k: v for k, v in attrs.items() if k not in ("name", "kind")}
    data["name"] = str(name)
    try:
        return ENTRY_TYPES[category].model_validate(data)  # type: ignore[return-value]
    except ValidationError as e:
        logger.debug("Entry '%s' (%s) is malformed, skipping: %s", name, category, e)
        return None


class ResolutionSession:
    """Resolves manifest entries for one environment.

    Args:
        store: Manifest store (loaded lazily on first use).
        packs: Selected packs; order sets output order and precedence.
        context: Execution context from distro / WSL detection.
        dedupe: Keep only the first system/snap/flatpak entry per name.
    """

    def __init__(
        self,
        store: ManifestStore,
        packs: Sequence[str],
        context: ExecutionContext,
        *,
        dedupe: bool = False,
    ) -> None:
        self.store = store
        self.packs: tuple[str, ...] = tuple(packs)
        self.context = context
        self.dedupe = dedupe
        self._document: dict[str, Any] | None = None

    @classmethod
    def from_settings(cls, settings: ResolverSettings) -> ResolutionSession:
        """Open a session from resolver settings, probing what is unset."""
        context = detect_execution_context(
            package_manager=settings.package_manager,
            app_store=settings.app_store,
            wsl=settings.is_wsl,
        )
        store = ManifestStore(settings.manifest_path, settings.overlay_path)
        return cls(store, settings.selected_packs, context, dedupe=settings.dedupe)

    @property
    def document(self) -> dict[str, Any]:
        """The merged manifest (loaded once per session)."""
        if self._document is None:
            self._document = self.store.load()
        return self._document

    # ── Entries ─────────────────────────────────────────────────

    def resolve(self, category: Category | str) -> list[Entry]:
        """All applicable entries for a category, in scope order.

        Unknown categories resolve to an empty list.
        """
        cat = _coerce_category(category)
        if cat is None:
            logger.debug("Unknown category '%s', nothing to resolve", category)
            return []

        entries: list[Entry] = []
        for scope in iter_scopes(self.document, cat, self.packs, self.context):
            for name, attrs in scope.entries.items():
                entry = build_entry(cat, name, attrs)
                if entry is None:
                    continue
                if should_skip(entry.tags, self.context):
                    logger.debug("Skipping %s from %s (tags: %s)", entry.name, scope.label, entry.tags)
                    continue
                entries.append(entry)

        if self.dedupe and cat in DEDUPABLE:
            entries = _first_per_name(entries)

        logger.debug("Resolved %d %s entries", len(entries), cat)
        return entries

    def app_store_packages(self) -> list[Entry]:
        """Snap or flatpak entries, whichever store this system uses."""
        store = self.context.app_store
        if store == Category.SNAP:
            return self.resolve(Category.SNAP)
        if store == Category.FLATPAK:
            return self.resolve(Category.FLATPAK)
        return []

    # ── Lookups ─────────────────────────────────────────────────

    def get_tool_version(self, name: str) -> str:
        """Version of a tool from custom/mise sections, or ``""``.

        Search order: core.custom, core.mise, then for each selected
        pack its custom and mise sections.  Core always wins.
        """
        owners: list[dict[str, Any] | None] = [self.document.get("core")]
        owners.extend(get_pack(self.document, pack) for pack in self.packs)

        for node in owners:
            if not isinstance(node, dict):
                continue
            for category in (Category.CUSTOM, Category.MISE):
                section = node.get(category.value)
                if not isinstance(section, dict) or name not in section:
                    continue
                entry = build_entry(category, name, section[name])
                if isinstance(entry, (CustomEntry, MiseEntry)) and entry.version:
                    return entry.version
        return ""

    def get_pack_contents(self, pack: str, show_vscode: bool = True) -> list[str]:
        """Human-friendly summary of what a pack installs.

        Lists mise tools and custom installers by name, VS Code
        extensions (optionally), then a count of system packages.
        """
        node = get_pack(self.document, pack)
        if node is None:
            return []

        lines: list[str] = []
        lines.extend(_keys(node, Category.MISE.value))
        lines.extend(_keys(node, Category.CUSTOM.value))
        if show_vscode:
            lines.extend(f"{ext} (VS Code)" for ext in _keys(node, Category.VSCODE.value))

        system_count = len(_keys(node, COMMON_KEY)) + len(
            _keys(node, self.context.package_manager)
        )
        if system_count > 0:
            lines.append(f"+ {system_count} system packages")
        return lines

    def available_packs(self) -> list[PackInfo]:
        """Every pack in the manifest, with its description."""
        packs = self.document.get("packs")
        if not isinstance(packs, dict):
            return []
        result: list[PackInfo] = []
        for name, node in packs.items():
            desc = node.get("description") if isinstance(node, dict) else None
            result.append(PackInfo(name=str(name), description=str(desc) if desc else ""))
        return result

    def core_runtimes(self) -> list[str]:
        """Language runtimes implied by the selected packs."""
        runtimes: list[str] = []
        for pack in self.packs:
            runtimes.extend(PACK_RUNTIMES.get(pack, ()))
        return runtimes


def _keys(node: dict[str, Any], key: str) -> list[str]:
    section = node.get(key)
    return [str(k) for k in section] if isinstance(section, dict) else []


def _first_per_name(entries: list[Entry]) -> list[Entry]:
    seen: set[str] = set()
    unique: list[Entry] = []
    for entry in entries:
        if entry.name in seen:
            continue
        seen.add(entry.name)
        unique.append(entry)
    return unique
