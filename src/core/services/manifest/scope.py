"""
Scope selection — which manifest sub-trees feed a category.

Order is fixed and explicit:

    system packages:   core.common, core.<pm>,
                       then per pack: packs.<p>.common, packs.<p>.<pm>
    everything else:   core.<category>, then per pack: packs.<p>.<category>

Missing keys, unknown packs and sub-trees that are not mappings
simply contribute nothing.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Sequence

from src.core.models.manifest import COMMON_KEY, Category, ExecutionContext, Scope

logger = logging.getLogger(__name__)


def _mapping(node: Any) -> dict[str, Any]:
    return node if isinstance(node, dict) else {}


def get_pack(document: dict[str, Any], pack: str) -> dict[str, Any] | None:
    """Look up a pack node, or None if the manifest has no such pack."""
    node = _mapping(document.get("packs")).get(pack)
    return node if isinstance(node, dict) else None


def category_keys(category: Category, context: ExecutionContext) -> list[str]:
    """Sub-tree keys one scope contributes for a category."""
    if category == Category.SYSTEM:
        return [COMMON_KEY, context.package_manager]
    return [category.value]


def iter_scopes(
    document: dict[str, Any],
    category: Category,
    packs: Sequence[str],
    context: ExecutionContext,
) -> Iterator[Scope]:
    """Yield scopes for a category, core first, then packs in order.

    Args:
        document: Merged manifest.
        category: Requested category.
        packs: Selected pack names, in priority order.
        context: Execution context (package manager for system packages).
    """
    keys = category_keys(category, context)
    owners: list[tuple[str, dict[str, Any] | None]] = [
        ("core", _mapping(document.get("core"))),
    ]
    for pack in packs:
        node = get_pack(document, pack)
        if node is None:
            logger.debug("Pack '%s' not in manifest, skipping", pack)
        owners.append((f"packs.{pack}", node))

    for prefix, node in owners:
        if node is None:
            continue
        for key in keys:
            sub = node.get(key)
            if sub is None:
                continue
            if not isinstance(sub, dict):
                logger.debug("%s.%s is not a mapping, ignoring", prefix, key)
                continue
            yield Scope(label=f"{prefix}.{key}", entries=sub)
