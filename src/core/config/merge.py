"""
Merge engine — overlay a patch document onto a base document.

Rules:
    mapping  + mapping   → merged key-by-key, recursively
    anything + non-map   → overlay value replaces base wholesale
                           (lists are NOT merged element-wise)

Inputs are never mutated; the result shares no containers with them.
"""

from __future__ import annotations

import copy
from typing import Any


def deep_merge(base: dict[str, Any], overlay: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return ``base`` with ``overlay`` merged on top.

    Args:
        base: The base document.
        overlay: Patch document.  ``None`` or ``{}`` → a copy of base.

    Returns:
        A new merged mapping.
    """
    merged = copy.deepcopy(base)
    if not overlay:
        return merged

    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
