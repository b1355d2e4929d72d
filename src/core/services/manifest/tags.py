"""
Tag filter — per-entry exclusion predicates.

An entry is skipped when ANY of its tags has a predicate that holds
in the current execution context.  Tags without a predicate are
ignored, so manifests can carry tags newer than this code.
"""

from __future__ import annotations

from typing import Callable, Iterable

from src.core.models.manifest import ExecutionContext

SKIP_WSL = "@skip-wsl"

_SKIP_PREDICATES: dict[str, Callable[[ExecutionContext], bool]] = {
    SKIP_WSL: lambda ctx: ctx.is_wsl,
}


def should_skip(tags: Iterable[str], context: ExecutionContext) -> bool:
    """True if the entry must be left out in this context."""
    for tag in tags:
        predicate = _SKIP_PREDICATES.get(tag)
        if predicate is not None and predicate(context):
            return True
    return False
