"""
Domain models — Pydantic types for manifest resolution.

All models are re-exported here for convenient access:

    from src.core.models import Category, ExecutionContext, MiseEntry
"""

from src.core.models.manifest import (
    Category,
    CustomEntry,
    Entry,
    ExecutionContext,
    FlatpakEntry,
    ManifestEntry,
    MiseEntry,
    PackInfo,
    Scope,
    SnapEntry,
    SystemEntry,
    VscodeEntry,
)

__all__ = [
    "Category",
    "CustomEntry",
    "Entry",
    "ExecutionContext",
    "FlatpakEntry",
    "ManifestEntry",
    "MiseEntry",
    "PackInfo",
    "Scope",
    "SnapEntry",
    "SystemEntry",
    "VscodeEntry",
]
