"""devbase-packs — package manifest resolution for devbase installers."""

__version__ = "0.1.0"
