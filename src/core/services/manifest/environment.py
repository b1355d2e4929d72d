"""
Execution context: best-effort detection of distro and WSL status.

Read-only.  Used only to fill in whatever the caller did not supply
explicitly (CLI options / DEVBASE_* variables always win).
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Mapping

from src.core.models.manifest import ExecutionContext

logger = logging.getLogger(__name__)

_PM_BY_DISTRO = {
    "ubuntu": "apt",
    "debian": "apt",
    "fedora": "dnf",
    "rhel": "dnf",
    "centos": "dnf",
    "rocky": "dnf",
    "almalinux": "dnf",
}

_APP_STORE_BY_PM = {"apt": "snap", "dnf": "flatpak"}

_OS_RELEASE = Path("/etc/os-release")
_PROC_VERSION = Path("/proc/version")
_WSL_INTEROP = Path("/proc/sys/fs/binfmt_misc/WSLInterop")


def read_os_release(os_release: Path = _OS_RELEASE) -> dict[str, str]:
    """Parse os-release into a dict of unquoted values (empty if unreadable)."""
    fields: dict[str, str] = {}
    try:
        with open(os_release, encoding="utf-8") as f:
            for line in f:
                key, sep, value = line.strip().partition("=")
                if sep:
                    fields[key] = value.strip('"').strip("'")
    except (OSError, UnicodeDecodeError):
        return {}
    return fields


def package_manager_for(
    os_release: Mapping[str, str],
    which: Callable[[str], str | None] = shutil.which,
) -> str:
    """Pick the package manager for a distro.

    Known ``ID`` first, then each ``ID_LIKE`` parent, then whichever of
    apt / dnf is on PATH.  apt when nothing matches.
    """
    candidates = [os_release.get("ID", "")]
    candidates.extend(os_release.get("ID_LIKE", "").split())
    for distro in candidates:
        pm = _PM_BY_DISTRO.get(distro.lower())
        if pm:
            return pm

    for pm in ("apt", "dnf"):
        if which(pm):
            return pm
    return "apt"


def is_wsl(
    env: Mapping[str, str] | None = None,
    proc_version: Path = _PROC_VERSION,
    wsl_interop: Path = _WSL_INTEROP,
) -> bool:
    """True when running under Windows Subsystem for Linux."""
    env = os.environ if env is None else env
    if env.get("WSL_DISTRO_NAME") or env.get("WSL_INTEROP"):
        return True
    if wsl_interop.exists():
        return True
    try:
        return "microsoft" in proc_version.read_text(encoding="utf-8").lower()
    except (OSError, UnicodeDecodeError):
        return False


def detect_execution_context(
    package_manager: str | None = None,
    app_store: str | None = None,
    wsl: bool | None = None,
) -> ExecutionContext:
    """Build an execution context, probing only what was not given."""
    if package_manager is None:
        os_release = read_os_release()
        package_manager = package_manager_for(os_release)
        logger.debug(
            "Distro '%s' → package manager %s",
            os_release.get("ID") or "?",
            package_manager,
        )

    if wsl is None:
        wsl = is_wsl()

    if app_store is None:
        app_store = "none" if wsl else _APP_STORE_BY_PM.get(package_manager, "none")

    return ExecutionContext(
        package_manager=package_manager,
        app_store=app_store,
        is_wsl=wsl,
    )
