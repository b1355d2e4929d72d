"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from src.core.config.loader import ManifestStore
from src.core.models.manifest import ExecutionContext
from src.core.services.manifest.session import ResolutionSession

SAMPLE_MANIFEST = textwrap.dedent("""\
    core:
      common:
        git: {}
        curl: {}
      apt:
        build-essential: {}
      dnf:
        gcc: {}
      snap:
        firefox:
          options: "--classic"
      flatpak:
        org.mozilla.firefox: {}
        com.example.Tool:
          remote: example
      mise:
        node:
          version: "20"
        yq:
          version: "4.40.0"
          backend: "aqua:mikefarah/yq"
      custom:
        mise:
          version: "2024.12.0"
          installer: install-mise
      vscode:
        editorconfig.editorconfig:
          version: "0.16.4"

    packs:
      python:
        description: "Python development"
        common:
          python3:
            tags: ["@skip-wsl"]
        apt:
          python3-venv: {}
        mise:
          python:
            version: "3.12"
      node:
        description: "Node.js development"
        mise:
          node:
            version: "18"
          pnpm:
            version: "9"
        vscode:
          dbaeumer.vscode-eslint: {}
      java:
        description: "Java development"
        mise:
          java:
            version: "temurin-21"
        custom:
          intellij:
            version: "2024.3"
            installer: install-intellij
            tags: ["@skip-wsl"]
        vscode:
          vscjava.vscode-java-pack:
            version: "0.29.0"
        common:
          maven: {}
        apt:
          openjdk-21-jdk: {}
          ant: {}
""")


@pytest.fixture
def write_yaml(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write dedented YAML text to a file under tmp_path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(content))
        return path

    return _write


@pytest.fixture
def manifest_path(tmp_path: Path) -> Path:
    """The sample packages.yaml on disk."""
    path = tmp_path / "packages.yaml"
    path.write_text(SAMPLE_MANIFEST)
    return path


@pytest.fixture
def apt_context() -> ExecutionContext:
    return ExecutionContext(package_manager="apt", app_store="snap", is_wsl=False)


@pytest.fixture
def make_session(manifest_path: Path, apt_context: ExecutionContext):
    """Factory for sessions over the sample manifest."""

    def _make(packs=("python", "node", "java"), context=None, overlay=None, dedupe=False):
        store = ManifestStore(manifest_path, overlay)
        return ResolutionSession(store, packs, context or apt_context, dedupe=dedupe)

    return _make


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove DEVBASE_* / PACKAGES_* variables that would leak into settings."""
    for name in (
        "PACKAGES_YAML",
        "PACKAGES_CUSTOM_YAML",
        "DEVBASE_DOT",
        "DEVBASE_CUSTOM_PACKAGES",
        "DEVBASE_SELECTED_PACKS",
        "DEVBASE_DEFAULT_PACKS",
        "DEVBASE_PKG_MANAGER",
        "DEVBASE_APP_STORE",
        "DEVBASE_WSL",
        "DEVBASE_DEDUPE",
        "DEVBASE_MISE_TEMPLATE",
        "DEVBASE_LOG_LEVEL",
        "DEVBASE_LOG_FILE",
        "DEVBASE_LOG_FILE_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
