"""
Tests for CLI commands — packs list/version/show/available, mise config.
"""

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from src.main import cli


@pytest.fixture(autouse=True)
def _restore_logging(clean_env):
    """setup_logging() rewires the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _invoke(manifest: Path, *args: str):
    base = [
        "--manifest", str(manifest),
        "--package-manager", "apt",
        "--app-store", "snap",
        "--no-wsl",
    ]
    return CliRunner().invoke(cli, base + list(args))


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "packages.yaml" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestPacksList:
    """Tests for `packs list`."""

    def test_system_lines(self, manifest_path: Path):
        result = _invoke(manifest_path, "--packs", "python", "packs", "list", "system")
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "git", "curl", "build-essential", "python3", "python3-venv",
        ]

    def test_wsl_flag_filters(self, manifest_path: Path):
        result = _invoke(manifest_path, "--wsl", "--packs", "python", "packs", "list", "system")
        assert result.exit_code == 0
        assert "python3" not in result.output.splitlines()

    def test_mise_lines(self, manifest_path: Path):
        result = _invoke(manifest_path, "--packs", "", "packs", "list", "mise")
        assert result.output.splitlines() == ["node|20", "aqua:mikefarah/yq|4.40.0"]

    def test_custom_lines(self, manifest_path: Path):
        result = _invoke(manifest_path, "--packs", "java", "packs", "list", "custom")
        assert result.output.splitlines() == [
            "mise|2024.12.0|install-mise|",
            "intellij|2024.3|install-intellij|@skip-wsl",
        ]

    def test_json(self, manifest_path: Path):
        result = _invoke(manifest_path, "--packs", "", "packs", "list", "snap", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == [
            {"name": "firefox", "tags": [], "kind": "snap", "options": "--classic"}
        ]

    def test_unknown_category_empty(self, manifest_path: Path):
        result = _invoke(manifest_path, "packs", "list", "docker")
        assert result.exit_code == 0
        assert result.output == ""

    def test_missing_manifest_fails(self, tmp_path: Path):
        result = _invoke(tmp_path / "packages.yaml", "packs", "list", "system")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_dedupe_flag(self, write_yaml):
        path = write_yaml("packages.yaml", """\
            core: {common: {git: {}}}
            packs:
              a: {common: {git: {}}}
        """)
        plain = _invoke(path, "--packs", "a", "packs", "list", "system")
        deduped = _invoke(path, "--packs", "a", "--dedupe", "packs", "list", "system")
        assert plain.output.splitlines() == ["git", "git"]
        assert deduped.output.splitlines() == ["git"]

    def test_overlay_directory(self, manifest_path: Path, tmp_path: Path):
        custom = tmp_path / "custom"
        custom.mkdir()
        (custom / "packages-custom.yaml").write_text("core: {mise: {node: {version: '22'}}}\n")
        result = _invoke(
            manifest_path, "--overlay", str(custom), "--packs", "", "packs", "version", "node"
        )
        assert result.output.strip() == "22"


class TestPacksLookups:
    def test_version(self, manifest_path: Path):
        result = _invoke(manifest_path, "--packs", "node", "packs", "version", "node")
        assert result.exit_code == 0
        assert result.output.strip() == "20"

    def test_version_missing_prints_empty(self, manifest_path: Path):
        result = _invoke(manifest_path, "packs", "version", "nope")
        assert result.exit_code == 0
        assert result.output.strip() == ""

    def test_show(self, manifest_path: Path):
        result = _invoke(manifest_path, "packs", "show", "java", "--no-vscode")
        assert result.output.splitlines() == ["java", "intellij", "+ 3 system packages"]

    def test_available(self, manifest_path: Path):
        result = _invoke(manifest_path, "packs", "available")
        assert result.output.splitlines() == [
            "python|Python development",
            "node|Node.js development",
            "java|Java development",
        ]

    def test_app_store(self, manifest_path: Path):
        result = _invoke(manifest_path, "packs", "app-store")
        assert result.output.splitlines() == ["firefox|--classic"]

    def test_runtimes(self, manifest_path: Path):
        result = _invoke(manifest_path, "--packs", "java go", "packs", "runtimes")
        assert result.output.strip() == "java maven gradle go"

    def test_categories(self):
        result = CliRunner().invoke(cli, ["packs", "categories"])
        assert result.output.split() == ["system", "snap", "flatpak", "mise", "custom", "vscode"]

    def test_packs_from_env(self, manifest_path: Path, monkeypatch):
        monkeypatch.setenv("DEVBASE_SELECTED_PACKS", "java")
        result = _invoke(manifest_path, "packs", "version", "java")
        assert result.output.strip() == "temurin-21"


class TestMiseConfig:
    def test_writes_file(self, manifest_path: Path, tmp_path: Path):
        out = tmp_path / "config.toml"
        result = _invoke(manifest_path, "--packs", "", "mise", "config", str(out))
        assert result.exit_code == 0
        assert out.read_text().endswith(
            '[tools]\nnode = "20"\n"aqua:mikefarah/yq" = "4.40.0"\n'
        )

    def test_template_option(self, manifest_path: Path, tmp_path: Path):
        template = tmp_path / "template.toml"
        template.write_text("[settings]\njobs = 1\n[tools]\n")
        out = tmp_path / "config.toml"
        _invoke(manifest_path, "--packs", "", "mise", "config", str(out), "--template", str(template))
        assert out.read_text().startswith("[settings]\njobs = 1\n\n[tools]\n")

    def test_missing_manifest(self, tmp_path: Path):
        out = tmp_path / "config.toml"
        result = _invoke(tmp_path / "missing.yaml", "mise", "config", str(out))
        assert result.exit_code == 1
        assert not out.exists()
