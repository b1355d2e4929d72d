"""
Projection — typed entries → line formats and mise config.toml.

The pipe-delimited lines are the contract with the shell installers:

    system    name
    snap      name|options
    flatpak   name|remote
    mise      tool_key|version
    custom    name|version|installer|tags
    vscode    extension_id|version|tags

The ``[tools]`` section of the mise config follows TOML key rules:
bare keys cannot contain ``:`` or ``[``, so backend-qualified keys
like ``aqua:mikefarah/yq`` are quoted.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from src.core.models.manifest import (
    CustomEntry,
    Entry,
    FlatpakEntry,
    MiseEntry,
    SnapEntry,
    SystemEntry,
    VscodeEntry,
)

if TYPE_CHECKING:
    from src.core.services.manifest.session import ResolutionSession

logger = logging.getLogger(__name__)

TOOLS_HEADER = "[tools]"

DEFAULT_MISE_PREAMBLE = """\
# Auto-generated from packages.yaml - DO NOT EDIT DIRECTLY
# To modify tools, edit packages.yaml and re-run setup

[settings]
experimental = true
legacy_version_file = false
asdf_compat = false
jobs = 6
yes = true
http_timeout = "90s"

[env]
HTTP_PROXY = "{{ get_env(name='HTTP_PROXY', default='') }}"
HTTPS_PROXY = "{{ get_env(name='HTTPS_PROXY', default='') }}"
NO_PROXY = "{{ get_env(name='NO_PROXY', default='') }}"
http_proxy = "{{ get_env(name='http_proxy', default='') }}"
https_proxy = "{{ get_env(name='https_proxy', default='') }}"
no_proxy = "{{ get_env(name='no_proxy', default='') }}"
PIP_INDEX_URL = "{{ get_env(name='PIP_INDEX_URL', default='') }}"
NPM_CONFIG_REGISTRY = "{{ get_env(name='NPM_CONFIG_REGISTRY', default='') }}"
RUBY_CONFIGURE_OPTS = "--with-openssl-dir=/usr"
"""


# ── Line formats ────────────────────────────────────────────────


def format_entry(entry: Entry) -> str:
    """Serialize one entry to its pipe-delimited line."""
    tags = ",".join(entry.tags)
    if isinstance(entry, SystemEntry):
        return entry.name
    if isinstance(entry, SnapEntry):
        return f"{entry.name}|{entry.options}"
    if isinstance(entry, FlatpakEntry):
        return f"{entry.name}|{entry.remote}"
    if isinstance(entry, MiseEntry):
        return f"{entry.tool_key}|{entry.version}"
    if isinstance(entry, CustomEntry):
        return f"{entry.name}|{entry.version}|{entry.installer}|{tags}"
    if isinstance(entry, VscodeEntry):
        return f"{entry.name}|{entry.version}|{tags}"
    raise TypeError(f"Unsupported entry type: {type(entry).__name__}")


def format_lines(entries: Iterable[Entry]) -> list[str]:
    return [format_entry(e) for e in entries]


# ── mise config ─────────────────────────────────────────────────


def mise_tool_line(key: str, version: str) -> str:
    """One ``[tools]`` assignment, quoting keys TOML won't take bare."""
    if ":" in key or "[" in key:
        return f'"{key}" = "{version}"'
    return f'{key} = "{version}"'


def read_template_preamble(template_path: Path) -> str:
    """Everything in a template config before its ``[tools]`` header."""
    kept: list[str] = []
    with open(template_path, encoding="utf-8") as f:
        for line in f:
            if line.rstrip("\r\n") == TOOLS_HEADER:
                break
            kept.append(line)
    text = "".join(kept)
    if text and not text.endswith("\n"):
        text += "\n"
    return text


def render_mise_config(entries: Iterable[MiseEntry], preamble: str | None = None) -> str:
    """Build the full config.toml text.

    Entries without a key or a version are left out; mise needs both.
    """
    lines = [preamble if preamble is not None else DEFAULT_MISE_PREAMBLE]
    lines.append(f"\n{TOOLS_HEADER}\n")
    for entry in entries:
        if not entry.tool_key or not entry.version:
            logger.debug("No version for mise tool '%s', leaving it out", entry.name)
            continue
        lines.append(mise_tool_line(entry.tool_key, entry.version) + "\n")
    return "".join(lines)


def generate_mise_config(
    session: ResolutionSession,
    output_path: Path,
    template_path: Path | None = None,
) -> Path:
    """Write mise's config.toml for the session's packs.

    The preamble is copied from ``template_path`` (up to its
    ``[tools]`` header) when that file exists, else a built-in block.
    Callers sharing an output path must not run this concurrently.

    Returns:
        The path written.
    """
    preamble: str | None = None
    if template_path is not None and template_path.is_file():
        preamble = read_template_preamble(template_path)
        logger.debug("Using mise preamble from %s", template_path)

    tools = [e for e in session.resolve("mise") if isinstance(e, MiseEntry)]
    content = render_mise_config(tools, preamble)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    logger.info("Wrote mise config with %d tools to %s", len(tools), output_path)
    return output_path
