"""
Package manifest resolution — package re-exports.

    from src.core.services.manifest import ResolutionSession, generate_mise_config

Layers, leaves first:
    scope       which manifest sub-trees feed a category
    tags        per-entry exclusion in the current environment
    session     merged document + packs + context → typed entries
    projection  typed entries → installer lines / mise config.toml
"""

from src.core.services.manifest.environment import (  # noqa: F401
    detect_execution_context,
)
from src.core.services.manifest.projection import (  # noqa: F401
    format_entry,
    format_lines,
    generate_mise_config,
    mise_tool_line,
    render_mise_config,
)
from src.core.services.manifest.scope import iter_scopes  # noqa: F401
from src.core.services.manifest.session import ResolutionSession  # noqa: F401
from src.core.services.manifest.tags import should_skip  # noqa: F401
