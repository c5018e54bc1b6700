from .analyzer import (
    DEAD_CODE_FLAG,
    TAINT_ANALYSIS_FLAG,
    AnalyzerNotFoundError,
    AnalyzerRun,
    build_command,
    run_analyzer,
)
from .workspace import (
    DEFAULT_ANALYZER_CONFIG,
    Workspace,
    WorkspaceError,
    render_analyzer_config,
    render_autoload_map,
)

__all__ = [
    "DEAD_CODE_FLAG",
    "DEFAULT_ANALYZER_CONFIG",
    "TAINT_ANALYSIS_FLAG",
    "AnalyzerNotFoundError",
    "AnalyzerRun",
    "Workspace",
    "WorkspaceError",
    "build_command",
    "render_analyzer_config",
    "render_autoload_map",
    "run_analyzer",
]
