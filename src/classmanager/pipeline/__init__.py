from classmanager.pipeline.processor import (
    CUSTOM_CSS,
    CUSTOM_CSS_MIN,
    DEFAULT_CSS,
    EDITOR_SAFE_CSS,
    ROOT_VARS_CSS,
    CSSArtifacts,
    CSSPaths,
    CSSProcessor,
    FileInfo,
    build_artifacts,
    format_file_size,
)

__all__ = [
    "CUSTOM_CSS",
    "CUSTOM_CSS_MIN",
    "DEFAULT_CSS",
    "EDITOR_SAFE_CSS",
    "ROOT_VARS_CSS",
    "CSSArtifacts",
    "CSSPaths",
    "CSSProcessor",
    "FileInfo",
    "build_artifacts",
    "format_file_size",
]
