"""Language detection from file extensions."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, Optional

LANGUAGE_BY_EXTENSION: Dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescriptreact",
    "js": "javascript",
    "jsx": "javascriptreact",
    "py": "python",
    "java": "java",
    "cpp": "cpp",
    "c": "c",
    "cs": "csharp",
    "go": "go",
    "rs": "rust",
    "rb": "ruby",
    "php": "php",
    "swift": "swift",
    "kt": "kotlin",
    "css": "css",
    "scss": "scss",
    "html": "html",
    "xml": "xml",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "md": "markdown",
}


def detect_language(file_path: str) -> Optional[str]:
    """Return the language tag for ``file_path`` or ``None`` if unknown."""
    suffix = PurePosixPath(file_path.replace("\\", "/")).suffix
    if not suffix:
        return None
    return LANGUAGE_BY_EXTENSION.get(suffix[1:].lower())
