"""
Workspace file access.

:class:`WorkspaceReader` is the filesystem collaborator of the preview
assembler: ``read(path)`` returns the raw bytes of a file relative to the
workspace root and raises :class:`FileNotFoundError` when it does not
exist. Any object with the same ``read`` method can be used instead.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, Union


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class ContentReader(Protocol):
    def read(self, path: str) -> bytes: ...


class WorkspaceReader:
    """Read files below a workspace root."""

    def __init__(self, root: Optional[Union[str, Path]] = None) -> None:
        self.root = Path(root) if root is not None else Path.cwd()

    def resolve(self, path: str) -> Path:
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.root / candidate

    def read(self, path: str) -> bytes:
        """Return the bytes of ``path``.

        Raises
        ------
        FileNotFoundError
            If nothing exists at the path.
        OSError
            For any other I/O failure, including a directory at the path.
        """
        full_path = self.resolve(path)
        logger.debug("Reading %s", full_path)
        if not full_path.exists():
            raise FileNotFoundError(str(full_path))
        return full_path.read_bytes()
