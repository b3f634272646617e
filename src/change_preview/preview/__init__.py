"""
Preview assembly for change_preview.

This package loads operation batches, reads original contents from the
workspace and assembles multi-file previews. See
:mod:`change_preview.preview.assembler` for details.
"""

from .assembler import PreviewAssembler, estimate_review_minutes, generate_preview  # noqa: F401
from .models import Preview, PreviewMetadata, Summary  # noqa: F401
from .observer import LoggingObserver, PreviewObserver, RecordingObserver  # noqa: F401
from .operations import load_operations, parse_operations  # noqa: F401
from .workspace import WorkspaceReader  # noqa: F401
