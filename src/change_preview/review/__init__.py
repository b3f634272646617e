"""
Review flow for change_preview.

The review flow is an explicit state machine over a finished preview;
front-end payloads are parsed into a closed set of message types first.
"""

from .messages import ApplyChanges, ExportDiff, ReviewError, ShowFile, parse_message  # noqa: F401
from .session import (  # noqa: F401
    ConfirmChoice,
    PreviewResult,
    ReviewAction,
    ReviewSession,
    ReviewState,
)
