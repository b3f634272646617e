"""
Observer interface for preview side effects.

The assembler reports progress and per-file problems through an injected
observer instead of writing to a host output channel, so it can run and
be tested without any UI.
"""

from __future__ import annotations

import logging
from typing import List, Protocol


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class PreviewObserver(Protocol):
    def on_info(self, message: str) -> None: ...

    def on_warn(self, message: str) -> None: ...


class LoggingObserver:
    """Default observer forwarding to :mod:`logging`."""

    def __init__(self, log: logging.Logger = logger) -> None:
        self.log = log

    def on_info(self, message: str) -> None:
        self.log.info("%s", message)

    def on_warn(self, message: str) -> None:
        self.log.warning("%s", message)


class RecordingObserver:
    """Observer that keeps every message, useful in tests and for callers
    that want to display the messages themselves."""

    def __init__(self) -> None:
        self.infos: List[str] = []
        self.warnings: List[str] = []

    def on_info(self, message: str) -> None:
        self.infos.append(message)

    def on_warn(self, message: str) -> None:
        self.warnings.append(message)
