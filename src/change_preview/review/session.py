"""
Review state machine.

A :class:`ReviewSession` walks a user through a preview: selecting the
operations to apply, confirming, and optionally viewing a file's diff
before returning to the selection. Every step is an explicit transition
checked against :data:`TRANSITIONS`; viewing a diff returns to
``selecting`` instead of re-entering the flow.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence

from change_preview.diff.models import FileDiff
from change_preview.preview.models import Preview
from change_preview.render.unified import format_patch
from change_preview.review.messages import ApplyChanges, ExportDiff, ReviewError, ReviewMessage, ShowFile


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class ReviewState(str, enum.Enum):
    SELECTING = "selecting"
    CONFIRMING = "confirming"
    VIEWING = "viewing"
    DONE = "done"


class ReviewAction(str, enum.Enum):
    APPLY = "apply"
    REJECT = "reject"
    MODIFY = "modify"
    CANCEL = "cancel"


class ConfirmChoice(str, enum.Enum):
    APPLY = "apply"
    VIEW = "view"
    CANCEL = "cancel"


TRANSITIONS: Dict[ReviewState, FrozenSet[ReviewState]] = {
    ReviewState.SELECTING: frozenset({ReviewState.CONFIRMING, ReviewState.VIEWING, ReviewState.DONE}),
    ReviewState.CONFIRMING: frozenset({ReviewState.SELECTING, ReviewState.VIEWING, ReviewState.DONE}),
    ReviewState.VIEWING: frozenset({ReviewState.SELECTING}),
    ReviewState.DONE: frozenset(),
}


@dataclass(frozen=True)
class PreviewResult:
    """Outcome of a review."""

    action: ReviewAction
    selected_operations: List[str] = field(default_factory=list)


class ReviewSession:
    """Drive the review of one preview.

    Parameters
    ----------
    preview : Preview
        The preview under review. It is never modified.
    """

    def __init__(self, preview: Preview) -> None:
        self.preview = preview
        self.state = ReviewState.SELECTING
        self.selection: List[str] = []
        self.viewing: Optional[FileDiff] = None
        self.result: Optional[PreviewResult] = None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @property
    def operation_ids(self) -> List[str]:
        return [diff.operation.id for diff in self.preview.file_operations]

    def _move(self, target: ReviewState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise ReviewError(f"Cannot go from {self.state.value} to {target.value}")
        logger.debug("Review state %s -> %s", self.state.value, target.value)
        self.state = target

    def _finish(self, action: ReviewAction, selected: Sequence[str] = ()) -> PreviewResult:
        self._move(ReviewState.DONE)
        self.result = PreviewResult(action=action, selected_operations=list(selected))
        return self.result

    def _diff_for_path(self, path: str) -> FileDiff:
        for diff in self.preview.file_operations:
            if diff.path == path:
                return diff
        raise ReviewError(f"No diff for path: {path}")

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def select(self, operation_ids: Optional[Sequence[str]]) -> Optional[PreviewResult]:
        """Choose the operations to apply.

        ``None`` cancels the review and an empty selection rejects every
        operation; both finish the session. Otherwise the session moves
        on to ``confirming``.
        """
        if self.state is not ReviewState.SELECTING:
            raise ReviewError(f"Cannot select operations in state {self.state.value}")
        if operation_ids is None:
            return self._finish(ReviewAction.CANCEL)
        unknown = [op_id for op_id in operation_ids if op_id not in self.operation_ids]
        if unknown:
            raise ReviewError(f"Unknown operation id(s): {', '.join(unknown)}")
        if not operation_ids:
            return self._finish(ReviewAction.REJECT)
        self.selection = list(operation_ids)
        self._move(ReviewState.CONFIRMING)
        return None

    def confirm(self, choice: ConfirmChoice) -> Optional[PreviewResult]:
        """Answer the confirmation question for the current selection."""
        if self.state is not ReviewState.CONFIRMING:
            raise ReviewError(f"Nothing to confirm in state {self.state.value}")
        if choice is ConfirmChoice.APPLY:
            return self._finish(ReviewAction.APPLY, self.selection)
        if choice is ConfirmChoice.VIEW:
            first = self.selection[0]
            self.viewing = next(d for d in self.preview.file_operations if d.operation.id == first)
            self._move(ReviewState.VIEWING)
            return None
        return self._finish(ReviewAction.CANCEL)

    def view(self, path: str) -> FileDiff:
        """Show the diff of ``path``."""
        diff = self._diff_for_path(path)
        self._move(ReviewState.VIEWING)
        self.viewing = diff
        return diff

    def back(self) -> None:
        """Return to the selection from the diff view or the confirmation."""
        self._move(ReviewState.SELECTING)
        self.viewing = None

    def handle(self, message: ReviewMessage) -> Optional[str]:
        """Apply a front-end message.

        Returns the exported patch text for :class:`ExportDiff`,
        ``None`` otherwise.
        """
        if isinstance(message, ShowFile):
            self.view(message.path)
            return None
        if isinstance(message, ApplyChanges):
            ids = [self._diff_for_path(path).operation.id for path in message.selected_files]
            if self.state is not ReviewState.SELECTING:
                self.back()
            if self.select(ids) is None:
                self.confirm(ConfirmChoice.APPLY)
            return None
        if isinstance(message, ExportDiff):
            return format_patch(self.preview.file_operations)
        raise ReviewError(f"Unsupported review message: {message!r}")
