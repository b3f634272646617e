"""
Diff generation options.

:class:`DiffOptions` is validated at the boundary: invalid values raise
:class:`~change_preview.config.loader.ConfigError` before any diff is
built, they are never clamped inside the algorithm.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict

from change_preview.config.loader import DEFAULTS, ConfigError


class DiffFormat(str, enum.Enum):
    """Output format selected for rendering."""

    UNIFIED = "unified"
    SIDE_BY_SIDE = "side-by-side"
    INLINE = "inline"
    HTML = "html"
    MARKDOWN = "markdown"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class DiffOptions:
    """Options controlling hunk construction and rendering."""

    context_lines: int = DEFAULTS["context_lines"]
    ignore_whitespace: bool = DEFAULTS["ignore_whitespace"]
    format: DiffFormat = DiffFormat.UNIFIED

    def validate(self) -> "DiffOptions":
        """Return ``self`` if the options are valid.

        Raises
        ------
        ConfigError
            If ``context_lines`` is not a non-negative integer or the
            format is unknown.
        """
        if not isinstance(self.context_lines, int) or isinstance(self.context_lines, bool):
            raise ConfigError("context_lines must be an integer")
        if self.context_lines < 0:
            raise ConfigError(f"context_lines must not be negative (got {self.context_lines})")
        if not isinstance(self.format, DiffFormat):
            raise ConfigError(f"Unknown diff format: {self.format!r}")
        return self

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DiffOptions":
        """Build validated options from a loaded configuration mapping."""
        try:
            fmt = DiffFormat(config.get("format", DiffFormat.UNIFIED.value))
        except ValueError as exc:
            raise ConfigError(f"Unknown diff format: {config.get('format')!r}") from exc
        options = cls(
            context_lines=config.get("context_lines", DEFAULTS["context_lines"]),
            ignore_whitespace=bool(config.get("ignore_whitespace", False)),
            format=fmt,
        )
        return options.validate()
