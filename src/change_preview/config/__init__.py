"""
Configuration loading for change_preview.

Provides the optional JSON configuration loader and the validated
:class:`DiffOptions`. See :mod:`change_preview.config.loader` for
implementation details.
"""

from .loader import ConfigError, load_config  # noqa: F401
from .options import DiffFormat, DiffOptions  # noqa: F401
