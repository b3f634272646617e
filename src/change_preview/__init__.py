"""
Top-level package for change_preview.

The package turns a batch of proposed file operations into a reviewable
change set (hunks, statistics and a risk assessment). The command line
entry point lives in ``change_preview.cli``.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
