"""
gren-compiler-library CLI module.

This module provides the `gren` command that forwards to the downloaded compiler.
"""

from .main import main, run

__all__ = ["main", "run"]
