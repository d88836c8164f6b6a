"""
minipm

A minimal npm-style package manager: resolves manifest dependencies against a
registry and installs their transitive closure.
"""

__version__ = "0.1.0"

from .cli import main

__all__ = ["main"]
