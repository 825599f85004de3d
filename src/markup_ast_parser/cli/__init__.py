"""Command-line interface for the markup AST parser."""

from .main import main

__all__ = ["main"]
