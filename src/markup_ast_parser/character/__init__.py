"""Character access layer for markup parsing."""

from .cursor import CharacterCursor

__all__ = [
    "CharacterCursor",
]
