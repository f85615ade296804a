"""Book write path."""

from .manager import BookManager

__all__ = ["BookManager"]
