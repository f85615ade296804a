"""Book review catalog: books, star ratings and text reviews."""

__version__ = "0.1.0"
