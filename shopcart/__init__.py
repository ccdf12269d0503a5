"""Client-side shopping cart state engine."""

__version__ = "1.0.0"
