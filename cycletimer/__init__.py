"""Terminal focus cycle timer."""

__version__ = "0.1.0"
