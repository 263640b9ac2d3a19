"""qol - quality of life commands."""

__version__ = "0.1.0"
