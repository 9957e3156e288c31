"""Data models for pally runs."""

from pally.models.options import Configuration, Standard, Viewport

__all__ = [
    "Configuration",
    "Standard",
    "Viewport",
]
