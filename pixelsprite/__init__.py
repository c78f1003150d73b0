"""Pixel-art sprite editor: sprite model, editing session, view models and a terminal front end."""

__version__ = "1.0.0"

__all__ = ["__version__"]