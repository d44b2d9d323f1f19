"""HTTP surface of the care quality engine."""

from .app import create_app

__all__ = ["create_app"]
