"""HTTP API for promptmap."""

from .app import create_app

__all__ = ["create_app"]
