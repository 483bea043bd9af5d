"""
HTTP API for GH Score.
"""

from .app import create_app

__all__ = ["create_app"]
