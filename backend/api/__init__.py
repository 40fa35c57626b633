"""
Pinnacle Metals API package.

Provides the FastAPI application for accounts, sessions and copper pricing.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
