"""HTTP API for scenario conversion."""

from .app import app, create_app
from .routes import router

__all__ = ["app", "create_app", "router"]
