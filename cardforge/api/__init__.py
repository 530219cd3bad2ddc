"""
HTTP API package.

Provides the AI card router and the application factory.
"""

from cardforge.api.routes import create_app, get_credentials, router

__all__ = ["create_app", "get_credentials", "router"]
