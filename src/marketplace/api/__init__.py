"""Marketplace domain API package."""

from marketplace.api.errors import register_error_handlers
from marketplace.api.routes import account_router, crop_router

__all__ = ["crop_router", "account_router", "register_error_handlers"]
