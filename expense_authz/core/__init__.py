"""Core: config, tenant-id validation, exception handlers and app lifespan."""

from expense_authz.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
