"""Authorization and permission-resolution engine for a multi-tenant expense app."""

__version__ = "1.0.0"
