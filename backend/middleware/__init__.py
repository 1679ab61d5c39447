"""Middleware package for the admin console backend."""

from .auth_middleware import SESSION_HEADER, AuthMiddleware

__all__ = ["AuthMiddleware", "SESSION_HEADER"]
