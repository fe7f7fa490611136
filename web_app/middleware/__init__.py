"""Middleware for the link shortener web app."""

from .headers import CallerIdentityMiddleware
from .logging import LoggingMiddleware

__all__ = ["CallerIdentityMiddleware", "LoggingMiddleware"]
