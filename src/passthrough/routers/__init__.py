"""API routers for the passthrough proxy."""

from .proxy import proxy_route

__all__ = ["proxy_route"]
