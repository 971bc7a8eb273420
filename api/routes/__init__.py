"""API route handlers."""

from api.routes import campaigns, health

__all__ = ["campaigns", "health"]
