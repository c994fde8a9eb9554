"""
Token lifecycle package.

``TokenLifecycleService`` ties claims building, signing and
verification together for one token module, and implements the refresh
and exchange transitions.
"""

from .service import TokenLifecycleService

__all__ = ["TokenLifecycleService"]
