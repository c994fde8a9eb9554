"""
TTL package.

Translates time-to-live specifications into expiry timestamps. A TTL is
a ``(quantity, unit)`` pair; both halves are normalized before use so
configuration can supply them as strings.
"""

from .resolver import DEFAULT_TTL, SECONDS_PER_UNIT, TTLSpec, TimeUnit, parse_ttl, resolve_expiry

__all__ = [
    "DEFAULT_TTL",
    "SECONDS_PER_UNIT",
    "TTLSpec",
    "TimeUnit",
    "parse_ttl",
    "resolve_expiry",
]
