"""
Token lifecycle package.

Implements the policy around bearer tokens: which claims a token
carries, when it expires, how decoded claims are verified, and how a
token is refreshed or exchanged for one of another type.

- app.ttl: TTL specifications and expiry computation.
- app.claims: Claims models and the claims builder.
- app.verification: Two-stage claims verification.
- app.signing: Signer interface and the python-jose implementation.
- app.lifecycle: The token lifecycle service.
- app.config: Per-module settings and config lookup.
- app.main: Factory wiring settings, logging and the service.

Design notes:
- Importing the package has no side effects; logging is configured by
  ``create_service`` only.
- The service is stateless. Revocation is not tracked here.
"""

from .claims import IssuedToken, TokenOptions, TokenTransition
from .config import SettingsConfigProvider, TokenModuleConfig, get_module_config
from .lifecycle import TokenLifecycleService
from .main import create_service
from .ttl import TTLSpec, TimeUnit

__all__ = [
    "IssuedToken",
    "SettingsConfigProvider",
    "TTLSpec",
    "TimeUnit",
    "TokenLifecycleService",
    "TokenModuleConfig",
    "TokenOptions",
    "TokenTransition",
    "create_service",
    "get_module_config",
]
