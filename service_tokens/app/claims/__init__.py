"""
Claims package.

Builds the claim set carried by a token. New tokens get a fresh ``jti``,
``iat``/``nbf``, issuer, audience, type, subject and an ``exp`` derived
from the module's TTL policy. Reissued tokens (refresh, exchange) keep
their subject, type, audience and custom claims but get new identity and
timing claims.
"""

from .builder import ClaimsBuilder, claim_str, stringify_keys, token_id
from .models import Claims, IssuedToken, RESET_CLAIMS, TokenOptions, TokenTransition

__all__ = [
    "Claims",
    "ClaimsBuilder",
    "claim_str",
    "IssuedToken",
    "RESET_CLAIMS",
    "TokenOptions",
    "TokenTransition",
    "stringify_keys",
    "token_id",
]
