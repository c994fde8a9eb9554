"""
Claims verification package.

Decoded claims pass two stages before they are trusted:

- the module's claims verifier (``token_verify_module`` setting, the
  ``StandardClaimsVerifier`` by default) checks registered claims;
- the caller-level verifier injected into the service applies
  application policy.

Either stage rejects by raising ``VerificationRejectedError``.
"""

from .pipeline import VerificationPipeline, load_verifier
from .verifiers import (
    ClaimsVerifier,
    PassthroughClaimsVerifier,
    StandardClaimsVerifier,
    verify_literal_claims,
)

__all__ = [
    "ClaimsVerifier",
    "PassthroughClaimsVerifier",
    "StandardClaimsVerifier",
    "VerificationPipeline",
    "load_verifier",
    "verify_literal_claims",
]
