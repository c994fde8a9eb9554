"""
Claims verifiers.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from shared.errors import VerificationRejectedError
from ..claims.models import Claims, TIMESTAMP_CLAIMS, TokenOptions
from ..config import ModuleContext


class ClaimsVerifier(ABC):
    """Capability that accepts or rejects decoded claims.

    Implementations return the (possibly enriched) claims or raise
    ``VerificationRejectedError`` with their own reason.
    """

    @abstractmethod
    def verify_claims(self, module: ModuleContext, claims: Claims,
                      options: TokenOptions) -> Claims:
        ...


class PassthroughClaimsVerifier(ClaimsVerifier):
    """Accepts every claim set unchanged."""

    def verify_claims(self, module: ModuleContext, claims: Claims,
                      options: TokenOptions) -> Claims:
        return claims


class StandardClaimsVerifier(ClaimsVerifier):
    """Validates the shape and time window of the registered claims."""

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self.clock = clock or time.time

    def verify_claims(self, module: ModuleContext, claims: Claims,
                      options: TokenOptions) -> Claims:
        self._check_shape(claims)

        now = int(self.clock())
        drift = int(module.config("allowed_drift", 0))

        exp = claims.get("exp")
        if exp is not None and now >= exp + drift:
            raise VerificationRejectedError("token_expired", details={"exp": exp})

        nbf = claims.get("nbf")
        if nbf is not None and now < nbf - drift:
            raise VerificationRejectedError("token_not_yet_valid", details={"nbf": nbf})

        if module.config("verify_issuer", False):
            issuer = str(module.require("issuer"))
            if claims.get("iss") != issuer:
                raise VerificationRejectedError(
                    "invalid_issuer",
                    details={"expected": issuer, "actual": claims.get("iss")}
                )

        return claims

    def _check_shape(self, claims: Claims) -> None:
        for key in TIMESTAMP_CLAIMS:
            value = claims.get(key)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise VerificationRejectedError("malformed_claim", details={"claim": key})

        for key in ("jti", "sub", "typ"):
            value = claims.get(key)
            if value is not None and not isinstance(value, str):
                raise VerificationRejectedError("malformed_claim", details={"claim": key})


def verify_literal_claims(claims: Claims, claims_to_check: Optional[Any]) -> Claims:
    """Reject claims that differ from any expected literal value."""
    for key, expected in (claims_to_check or {}).items():
        if claims.get(str(key)) != expected:
            raise VerificationRejectedError(
                "claim_mismatch",
                details={"claim": str(key), "expected": expected, "actual": claims.get(str(key))}
            )
    return claims
