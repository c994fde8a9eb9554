"""
Claims builder for new and reissued tokens.
"""

import time
import uuid
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from shared.errors import InvalidClaimsError
from shared.logging import get_logger
from ..config import DEFAULT_TOKEN_TYPE, ModuleContext
from ..ttl import DEFAULT_TTL, resolve_expiry
from .models import Claims, RESET_CLAIMS, TokenOptions


def stringify_keys(value: Any) -> Any:
    """Recursively convert mapping keys to strings."""
    if isinstance(value, Mapping):
        return {claim_str(key): stringify_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [stringify_keys(item) for item in value]
    return value


def claim_str(value: Any) -> str:
    """String form of a claim key or token kind; enums use their value."""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def token_id() -> str:
    """Generate a unique token identifier."""
    return str(uuid.uuid4())


class ClaimsBuilder:
    """Assembles canonical claim sets.

    Every stage leaves a non-null claim alone, except ``sub`` which
    always takes the supplied subject.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None,
                 id_factory: Optional[Callable[[], str]] = None):
        self.clock = clock or time.time
        self.id_factory = id_factory or token_id
        self.logger = get_logger("tokens.claims")

    def timestamp(self) -> int:
        return int(self.clock())

    def build(self, custom_claims: Optional[Mapping[str, Any]], subject: Any,
              module: ModuleContext, options: Optional[TokenOptions] = None) -> Claims:
        """Build the claim set for a new token."""
        options = options or TokenOptions()
        claims = stringify_keys(dict(custom_claims or {}))

        self._set_jti(claims)
        self._set_iat(claims)
        self._set_iss(claims, module)
        self._set_aud(claims, module)
        self._set_type(claims, module, options)
        claims["sub"] = subject
        self._set_ttl(claims, module, options)
        self.logger.debug("Claims built", jti=claims["jti"], typ=claims["typ"], sub=subject)
        return claims

    def reset(self, claims: Mapping[str, Any], module: ModuleContext,
              options: Optional[TokenOptions] = None) -> Claims:
        """Regenerate identity and timing claims for a reissued token.

        ``typ``, ``sub``, ``aud`` and custom claims carry over.
        """
        options = options or TokenOptions()
        claims = {key: value for key, value in claims.items() if key not in RESET_CLAIMS}

        self._set_jti(claims)
        self._set_iat(claims)
        self._set_iss(claims, module)
        self._set_ttl(claims, module, options)
        self.logger.debug("Claims reset", jti=claims["jti"], typ=claims.get("typ"))
        return claims

    def _set_jti(self, claims: Claims) -> None:
        if claims.get("jti") is None:
            claims["jti"] = self.id_factory()

    def _set_iat(self, claims: Claims) -> None:
        if claims.get("iat") is None:
            claims["iat"] = self.timestamp()
            claims["nbf"] = claims["iat"] - 1
        else:
            iat = claims["iat"]
            if isinstance(iat, bool) or not isinstance(iat, int):
                raise InvalidClaimsError(
                    "Claim iat must be an integer timestamp",
                    {"claim": "iat", "value": repr(iat)}
                )
            if claims.get("nbf") is None:
                claims["nbf"] = iat - 1

    def _set_iss(self, claims: Claims, module: ModuleContext) -> None:
        if claims.get("iss") is None:
            claims["iss"] = str(module.require("issuer"))

    def _set_aud(self, claims: Claims, module: ModuleContext) -> None:
        if claims.get("aud") is None:
            claims["aud"] = claims.get("iss") or str(module.require("issuer"))

    def _set_type(self, claims: Claims, module: ModuleContext, options: TokenOptions) -> None:
        if claims.get("typ") is not None:
            return
        typ = options.token_type or module.config("token_type") or DEFAULT_TOKEN_TYPE
        claims["typ"] = claim_str(typ)

    def _set_ttl(self, claims: Claims, module: ModuleContext, options: TokenOptions) -> None:
        if claims.get("exp") is not None:
            return

        ttl = options.ttl
        if ttl is None:
            per_type = module.config("token_ttl", {}) or {}
            ttl = per_type.get(claim_str(claims.get("typ")))
        if ttl is None:
            ttl = module.config("ttl", DEFAULT_TTL)

        # exp is computed from iat, so iat must exist first
        self._set_iat(claims)
        claims["exp"] = resolve_expiry(claims["iat"], ttl)
