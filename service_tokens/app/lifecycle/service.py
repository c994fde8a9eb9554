"""
Token lifecycle service: create, decode, verify, refresh, exchange.
"""

import time
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from shared.errors import IncorrectTokenTypeError, InvalidTokenError
from shared.logging import get_logger, reset_token_module, set_token_module
from ..claims import Claims, ClaimsBuilder, claim_str, IssuedToken, TokenOptions, TokenTransition
from ..config import DEFAULT_ALGOS, ConfigProvider, ModuleContext, resolve_value
from ..signing import JoseTokenSigner, TokenSigner
from ..verification import (
    ClaimsVerifier,
    VerificationPipeline,
    verify_literal_claims,
)

TokenTypes = Union[str, Enum, Iterable[Union[str, Enum]]]


class TokenLifecycleService:
    """Issues and reissues tokens for one token module.

    The service keeps no state between calls. Configuration is read
    through the provider on every operation; signing goes through the
    injected ``TokenSigner``; ``claims_verifier`` is the caller-level
    stage of claims verification.
    """

    def __init__(
        self,
        module: str,
        config: ConfigProvider,
        signer: Optional[TokenSigner] = None,
        claims_verifier: Optional[ClaimsVerifier] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.module = ModuleContext(module, config)
        self.signer = signer or JoseTokenSigner()
        clock = clock or time.time
        self.builder = ClaimsBuilder(clock=clock)
        self.pipeline = VerificationPipeline(
            claims_verifier=claims_verifier,
            clock=clock,
        )
        self.logger = get_logger("tokens.lifecycle")

    # --- Claims ---

    def build_claims(self, subject: Any, claims: Optional[Mapping[str, Any]] = None,
                     options: Optional[TokenOptions] = None) -> Claims:
        """Build the claim set for a new token."""
        return self.builder.build(claims, subject, self.module, options)

    def verify_claims(self, claims: Claims, options: Optional[TokenOptions] = None) -> Claims:
        """Run decoded claims through the verification pipeline."""
        return self.pipeline.verify(claims, self.module, options)

    # --- Tokens ---

    def create_token(self, claims: Claims, options: Optional[TokenOptions] = None) -> str:
        """Sign a prepared claim set."""
        options = options or TokenOptions()
        headers = dict(options.headers)
        algorithm = headers.get("alg") or self._allowed_algos(options)[0]
        headers["alg"] = algorithm

        token = self.signer.sign(self._secret(options), algorithm, headers, claims)
        self.logger.info(
            "Token issued",
            module=self.module.name,
            jti=claims.get("jti"),
            typ=claims.get("typ"),
            sub=claims.get("sub")
        )
        return token

    def encode_and_sign(self, subject: Any, claims: Optional[Mapping[str, Any]] = None,
                        options: Optional[TokenOptions] = None) -> IssuedToken:
        """Build claims for ``subject`` and sign them."""
        context = set_token_module(self.module.name)
        try:
            full_claims = self.build_claims(subject, claims, options)
            return IssuedToken(self.create_token(full_claims, options), full_claims)
        finally:
            reset_token_module(context)

    def decode_token(self, token: Optional[str], options: Optional[TokenOptions] = None) -> Claims:
        """Check the token signature and return its claims.

        Claims are not validated here; see ``verify_claims``.
        """
        options = options or TokenOptions()
        if not token:
            raise InvalidTokenError("Token missing")

        claims, valid = self.signer.verify(self._secret(options), self._allowed_algos(options), token)
        if not valid:
            self.logger.warning("Token verification failed", module=self.module.name)
            raise InvalidTokenError(details={"module": self.module.name})
        return claims

    def decode_and_verify(self, token: Optional[str], claims_to_check: Optional[Dict[str, Any]] = None,
                          options: Optional[TokenOptions] = None) -> Claims:
        """Decode a token and run its claims through every check."""
        context = set_token_module(self.module.name)
        try:
            claims = self.decode_token(token, options)
            verify_literal_claims(claims, claims_to_check)
            return self.verify_claims(claims, options)
        finally:
            reset_token_module(context)

    def revoke(self, claims: Claims, token: Optional[str] = None,
               options: Optional[TokenOptions] = None) -> Claims:
        """Revocation is not tracked; the claims come back unchanged."""
        self.logger.debug("Token revoke requested", module=self.module.name, jti=claims.get("jti"))
        return claims

    def refresh(self, old_token: str, options: Optional[TokenOptions] = None) -> TokenTransition:
        """Reissue a token with the same subject and type.

        The old token stays valid until it expires.
        """
        old_claims = self.decode_and_verify(old_token, options=options)
        claims = self.builder.reset(old_claims, self.module, options)
        token = self.create_token(claims, options)

        self.logger.info(
            "Token refreshed",
            module=self.module.name,
            old_jti=old_claims.get("jti"),
            new_jti=claims["jti"],
            typ=claims.get("typ")
        )
        return TokenTransition(IssuedToken(old_token, old_claims), IssuedToken(token, claims))

    def exchange(self, old_token: str, from_type: TokenTypes, to_type: Union[str, Enum],
                 options: Optional[TokenOptions] = None) -> TokenTransition:
        """Trade a token of an accepted type for a new token of ``to_type``."""
        old_claims = self.decode_and_verify(old_token, options=options)

        accepted = self._token_types(from_type)
        if old_claims.get("typ") not in accepted:
            self.logger.warning(
                "Token exchange refused",
                module=self.module.name,
                typ=old_claims.get("typ"),
                accepted=accepted
            )
            raise IncorrectTokenTypeError(
                details={"typ": old_claims.get("typ"), "accepted": accepted}
            )

        # typ picks the TTL, so it changes before the reset
        claims = dict(old_claims, typ=claim_str(to_type))
        claims = self.builder.reset(claims, self.module, options)
        token = self.create_token(claims, options)

        self.logger.info(
            "Token exchanged",
            module=self.module.name,
            old_jti=old_claims.get("jti"),
            new_jti=claims["jti"],
            from_typ=old_claims.get("typ"),
            to_typ=claims["typ"]
        )
        return TokenTransition(IssuedToken(old_token, old_claims), IssuedToken(token, claims))

    def peek(self, token: Optional[str]) -> Optional[Dict[str, Dict[str, Any]]]:
        """Read headers and claims without verification. Never trust the result."""
        if token is None:
            return None
        return self.signer.peek(token)

    # --- Helpers ---

    def _secret(self, options: TokenOptions) -> Any:
        if options.secret is not None:
            return resolve_value(options.secret)
        return self.module.require("secret_key")

    def _allowed_algos(self, options: TokenOptions) -> List[str]:
        if options.allowed_algos:
            return list(options.allowed_algos)
        return list(self.module.config("allowed_algos") or DEFAULT_ALGOS)

    @staticmethod
    def _token_types(value: TokenTypes) -> List[str]:
        if isinstance(value, (str, Enum)):
            return [claim_str(value)]
        return [claim_str(item) for item in value]

