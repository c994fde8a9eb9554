"""
JOSE-backed token signer.
"""

import json
from typing import Any, Dict, List, Tuple

from jose import jws, jwt
from jose.exceptions import JOSEError

from shared.errors import InvalidTokenError, SigningError
from shared.logging import get_logger
from ..claims.models import Claims
from .base import TokenSigner


class JoseTokenSigner(TokenSigner):
    """Signs and verifies compact JWS tokens with python-jose.

    Keys may be a shared secret string or a JWK mapping.
    """

    def __init__(self):
        self.logger = get_logger("tokens.signer")

    def sign(self, key: Any, algorithm: str, headers: Dict[str, Any], claims: Claims) -> str:
        extra_headers = {k: v for k, v in (headers or {}).items() if k != "alg"}
        try:
            return jws.sign(claims, key, headers=extra_headers, algorithm=algorithm)
        except (JOSEError, TypeError, ValueError) as e:
            self.logger.error("Token signing failed", algorithm=algorithm, error=str(e))
            raise SigningError(f"Token signing failed: {e}", {"algorithm": algorithm}) from e

    def verify(self, key: Any, allowed_algorithms: List[str], token: str) -> Tuple[Claims, bool]:
        try:
            payload = jws.verify(token, key, algorithms=allowed_algorithms)
            claims = json.loads(payload)
        except (JOSEError, ValueError) as e:
            self.logger.warning("Token signature check failed", error=str(e))
            return {}, False

        if not isinstance(claims, dict):
            self.logger.warning("Token payload is not a claims object")
            return {}, False
        return claims, True

    def peek(self, token: str) -> Dict[str, Dict[str, Any]]:
        try:
            return {
                "headers": jwt.get_unverified_header(token),
                "claims": jwt.get_unverified_claims(token),
            }
        except JOSEError as e:
            raise InvalidTokenError("Token could not be parsed", {"error": str(e)}) from e
