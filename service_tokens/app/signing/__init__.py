"""
Token signing package.

Cryptography lives behind the ``TokenSigner`` interface:
``sign(key, algorithm, headers, claims)`` and
``verify(key, allowed_algorithms, token)``. ``JoseTokenSigner`` is the
default implementation, built on python-jose compact JWS.
"""

from .base import TokenSigner
from .jose_signer import JoseTokenSigner

__all__ = ["JoseTokenSigner", "TokenSigner"]
