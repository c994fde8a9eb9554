"""
Signing collaborator interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple

from ..claims.models import Claims


class TokenSigner(ABC):
    """Produces and checks compact serialized tokens.

    The lifecycle service never touches key material or signature
    algorithms directly; it goes through this interface.
    """

    @abstractmethod
    def sign(self, key: Any, algorithm: str, headers: Dict[str, Any], claims: Claims) -> str:
        """Sign ``claims`` and return the compact token."""

    @abstractmethod
    def verify(self, key: Any, allowed_algorithms: List[str], token: str) -> Tuple[Claims, bool]:
        """Check the token signature; return its claims and whether it is valid."""

    @abstractmethod
    def peek(self, token: str) -> Dict[str, Dict[str, Any]]:
        """Read headers and claims without checking the signature."""
