"""
Claim and token data models.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

ClaimValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]
Claims = Dict[str, ClaimValue]

# Claims regenerated whenever a token is reissued
RESET_CLAIMS = ("jti", "iss", "iat", "nbf", "exp")
TIMESTAMP_CLAIMS = ("iat", "nbf", "exp")


class TokenOptions(BaseModel):
    """Per-call options for token operations.

    Unknown keys are kept and forwarded to claims verifiers.
    """
    model_config = ConfigDict(extra="allow")

    token_type: Optional[str] = Field(None, description="Override for the typ claim")
    ttl: Optional[Any] = Field(None, description="Override TTL, e.g. (2, 'hours')")
    secret: Optional[Any] = Field(None, description="Override key material")
    allowed_algos: Optional[List[str]] = Field(None, description="Override allowed algorithms")
    headers: Dict[str, Any] = Field(default_factory=dict, description="Extra JOSE headers")


@dataclass(frozen=True)
class IssuedToken:
    """A signed token together with the claims it carries."""
    token: str
    claims: Claims


@dataclass(frozen=True)
class TokenTransition:
    """Result of a refresh or exchange: the old pair and its replacement."""
    old: IssuedToken
    new: IssuedToken
