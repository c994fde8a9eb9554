"""
Shared error handling for the token lifecycle core.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class TokenLifecycleException(Exception):
    """Base exception for token lifecycle operations."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class InvalidTokenError(TokenLifecycleException):
    """Signature or structural verification failed."""

    def __init__(self, message: str = "Invalid token", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_TOKEN", message, details)


class IncorrectTokenTypeError(TokenLifecycleException):
    """Token type is not accepted for the requested exchange."""

    def __init__(self, message: str = "Incorrect token type", details: Optional[Dict[str, Any]] = None):
        super().__init__("INCORRECT_TOKEN_TYPE", message, details)


class InvalidClaimsError(TokenLifecycleException):
    """Supplied claims cannot be used to build a token."""

    def __init__(self, message: str = "Invalid claims", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_CLAIMS", message, details)


class ConfigurationError(TokenLifecycleException):
    """Module configuration is missing or malformed."""

    def __init__(self, message: str = "Configuration error", details: Optional[Dict[str, Any]] = None,
                 code: str = "CONFIGURATION_ERROR"):
        super().__init__(code, message, details)


class UnknownUnitError(ConfigurationError):
    """A TTL specification used an unrecognized time unit."""

    def __init__(self, unit: Any, details: Optional[Dict[str, Any]] = None):
        self.unit = unit
        super().__init__(f"Unknown units: {unit}", details or {"unit": str(unit)}, code="UNKNOWN_UNIT")


class InvalidTTLError(ConfigurationError):
    """A TTL specification could not be parsed."""

    def __init__(self, message: str = "Invalid TTL", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="INVALID_TTL")


class VerificationRejectedError(TokenLifecycleException):
    """A claims verification stage rejected the claims."""

    def __init__(self, reason: str, message: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.reason = reason
        details = dict(details or {})
        details.setdefault("reason", reason)
        super().__init__("VERIFICATION_REJECTED", message or f"Claims rejected: {reason}", details)


class SigningError(TokenLifecycleException):
    """The signing collaborator failed to produce a token."""

    def __init__(self, message: str = "Token signing failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("SIGNING_ERROR", message, details)
