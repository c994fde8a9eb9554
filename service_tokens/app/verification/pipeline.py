"""
Two-stage claims verification pipeline.
"""

import importlib
from typing import Any, Callable, Optional

from shared.errors import ConfigurationError, VerificationRejectedError
from shared.logging import get_logger
from ..claims.models import Claims, TokenOptions
from ..config import ModuleContext
from .verifiers import ClaimsVerifier, PassthroughClaimsVerifier, StandardClaimsVerifier


def load_verifier(value: Any, clock: Optional[Callable[[], float]] = None) -> ClaimsVerifier:
    """Turn a configured verifier (instance, class, or dotted path) into an instance.

    Classes derived from ``StandardClaimsVerifier`` are built with ``clock``;
    any other class is built with no arguments.
    """
    if isinstance(value, ClaimsVerifier):
        return value
    if isinstance(value, str):
        module_path, _, attr = value.rpartition(".")
        if not module_path:
            raise ConfigurationError(f"Invalid verifier path: {value}", {"token_verify_module": value})
        try:
            value = getattr(importlib.import_module(module_path), attr)
        except (ImportError, AttributeError) as e:
            raise ConfigurationError(
                f"Cannot load verifier: {value}",
                {"token_verify_module": value, "error": str(e)}
            ) from e
    if isinstance(value, type) and issubclass(value, StandardClaimsVerifier):
        return value(clock=clock)
    if isinstance(value, type) and issubclass(value, ClaimsVerifier):
        return value()
    raise ConfigurationError(
        "token_verify_module must be a ClaimsVerifier",
        {"token_verify_module": repr(value)}
    )


class VerificationPipeline:
    """Runs the module's claims verifier, then the caller-level verifier.

    Stage one checks standard claim validity (well formed, inside its
    time window). Stage two is application policy, for example "the
    subject is still an active user". The first rejection wins and is
    raised unchanged.
    """

    def __init__(self, claims_verifier: Optional[ClaimsVerifier] = None,
                 default_verifier: Optional[ClaimsVerifier] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.clock = clock
        self.claims_verifier = claims_verifier or PassthroughClaimsVerifier()
        self.default_verifier = default_verifier or StandardClaimsVerifier(clock=clock)
        self.logger = get_logger("tokens.verification")

    def module_verifier(self, module: ModuleContext) -> ClaimsVerifier:
        configured = module.config("token_verify_module")
        if configured is None:
            return self.default_verifier
        return load_verifier(configured, clock=self.clock)

    def verify(self, claims: Claims, module: ModuleContext,
               options: Optional[TokenOptions] = None) -> Claims:
        options = options or TokenOptions()
        try:
            claims = self.module_verifier(module).verify_claims(module, claims, options)
            return self.claims_verifier.verify_claims(module, claims, options)
        except VerificationRejectedError as e:
            self.logger.warning(
                "Claims rejected",
                module=module.name,
                reason=e.reason,
                jti=claims.get("jti"),
                sub=claims.get("sub")
            )
            raise
