"""
Entrypoint for building a configured token lifecycle service.
"""

from typing import Any, Optional

from shared.logging import configure_logging, get_logger
from .config import SettingsConfigProvider, get_module_config
from .lifecycle import TokenLifecycleService
from .signing import TokenSigner
from .verification import ClaimsVerifier


def create_service(
    module: str,
    *,
    signer: Optional[TokenSigner] = None,
    claims_verifier: Optional[ClaimsVerifier] = None,
    provider: Optional[SettingsConfigProvider] = None,
    **overrides: Any,
) -> TokenLifecycleService:
    """Create a token service for ``module`` from environment settings.

    Keyword overrides take precedence over ``TOKENS_<MODULE>_*``
    environment variables.
    """
    config = get_module_config(module, **overrides)
    configure_logging("tokens", config.log_level)

    provider = provider or SettingsConfigProvider()
    provider.register(module, config)

    logger = get_logger("tokens.main")
    logger.info(
        "Token module configured",
        module=module,
        allowed_algos=config.allowed_algos,
        token_type=config.token_type
    )

    return TokenLifecycleService(
        module,
        provider,
        signer=signer,
        claims_verifier=claims_verifier,
    )
