"""
Token module configuration and lookup.

A *module* is a named token-issuing context (for example ``"web"`` or
``"api"``). Each module carries its own issuer, key material, algorithms
and TTL policy. Settings load from the environment with a per-module
prefix, ``TOKENS_<MODULE>_``; ``TOKENS_WEB_ISSUER`` configures the
issuer of the ``web`` module.

Any value may be *resolvable*: a zero-argument callable or an
``("env", NAME)`` / ``("env", NAME, default)`` tuple. Resolvable values
are evaluated on every lookup, never cached.
"""

import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import Field

from shared.config import BaseConfig
from shared.errors import ConfigurationError
from .ttl import DEFAULT_TTL

DEFAULT_ALGOS = ["HS512"]
DEFAULT_TOKEN_TYPE = "access"

_MISSING = object()


class TokenModuleConfig(BaseConfig):
    """Settings for a single token-issuing module."""

    issuer: Any = None
    secret_key: Any = None
    allowed_algos: List[str] = Field(default_factory=lambda: list(DEFAULT_ALGOS))
    token_type: str = DEFAULT_TOKEN_TYPE
    ttl: Any = DEFAULT_TTL
    token_ttl: Dict[str, Any] = Field(default_factory=dict)
    token_verify_module: Any = None
    verify_issuer: bool = False
    allowed_drift: int = 0


def get_module_config(module: str, **overrides: Any) -> TokenModuleConfig:
    """Get configuration for a specific token module."""
    prefix = f"TOKENS_{module.upper()}_"
    return TokenModuleConfig(_env_prefix=prefix, **overrides)


def resolve_value(value: Any) -> Any:
    """Evaluate a resolvable configuration value.

    Classes are returned as is; they are configured types, not factories.
    """
    if callable(value) and not isinstance(value, type):
        return value()
    if isinstance(value, tuple) and len(value) in (2, 3) and value[0] == "env":
        default = value[2] if len(value) == 3 else None
        return os.environ.get(value[1], default)
    return value


class ConfigProvider(ABC):
    """Capability for reading per-module configuration."""

    @abstractmethod
    def get(self, module: str, key: str, default: Any = None) -> Any:
        """Return the resolved value of ``key`` for ``module``."""


class SettingsConfigProvider(ConfigProvider):
    """Config provider backed by ``TokenModuleConfig`` instances."""

    def __init__(self, modules: Optional[Dict[str, TokenModuleConfig]] = None):
        self._modules: Dict[str, TokenModuleConfig] = dict(modules or {})

    def register(self, module: str, config: TokenModuleConfig) -> None:
        self._modules[module] = config

    def get(self, module: str, key: str, default: Any = None) -> Any:
        config = self._modules.get(module)
        if config is None:
            raise ConfigurationError(f"Unknown token module: {module}", {"module": module})

        value = resolve_value(getattr(config, key, None))
        return default if value is None else value


class ModuleContext:
    """Binds a module name to the provider that configures it."""

    def __init__(self, name: str, provider: ConfigProvider):
        self.name = name
        self.provider = provider

    def config(self, key: str, default: Any = None) -> Any:
        return self.provider.get(self.name, key, default)

    def require(self, key: str) -> Any:
        """Return a config value, raising if it is not set."""
        value = self.config(key, _MISSING)
        if value is _MISSING:
            raise ConfigurationError(
                f"Token module '{self.name}' is missing '{key}'",
                {"module": self.name, "key": key}
            )
        return value

    def __repr__(self) -> str:
        return f"ModuleContext({self.name!r})"
