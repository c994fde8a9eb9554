"""
Unit tests for the claims verification pipeline.
"""

import pytest
from unittest.mock import MagicMock

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_tokens.app.claims import TokenOptions
from service_tokens.app.config import ModuleContext, SettingsConfigProvider, get_module_config
from service_tokens.app.verification import (
    ClaimsVerifier,
    PassthroughClaimsVerifier,
    StandardClaimsVerifier,
    VerificationPipeline,
    load_verifier,
    verify_literal_claims,
)
from shared.errors import ConfigurationError, VerificationRejectedError

NOW = 1_700_000_000


class ActiveUserVerifier(ClaimsVerifier):
    """Rejects subjects that are not active."""

    def __init__(self, active=("user-1",)):
        self.active = set(active)

    def verify_claims(self, module, claims, options):
        if claims.get("sub") not in self.active:
            raise VerificationRejectedError("inactive_user", details={"sub": claims.get("sub")})
        return dict(claims, active=True)


class TestStandardClaimsVerifier:
    """Test cases for StandardClaimsVerifier."""

    @pytest.fixture
    def provider(self):
        """Create a provider with one configured module."""
        return SettingsConfigProvider({
            "web": get_module_config("web", issuer="auth.example.com", secret_key="k")
        })

    @pytest.fixture
    def module(self, provider):
        return ModuleContext("web", provider)

    @pytest.fixture
    def verifier(self):
        return StandardClaimsVerifier(clock=lambda: NOW)

    @pytest.fixture
    def claims(self):
        return {
            "jti": "id-1",
            "sub": "user-1",
            "typ": "access",
            "iss": "auth.example.com",
            "iat": NOW - 10,
            "nbf": NOW - 11,
            "exp": NOW + 3600,
        }

    def test_valid_claims(self, verifier, module, claims):
        """Test well-formed, current claims pass."""
        assert verifier.verify_claims(module, claims, TokenOptions()) == claims

    def test_expired(self, verifier, module, claims):
        """Test claims at or past exp are rejected."""
        claims["exp"] = NOW

        with pytest.raises(VerificationRejectedError) as exc_info:
            verifier.verify_claims(module, claims, TokenOptions())

        assert exc_info.value.reason == "token_expired"
        assert exc_info.value.code == "VERIFICATION_REJECTED"

    def test_not_yet_valid(self, verifier, module, claims):
        """Test claims before nbf are rejected."""
        claims["nbf"] = NOW + 5

        with pytest.raises(VerificationRejectedError) as exc_info:
            verifier.verify_claims(module, claims, TokenOptions())

        assert exc_info.value.reason == "token_not_yet_valid"

    def test_allowed_drift(self, provider, verifier, claims):
        """Test drift tolerance on exp."""
        provider.register("drift", get_module_config(
            "drift", issuer="auth.example.com", secret_key="k", allowed_drift=30
        ))
        claims["exp"] = NOW - 10

        result = verifier.verify_claims(ModuleContext("drift", provider), claims, TokenOptions())

        assert result == claims

    @pytest.mark.parametrize("key,value", [("exp", "soon"), ("iat", 1.5), ("nbf", True), ("sub", 42)])
    def test_malformed_claims(self, verifier, module, claims, key, value):
        """Test wrongly typed registered claims."""
        claims[key] = value

        with pytest.raises(VerificationRejectedError) as exc_info:
            verifier.verify_claims(module, claims, TokenOptions())

        assert exc_info.value.reason == "malformed_claim"
        assert exc_info.value.details["claim"] == key

    def test_issuer_not_checked_by_default(self, verifier, module, claims):
        """Test iss is ignored unless verify_issuer is set."""
        claims["iss"] = "someone-else"

        assert verifier.verify_claims(module, claims, TokenOptions()) == claims

    def test_invalid_issuer(self, provider, verifier, claims):
        """Test iss mismatch when verify_issuer is set."""
        provider.register("strict", get_module_config(
            "strict", issuer="auth.example.com", secret_key="k", verify_issuer=True
        ))
        claims["iss"] = "someone-else"

        with pytest.raises(VerificationRejectedError) as exc_info:
            verifier.verify_claims(ModuleContext("strict", provider), claims, TokenOptions())

        assert exc_info.value.reason == "invalid_issuer"


class TestVerificationPipeline:
    """Test cases for VerificationPipeline."""

    @pytest.fixture
    def provider(self):
        return SettingsConfigProvider({
            "web": get_module_config("web", issuer="auth.example.com", secret_key="k")
        })

    @pytest.fixture
    def module(self, provider):
        return ModuleContext("web", provider)

    @pytest.fixture
    def claims(self):
        return {"sub": "user-1", "typ": "access", "iat": NOW, "nbf": NOW - 1, "exp": NOW + 60}

    def test_both_stages_run(self, module, claims):
        """Test the caller-level stage sees validated claims."""
        pipeline = VerificationPipeline(
            claims_verifier=ActiveUserVerifier(),
            default_verifier=StandardClaimsVerifier(clock=lambda: NOW),
        )

        result = pipeline.verify(claims, module)

        assert result["active"] is True

    def test_second_stage_rejection_propagates(self, module, claims):
        """Test a caller-level rejection keeps its own reason."""
        pipeline = VerificationPipeline(
            claims_verifier=ActiveUserVerifier(active=[]),
            default_verifier=StandardClaimsVerifier(clock=lambda: NOW),
        )

        with pytest.raises(VerificationRejectedError) as exc_info:
            pipeline.verify(claims, module)

        assert exc_info.value.reason == "inactive_user"

    def test_first_stage_short_circuits(self, module, claims):
        """Test the caller-level stage is skipped after a stage-one rejection."""
        second = MagicMock(spec=ClaimsVerifier)
        pipeline = VerificationPipeline(
            claims_verifier=second,
            default_verifier=StandardClaimsVerifier(clock=lambda: NOW + 3600),
        )

        with pytest.raises(VerificationRejectedError) as exc_info:
            pipeline.verify(claims, module)

        assert exc_info.value.reason == "token_expired"
        second.verify_claims.assert_not_called()

    def test_configured_module_verifier(self, provider, claims):
        """Test token_verify_module replaces the standard verifier."""
        provider.register("custom", get_module_config(
            "custom", issuer="i", secret_key="k", token_verify_module=ActiveUserVerifier(active=[])
        ))
        pipeline = VerificationPipeline()

        with pytest.raises(VerificationRejectedError) as exc_info:
            pipeline.verify(claims, ModuleContext("custom", provider))

        assert exc_info.value.reason == "inactive_user"

    def test_configured_verifier_class_uses_pipeline_clock(self, provider, claims):
        """Test a configured verifier class sees the pipeline clock, not wall time."""
        provider.register("classed", get_module_config(
            "classed", issuer="i", secret_key="k", token_verify_module=StandardClaimsVerifier
        ))
        pipeline = VerificationPipeline(clock=lambda: NOW)

        assert pipeline.verify(claims, ModuleContext("classed", provider)) == claims

    def test_default_caller_stage_passes_through(self, module, claims):
        """Test no caller-level verifier means claims pass unchanged."""
        pipeline = VerificationPipeline(default_verifier=PassthroughClaimsVerifier())

        assert pipeline.verify(claims, module) == claims


class TestLoadVerifier:
    """Test cases for load_verifier."""

    def test_instance(self):
        verifier = PassthroughClaimsVerifier()
        assert load_verifier(verifier) is verifier

    def test_class(self):
        assert isinstance(load_verifier(PassthroughClaimsVerifier), PassthroughClaimsVerifier)

    def test_dotted_path(self):
        """Test loading a verifier by import path."""
        verifier = load_verifier("service_tokens.app.verification.StandardClaimsVerifier")

        assert isinstance(verifier, StandardClaimsVerifier)

    def test_class_built_with_clock(self):
        """Test a configured standard verifier class checks time against the given clock."""
        clock = lambda: NOW

        verifier = load_verifier(StandardClaimsVerifier, clock=clock)

        assert verifier.clock is clock

    def test_dotted_path_built_with_clock(self):
        """Test a standard verifier loaded by path uses the given clock."""
        clock = lambda: NOW

        verifier = load_verifier("service_tokens.app.verification.StandardClaimsVerifier", clock=clock)

        assert verifier.clock is clock

    @pytest.mark.parametrize("value", ["nope", "service_tokens.app.missing.Verifier", object()])
    def test_invalid(self, value):
        """Test values that are not verifiers."""
        with pytest.raises(ConfigurationError):
            load_verifier(value)


class TestVerifyLiteralClaims:
    """Test cases for verify_literal_claims."""

    def test_matching(self):
        claims = {"sub": "user-1", "typ": "access"}
        assert verify_literal_claims(claims, {"typ": "access"}) == claims

    def test_mismatch(self):
        """Test a differing literal is rejected."""
        with pytest.raises(VerificationRejectedError) as exc_info:
            verify_literal_claims({"typ": "refresh"}, {"typ": "access"})

        assert exc_info.value.reason == "claim_mismatch"
        assert exc_info.value.details["claim"] == "typ"

    def test_nothing_to_check(self):
        assert verify_literal_claims({"a": 1}, None) == {"a": 1}
