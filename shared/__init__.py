"""
Shared utilities for the token lifecycle core.

This package aggregates common building blocks consumed by the token
service package:

- config: Base configuration via pydantic-settings
- logging: Structured logging with correlation context
- errors: Canonical error types and responses

Any cross-package logic should live here to avoid import cycles. Do not
import from service_* packages into shared/.
"""
