# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Custom exceptions for OneAI.

This module defines all custom exceptions used throughout the gateway
to provide clear error handling and debugging information.
"""

from typing import Any


class OneAIError(Exception):
    """Base exception for all OneAI errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize OneAI base exception."""
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": {
                "message": self.message,
                "type": self.__class__.__name__,
                "code": self.error_code,
                "details": self.details,
            }
        }


class ConfigurationError(OneAIError):
    """Raised when a required credential or setting is missing.

    ``config_key`` names the environment variable the operator has to set.
    """

    def __init__(self, message: str, config_key: str | None = None, **kwargs: Any) -> None:
        """Initialize configuration error with key context."""
        self.config_key = config_key
        details = kwargs.get("details", {})
        details["config_key"] = config_key
        super().__init__(message, error_code="configuration_error", details=details)


class VendorError(OneAIError):
    """Exception for upstream vendor failures (non-2xx or malformed body)."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize vendor error with provider context."""
        self.provider = provider
        self.status_code = status_code
        details = kwargs.get("details", {})
        details.update({"provider": provider, "status_code": status_code})
        super().__init__(message, kwargs.get("error_code", "vendor_error"), details)


class AdapterTimeoutError(VendorError):
    """Exception for a vendor call that exceeded the per-call timeout."""

    def __init__(
        self, message: str, provider: str | None = None, timeout_s: float | None = None
    ) -> None:
        self.timeout_s = timeout_s
        super().__init__(
            message,
            provider=provider,
            error_code="adapter_timeout",
            details={"timeout_s": timeout_s},
        )


class ValidationError(OneAIError):
    """Exception for request validation errors."""

    def __init__(self, message: str, field: str | None = None, **kwargs: Any) -> None:
        """Initialize validation error with field context."""
        self.field = field
        details = kwargs.get("details", {})
        details["field"] = field
        super().__init__(message, error_code="validation_error", details=details)


class RoutingError(OneAIError):
    """Exception for routing-related errors."""

    def __init__(self, message: str, task: str | None = None, **kwargs: Any) -> None:
        """Initialize routing error with task context."""
        self.task = task
        details = kwargs.get("details", {})
        details["task"] = task
        super().__init__(message, kwargs.get("error_code", "routing_error"), details)


class InternalError(OneAIError):
    """Wraps an unexpected failure so it can be reported without leaking internals."""

    def __init__(self, message: str = "Internal error", **kwargs: Any) -> None:
        super().__init__(message, error_code="internal_error", **kwargs)
