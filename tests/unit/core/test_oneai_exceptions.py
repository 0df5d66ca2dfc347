# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""Unit tests for core exceptions."""

from oneai.core.exceptions import (
    AdapterTimeoutError,
    ConfigurationError,
    InternalError,
    OneAIError,
    RoutingError,
    ValidationError,
    VendorError,
)


class TestOneAIError:
    """Test base OneAI error."""

    def test_base_error_message(self):
        """Test base error with message."""
        error = OneAIError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.error_code is None
        assert error.details == {}

    def test_base_error_to_dict(self):
        """Test converting error to dictionary."""
        error = OneAIError("Test error", error_code="TEST_ERROR", details={"key": "value"})

        result = error.to_dict()
        assert result["error"]["message"] == "Test error"
        assert result["error"]["type"] == "OneAIError"
        assert result["error"]["code"] == "TEST_ERROR"
        assert result["error"]["details"] == {"key": "value"}


class TestConfigurationError:
    """Test missing-credential errors."""

    def test_config_key_is_recorded(self):
        error = ConfigurationError("OpenAI is not configured", config_key="OPENAI_API_KEY")
        assert error.config_key == "OPENAI_API_KEY"
        assert error.error_code == "configuration_error"
        assert error.details["config_key"] == "OPENAI_API_KEY"
        assert isinstance(error, OneAIError)


class TestVendorError:
    """Test upstream vendor errors."""

    def test_vendor_error_context(self):
        """Test vendor error carries provider and status."""
        error = VendorError("Together chat failed: 429 rate limited", provider="together", status_code=429)
        assert error.provider == "together"
        assert error.status_code == 429
        assert error.error_code == "vendor_error"
        assert error.details == {"provider": "together", "status_code": 429}

    def test_timeout_is_a_vendor_error(self):
        """Timeouts are handled wherever vendor errors are."""
        error = AdapterTimeoutError("OpenAI chat timed out after 30s", provider="openai", timeout_s=30.0)
        assert isinstance(error, VendorError)
        assert error.error_code == "adapter_timeout"
        assert error.timeout_s == 30.0
        assert error.details["timeout_s"] == 30.0
        assert error.details["provider"] == "openai"


class TestRequestErrors:
    """Test validation, routing and internal errors."""

    def test_validation_error_field(self):
        error = ValidationError("Prompt is required", field="prompt")
        assert error.field == "prompt"
        assert error.to_dict()["error"]["code"] == "validation_error"
        assert error.to_dict()["error"]["details"] == {"field": "prompt"}

    def test_routing_error_task(self):
        error = RoutingError("No providers configured for task chat", task="chat")
        assert error.task == "chat"
        assert error.error_code == "routing_error"

    def test_internal_error_defaults(self):
        error = InternalError()
        assert error.message == "Internal error"
        assert error.error_code == "internal_error"
