"""Tests for the structured error system."""

from tooldialect.foundation.errors import (
    CapabilityError,
    DispatchError,
    ErrorCode,
    ToolDialectError,
    capability_failed,
    config_error,
    unknown_tool,
)


class TestErrorCode:
    def test_categories(self):
        assert ErrorCode.UNKNOWN_TOOL.category == "dispatch"
        assert ErrorCode.CONFIG_INVALID.category == "config"

    def test_only_dispatch_errors_recoverable(self):
        assert ErrorCode.MALFORMED_INTENT.is_recoverable
        assert not ErrorCode.CONFIG_UNKNOWN_DIALECT.is_recoverable


class TestToolDialectError:
    """Test message formatting and serialization."""

    def test_str(self):
        err = config_error(
            ErrorCode.CONFIG_UNKNOWN_DIALECT,
            dialect="xml",
            available="tagged, fenced",
        )
        assert str(err) == "[TD-2003] Unknown dialect 'xml'. Available: tagged, fenced"
        assert err.error_id == "TD-2003"

    def test_dispatch_message_is_detail(self):
        err = unknown_tool("lookup", "Tool name not found")

        assert isinstance(err, DispatchError)
        assert err.message == "Tool name not found"
        assert err.context["tool"] == "lookup"

    def test_missing_context_falls_back_to_template(self):
        err = ToolDialectError(ErrorCode.CONFIG_INVALID)
        assert err.message == "Invalid configuration for '{key}': {detail}"

    def test_capability_failed_keeps_cause(self):
        cause = CapabilityError("quota exceeded")
        err = capability_failed("search", cause)

        assert err.message == "quota exceeded"
        assert err.cause is cause

    def test_capability_failed_without_message(self):
        err = capability_failed("search", RuntimeError())
        assert err.message == "RuntimeError"

    def test_to_dict(self):
        err = unknown_tool("lookup", "Tool not found")
        data = err.to_dict()

        assert data["error_id"] == "TD-1003"
        assert data["code"] == 1003
        assert data["category"] == "dispatch"
        assert data["recoverable"] is True
        assert data["recovery_hints"]

    def test_for_llm_numbers_hints(self):
        err = config_error(ErrorCode.CONFIG_UNKNOWN_DIALECT, dialect="xml", available="tagged")
        text = err.for_llm()

        assert text.startswith("ERROR TD-2003: Unknown dialect 'xml'.")
        assert "Recovery options:\n  1. Use one of: tagged" in text
