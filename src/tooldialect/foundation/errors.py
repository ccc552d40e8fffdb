"""tooldialect error system.

Provides structured error handling with:
- Numeric error codes for programmatic handling
- Model-readable messages for self-correction
- Recovery hints
- Context for debugging

Dispatch errors (1xxx) are recoverable: every dialect converts them into a
conversation message. Configuration errors (2xxx) are defects in how the
package was set up and are raised to the caller.
"""

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Numeric error codes organized by category.

    Format: XYYY where X = category, YYY = specific error

    Categories:
        1xxx - Dispatch errors (extraction, parsing, lookup, invocation)
        2xxx - Configuration errors
    """

    # 1xxx - Dispatch Errors
    EXTRACTION_FAILED = 1001
    MALFORMED_INTENT = 1002
    UNKNOWN_TOOL = 1003
    INVALID_ARGUMENTS = 1004
    CAPABILITY_FAILED = 1005

    # 2xxx - Configuration Errors
    CONFIG_INVALID = 2001
    CONFIG_TEMPLATE_INVALID = 2002
    CONFIG_UNKNOWN_DIALECT = 2003
    CONFIG_DUPLICATE_CAPABILITY = 2004

    @property
    def category(self) -> str:
        """Get the error category name."""
        prefix = self.value // 1000
        return {
            1: "dispatch",
            2: "config",
        }.get(prefix, "unknown")

    @property
    def is_recoverable(self) -> bool:
        """Whether the conversation can continue after this error."""
        return self.category == "dispatch"


# Message templates. Dispatch messages are dialect-supplied feedback, so
# they pass the detail through untouched.
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.EXTRACTION_FAILED: "{detail}",
    ErrorCode.MALFORMED_INTENT: "{detail}",
    ErrorCode.UNKNOWN_TOOL: "{detail}",
    ErrorCode.INVALID_ARGUMENTS: "{detail}",
    ErrorCode.CAPABILITY_FAILED: "{detail}",

    ErrorCode.CONFIG_INVALID: "Invalid configuration for '{key}': {detail}",
    ErrorCode.CONFIG_TEMPLATE_INVALID: (
        "System template for dialect '{dialect}' has no '{placeholder}' placeholder."
    ),
    ErrorCode.CONFIG_UNKNOWN_DIALECT: (
        "Unknown dialect '{dialect}'. Available: {available}"
    ),
    ErrorCode.CONFIG_DUPLICATE_CAPABILITY: (
        "Capability '{tool}' is registered more than once."
    ),
}


RECOVERY_HINTS: dict[ErrorCode, list[str]] = {
    ErrorCode.EXTRACTION_FAILED: [
        "Emit the tool call using the exact delimiters from the system prompt",
    ],
    ErrorCode.MALFORMED_INTENT: [
        'Emit a JSON object with a "name" string and an "arguments" value',
    ],
    ErrorCode.UNKNOWN_TOOL: [
        "Call one of the tools listed in the system prompt",
        "Check the spelling and case of the tool name",
    ],
    ErrorCode.INVALID_ARGUMENTS: [
        "Match the argument names and types of the tool's parameter schema",
    ],
    ErrorCode.CONFIG_TEMPLATE_INVALID: [
        "Add the '{placeholder}' placeholder to the template",
        "Remove the system_template override for '{dialect}'",
    ],
    ErrorCode.CONFIG_UNKNOWN_DIALECT: [
        "Use one of: {available}",
    ],
}


class ToolDialectError(Exception):
    """Base error type for all tooldialect errors.

    Example:
        >>> err = ToolDialectError(
        ...     code=ErrorCode.CONFIG_UNKNOWN_DIALECT,
        ...     context={"dialect": "xml", "available": "tagged, fenced"},
        ... )
        >>> print(err)
        [TD-2003] Unknown dialect 'xml'. Available: tagged, fenced
    """

    def __init__(
        self,
        code: ErrorCode,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.code = code
        self.context = context or {}
        self.cause = cause
        super().__init__(str(self))

    @property
    def message(self) -> str:
        """Get the formatted message."""
        template = ERROR_MESSAGES.get(self.code, "An error occurred: {detail}")
        try:
            return template.format(**self.context)
        except KeyError:
            return template

    @property
    def recovery_hints(self) -> list[str]:
        """Get recovery suggestions for this error."""
        formatted = []
        for hint in RECOVERY_HINTS.get(self.code, []):
            try:
                formatted.append(hint.format(**self.context))
            except KeyError:
                formatted.append(hint)
        return formatted

    @property
    def is_recoverable(self) -> bool:
        return self.code.is_recoverable

    @property
    def category(self) -> str:
        return self.code.category

    @property
    def error_id(self) -> str:
        """Get the error ID string (e.g., 'TD-1003')."""
        return f"TD-{self.code.value}"

    def __str__(self) -> str:
        return f"[{self.error_id}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, context={self.context!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict for logging and machine output."""
        return {
            "error_id": self.error_id,
            "code": self.code.value,
            "category": self.category,
            "message": self.message,
            "recoverable": self.is_recoverable,
            "recovery_hints": self.recovery_hints,
            "context": self.context,
        }

    def for_llm(self) -> str:
        """Format error with its recovery options for LLM consumption."""
        parts = [f"ERROR {self.error_id}: {self.message}"]
        if self.recovery_hints:
            parts.append("Recovery options:")
            for i, hint in enumerate(self.recovery_hints, 1):
                parts.append(f"  {i}. {hint}")
        return "\n".join(parts)


class DispatchError(ToolDialectError):
    """A recoverable failure while turning model output into a tool result.

    Never escapes a dialect's ``parse``: the dialect's ``handle_error``
    turns it into a feedback message for the model.
    """


class CapabilityError(Exception):
    """Raised by a capability to report a failure back to the model.

    The exception text becomes the feedback detail verbatim.
    """


# Convenience factory functions

def extraction_failed(detail: str) -> DispatchError:
    """Expected delimiter, fence or structured field is absent."""
    return DispatchError(ErrorCode.EXTRACTION_FAILED, {"detail": detail})


def malformed_intent(detail: str, cause: Exception | None = None) -> DispatchError:
    """Extracted body does not parse into a ``{name, arguments}`` structure."""
    return DispatchError(ErrorCode.MALFORMED_INTENT, {"detail": detail}, cause=cause)


def unknown_tool(tool: str, detail: str) -> DispatchError:
    """Parsed name has no match in the registry."""
    return DispatchError(ErrorCode.UNKNOWN_TOOL, {"tool": tool, "detail": detail})


def invalid_arguments(tool: str, detail: str) -> DispatchError:
    """Arguments do not satisfy the capability's parameter schema."""
    return DispatchError(ErrorCode.INVALID_ARGUMENTS, {"tool": tool, "detail": detail})


def capability_failed(tool: str, cause: Exception) -> DispatchError:
    """The capability was dispatched but reported an error.

    Exceptions raised without a message are reported by type name.
    """
    return DispatchError(
        ErrorCode.CAPABILITY_FAILED,
        {"tool": tool, "detail": str(cause) or type(cause).__name__},
        cause=cause,
    )


def config_error(
    code: ErrorCode,
    cause: Exception | None = None,
    **context: Any,
) -> ToolDialectError:
    """Create a configuration error."""
    return ToolDialectError(code=code, context=context, cause=cause)
