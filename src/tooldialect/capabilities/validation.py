"""Argument validation against a capability's parameter schema.

Covers the subset of JSON Schema that tool declarations use in practice:
object arguments, required keys, unknown keys (when the schema lists
properties), primitive types and enums. Feedback is written for the model
so it can correct the call on the next turn.
"""

from dataclasses import dataclass
from typing import Any

from tooldialect.capabilities.descriptor import CapabilityDescriptor


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of argument validation."""

    success: bool
    """Whether the arguments are valid."""

    errors: tuple[str, ...]
    """Validation error messages."""

    suggestions: tuple[str, ...]
    """Suggestions for fixing the errors."""


_TYPE_MAP: dict[str, type | tuple[type, ...]] = {
    "string": str,
    "integer": int,
    "number": (int, float),
    "boolean": bool,
    "array": list,
    "object": dict,
    "null": type(None),
}


def validate_arguments(arguments: Any, descriptor: CapabilityDescriptor) -> ValidationResult:
    """Validate intent arguments against the descriptor's schema.

    Args:
        arguments: Arguments claimed by the model
        descriptor: The capability being called

    Returns:
        ValidationResult with errors and suggestions
    """
    schema = descriptor.parameter_schema or {}
    if schema.get("type", "object") != "object":
        ok = _type_matches(arguments, schema["type"])
        return ValidationResult(
            success=ok,
            errors=() if ok else (f"Arguments must be of type {schema['type']}",),
            suggestions=(),
        )

    if not isinstance(arguments, dict):
        return ValidationResult(
            success=False,
            errors=(f"Arguments must be an object, got {_json_type(arguments)}",),
            suggestions=('Pass arguments as a JSON object, e.g. {"key": "value"}',),
        )

    errors: list[str] = []
    suggestions: list[str] = []
    properties: dict[str, Any] = schema.get("properties") or {}

    for param in schema.get("required", []):
        if param not in arguments:
            errors.append(f"Missing required parameter: {param}")
            param_schema = properties.get(param)
            param_desc = (
                param_schema.get("description", "") if isinstance(param_schema, dict) else ""
            )
            if param_desc:
                suggestions.append(f"Parameter '{param}': {param_desc}")
            else:
                suggestions.append(f"Add the '{param}' parameter")

    for param, value in arguments.items():
        if param not in properties:
            if properties and schema.get("additionalProperties", True) is False:
                errors.append(f"Unknown parameter: {param}")
                suggestions.append(f"Remove '{param}' or check spelling")
            continue

        param_schema = properties[param]
        if not isinstance(param_schema, dict):
            # Boolean subschemas: true accepts anything, false nothing
            if param_schema is False:
                errors.append(f"Parameter '{param}' is not accepted")
                suggestions.append(f"Remove '{param}'")
            continue

        expected_type = param_schema.get("type")
        if expected_type and not _type_matches(value, expected_type):
            errors.append(
                f"Parameter '{param}' has wrong type: "
                f"expected {expected_type}, got {_json_type(value)}"
            )
            suggestions.append(f"Convert '{param}' to {expected_type}")
            continue

        enum_values = param_schema.get("enum")
        if enum_values and value not in enum_values:
            errors.append(
                f"Parameter '{param}' has invalid value: "
                f"got {value!r}, expected one of {enum_values}"
            )
            suggestions.append(f"Use one of: {', '.join(str(v) for v in enum_values)}")

    return ValidationResult(
        success=not errors,
        errors=tuple(errors),
        suggestions=tuple(suggestions),
    )


def _type_matches(value: Any, expected_type: str | list[str]) -> bool:
    """Check if a value matches a JSON Schema type (or list of types)."""
    if isinstance(expected_type, list):
        return any(_type_matches(value, t) for t in expected_type)

    expected = _TYPE_MAP.get(expected_type)
    if expected is None:
        return True  # Unknown type, assume valid

    # bool is an int subclass in Python but not a JSON number
    if isinstance(value, bool) and expected_type in ("integer", "number"):
        return False
    return isinstance(value, expected)


def _json_type(value: Any) -> str:
    for name, py_type in _TYPE_MAP.items():
        if name in ("integer", "number") and isinstance(value, bool):
            continue
        if isinstance(value, py_type):
            return name
    return type(value).__name__


def format_validation_feedback(result: ValidationResult, tool_name: str) -> str:
    """Format a failed validation for model feedback."""
    if result.success:
        return f"Tool call to '{tool_name}' is valid."

    lines = [f"Tool call to '{tool_name}' has validation errors:"]
    lines.extend(f"  - {error}" for error in result.errors)

    if result.suggestions:
        lines.append("To fix this:")
        lines.extend(f"  - {suggestion}" for suggestion in result.suggestions)

    return "\n".join(lines)
