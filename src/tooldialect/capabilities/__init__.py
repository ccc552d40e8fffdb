"""Capability declarations, registry and advertisement."""

from tooldialect.capabilities.advertisement import (
    parse_declarations,
    serialize_capabilities,
    to_function_declaration,
)
from tooldialect.capabilities.descriptor import (
    Capability,
    CapabilityDescriptor,
    capability,
)
from tooldialect.capabilities.registry import CapabilityRegistry
from tooldialect.capabilities.validation import (
    ValidationResult,
    format_validation_feedback,
    validate_arguments,
)

__all__ = [
    "Capability",
    "CapabilityDescriptor",
    "CapabilityRegistry",
    "ValidationResult",
    "capability",
    "format_validation_feedback",
    "parse_declarations",
    "serialize_capabilities",
    "to_function_declaration",
    "validate_arguments",
]
