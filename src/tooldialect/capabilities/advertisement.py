"""Capability advertisement.

Serializes descriptors into the OpenAI function-declaration shape that
every dialect embeds in its system prompt:

    {"type": "function",
     "function": {"name": ..., "description": ..., "parameters": {...}}}

The declaration shape is shared by all dialects even though the way a
call comes back differs per dialect.
"""

import json
from collections.abc import Iterable
from typing import Any

from tooldialect.capabilities.descriptor import CapabilityDescriptor


def to_function_declaration(descriptor: CapabilityDescriptor) -> dict[str, Any]:
    """Convert one descriptor to an OpenAI-style function declaration.

    The parameter schema is passed through untouched.
    """
    return {
        "type": "function",
        "function": {
            "name": descriptor.name,
            "description": descriptor.description,
            "parameters": descriptor.parameter_schema,
        },
    }


def serialize_capabilities(capabilities: Iterable[CapabilityDescriptor]) -> str:
    """Serialize descriptors to a compact JSON list, in registry order."""
    declarations = [to_function_declaration(d) for d in capabilities]
    return json.dumps(declarations, separators=(",", ":"), ensure_ascii=False)


def parse_declarations(serialized: str) -> list[dict[str, Any]]:
    """Read ``{name, description, parameters}`` back from a serialized list."""
    return [entry["function"] for entry in json.loads(serialized)]
