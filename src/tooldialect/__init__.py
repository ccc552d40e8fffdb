"""tooldialect - function-call dialects for LLM conversations.

Turns a model's free-form reply into a validated call of a local tool,
and turns the result (or any failure) back into a message for the model.
Each model family's calling convention is a dialect: tag-delimited blocks,
fenced JSON, or native structured calls.
"""

from tooldialect.capabilities import (
    Capability,
    CapabilityDescriptor,
    CapabilityRegistry,
    capability,
    serialize_capabilities,
    to_function_declaration,
)
from tooldialect.dialects import (
    DIALECTS,
    DialectParser,
    FencedJSONDialect,
    StructuredCallDialect,
    TaggedBlockDialect,
    dialect_from_config,
    get_dialect,
)
from tooldialect.foundation.errors import (
    CapabilityError,
    DispatchError,
    ErrorCode,
    ToolDialectError,
)
from tooldialect.models import FunctionCallIntent, Message, TurnResponse

__version__ = "0.1.0"

__all__ = [
    # Capabilities
    "Capability",
    "CapabilityDescriptor",
    "CapabilityRegistry",
    "capability",
    "serialize_capabilities",
    "to_function_declaration",
    # Dialects
    "DIALECTS",
    "DialectParser",
    "FencedJSONDialect",
    "StructuredCallDialect",
    "TaggedBlockDialect",
    "dialect_from_config",
    "get_dialect",
    # Protocol
    "FunctionCallIntent",
    "Message",
    "TurnResponse",
    # Errors
    "CapabilityError",
    "DispatchError",
    "ErrorCode",
    "ToolDialectError",
]
