"""Conversation protocol types."""

from tooldialect.models.protocol import (
    FunctionCallIntent,
    Message,
    TurnResponse,
    describe_validation_error,
)

__all__ = [
    "FunctionCallIntent",
    "Message",
    "TurnResponse",
    "describe_validation_error",
]
