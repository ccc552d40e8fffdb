"""StructuredCall dialect.

For models with native function calling, where the call arrives in a
structured field rather than in prose. Accepts the decoded response or its
JSON text, in any of these shapes:

- chat completion: ``{"choices": [{"message": {...}}]}``
- chat response wrapper: ``{"message": {...}}``
- message with ``tool_calls``: ``{"tool_calls": [{"function": {...}}]}``
- legacy message: ``{"function_call": {...}}``
- bare call: ``{"name": ..., "arguments": ...}``
- the ``tool_calls`` list on its own: ``[{"function": {...}}]``

``arguments`` may be a JSON-encoded string, as OpenAI sends it. Only the
first call is dispatched.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any, ClassVar

from tooldialect.dialects.base import DialectParser, build_intent
from tooldialect.dialects.templates import STRUCTURED_SYSTEM_TEMPLATE
from tooldialect.foundation.errors import extraction_failed, malformed_intent
from tooldialect.models.protocol import FunctionCallIntent

logger = logging.getLogger(__name__)


def _unwrap_message(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    """Descend from a completion or response wrapper to the message."""
    choices = payload.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], Mapping):
        message = choices[0].get("message")
        if isinstance(message, Mapping):
            return message
    message = payload.get("message")
    if isinstance(message, Mapping):
        return message
    return payload


def find_call(payload: Mapping[str, Any]) -> Mapping[str, Any] | None:
    """Locate the first function call object in a structured payload."""
    message = _unwrap_message(payload)

    tool_calls = message.get("tool_calls")
    if isinstance(tool_calls, list) and tool_calls:
        if len(tool_calls) > 1:
            logger.debug("Ignoring %d extra tool calls", len(tool_calls) - 1)
        first = tool_calls[0]
        if isinstance(first, Mapping):
            function = first.get("function")
            return function if isinstance(function, Mapping) else first

    function_call = message.get("function_call")
    if isinstance(function_call, Mapping):
        return function_call

    if "name" in message:
        return message
    return None


class StructuredCallDialect(DialectParser):
    """Native structured calls in, plain text out."""

    dialect_id = "structured"
    system_template = STRUCTURED_SYSTEM_TEMPLATE
    wrap_errors = True
    no_call_message: ClassVar[str] = "No tool call found in model response"

    def extract_intent(self, raw_text: str | Mapping[str, Any] | list[Any]) -> FunctionCallIntent:
        if isinstance(raw_text, str):
            try:
                payload: Any = json.loads(raw_text)
            except json.JSONDecodeError as e:
                raise malformed_intent(str(e), cause=e) from e
        else:
            payload = raw_text

        # A bare list is a message's tool_calls
        if isinstance(payload, list):
            payload = {"tool_calls": payload}
        if not isinstance(payload, Mapping):
            raise extraction_failed(self.no_call_message)

        call = find_call(payload)
        if call is None:
            raise extraction_failed(self.no_call_message)

        data = dict(call)
        arguments = data.get("arguments")
        if isinstance(arguments, str):
            try:
                data["arguments"] = json.loads(arguments) if arguments.strip() else {}
            except json.JSONDecodeError as e:
                raise malformed_intent(f"arguments: {e}", cause=e) from e

        return build_intent(data)
