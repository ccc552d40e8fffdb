"""TaggedBlock dialect.

Models in this family wrap a JSON call in tags and receive results the
same way:

    <tool_call>{"name": "get_weather", "arguments": {"city": "Oslo"}}</tool_call>
    <tool_response>
    22C
    </tool_response>

They are prompted with doubled braces and often echo them back, so one
level of brace escaping is undone before parsing.
"""

import logging
import re
from typing import ClassVar

from tooldialect.dialects.base import DialectParser, parse_intent_json
from tooldialect.dialects.templates import TAGGED_SYSTEM_TEMPLATE
from tooldialect.foundation.errors import DispatchError, ErrorCode, extraction_failed
from tooldialect.models.protocol import FunctionCallIntent

logger = logging.getLogger(__name__)

_TOOL_CALL_RE = re.compile(r"<tool_call>(.*?)</tool_call>", re.DOTALL)


def unescape_braces(body: str) -> str:
    """Undo one level of ``{{``/``}}`` escaping.

    Applied only when the body opens with ``{{``. No JSON object starts
    that way, so single-braced bodies (including nested objects ending in
    ``}}``) pass through unchanged.
    """
    if body.lstrip().startswith("{{"):
        return body.replace("{{", "{").replace("}}", "}")
    return body


def normalize_tool_call_body(body: str) -> str:
    """Strip embedded line breaks, then undo doubled braces."""
    return unescape_braces(body.replace("\n", ""))


class TaggedBlockDialect(DialectParser):
    """``<tool_call>`` in, ``<tool_response>`` out."""

    dialect_id = "tagged"
    system_template = TAGGED_SYSTEM_TEMPLATE
    wrap_errors = True
    error_template = (
        "<tool_response>\n"
        "There was an error parsing function calls\n"
        " Here's the error stack trace: {detail}\n"
        "Please call the function again with correct syntax"
        "</tool_response>"
    )
    tool_not_found_message = "Tool name not found"
    tag_not_found_message: ClassVar[str] = "Error while extracting <tool_call> tags."
    first_turn_note: ClassVar[str] = (
        "This is the first turn and you don't have <tool_results> to analyze yet"
    )

    def extract_tool_call(self, content: str) -> str | None:
        """Normalized body of the first ``<tool_call>`` block, or None."""
        match = _TOOL_CALL_RE.search(content)
        if match is None:
            return None
        return normalize_tool_call_body(match.group(1))

    def extract_intent(self, raw_text: str) -> FunctionCallIntent:
        body = self.extract_tool_call(raw_text)
        if body is None:
            raise extraction_failed(self.tag_not_found_message)

        try:
            return parse_intent_json(body)
        except DispatchError as e:
            # Partially doubled braces, e.g. {"name": "x", "arguments": {{}}}
            if e.code is ErrorCode.MALFORMED_INTENT and ("{{" in body or "}}" in body):
                retry = body.replace("{{", "{").replace("}}", "}")
                try:
                    intent = parse_intent_json(retry)
                except DispatchError:
                    raise e from None
                logger.debug("Recovered tool call after undoing doubled braces")
                return intent
            raise

    def format_tool_result(self, result: str) -> str:
        return f"<tool_response>\n{result}\n</tool_response>\n"

    def format_query(self, user_text: str, *, first_turn: bool = True) -> str:
        if not first_turn:
            return user_text
        return f"{user_text}\n{self.first_turn_note}"

    def format_response(self, text: str) -> str:
        return f"Agent iteration to assist with user query: {text}"
