"""Tests for the TaggedBlock dialect (<tool_call> / <tool_response>)."""

import json

import pytest

from tooldialect.capabilities import CapabilityDescriptor, CapabilityRegistry
from tooldialect.dialects import TaggedBlockDialect
from tooldialect.dialects.tagged import normalize_tool_call_body, unescape_braces
from tooldialect.foundation.config import DialectSettings
from tooldialect.foundation.errors import DispatchError, ErrorCode

ERROR_PREFIX = (
    "<tool_response>\n"
    "There was an error parsing function calls\n"
    " Here's the error stack trace: "
)
ERROR_SUFFIX = "\nPlease call the function again with correct syntax</tool_response>"


@pytest.fixture
def dialect() -> TaggedBlockDialect:
    return TaggedBlockDialect()


class TestBraceUnescaping:
    """Test undoing one level of doubled braces."""

    def test_doubled_braces_collapse(self):
        """A fully doubled body loses exactly one level."""
        assert unescape_braces('{{"name": "x"}}') == '{"name": "x"}'

    def test_single_braces_untouched(self):
        """Single-braced JSON is left alone, even with nested objects."""
        body = '{"name": "get_weather", "arguments": {}}'
        assert unescape_braces(body) == body

    def test_idempotent(self):
        body = '{"name": "x", "arguments": {"a": {"b": 1}}}'
        assert unescape_braces(unescape_braces(body)) == body

    def test_only_one_level(self):
        assert unescape_braces('{{{{"a": 1}}}}') == '{{"a": 1}}'

    def test_normalize_strips_line_breaks(self):
        body = '\n{{"name": "x",\n "arguments": {{}}}}\n'
        assert normalize_tool_call_body(body) == '{"name": "x", "arguments": {}}'


class TestExtraction:
    """Test locating and parsing the <tool_call> block."""

    def test_first_block_wins(self, dialect: TaggedBlockDialect):
        text = (
            '<tool_call>{"name": "a", "arguments": {}}</tool_call>'
            '<tool_call>{"name": "b", "arguments": {}}</tool_call>'
        )
        assert dialect.extract_intent(text).name == "a"

    def test_multiline_block_with_prose(self, dialect: TaggedBlockDialect):
        text = (
            "Let me check that for you.\n"
            "<tool_call>\n"
            '{"name": "get_weather",\n "arguments": {"city": "Oslo"}}\n'
            "</tool_call>"
        )
        intent = dialect.extract_intent(text)
        assert intent.name == "get_weather"
        assert intent.arguments == {"city": "Oslo"}

    def test_missing_tag(self, dialect: TaggedBlockDialect):
        with pytest.raises(DispatchError) as exc_info:
            dialect.extract_intent('{"name": "get_weather", "arguments": {}}')
        assert exc_info.value.code is ErrorCode.EXTRACTION_FAILED

    def test_partially_doubled_braces_recovered(self, dialect: TaggedBlockDialect):
        intent = dialect.extract_intent(
            '<tool_call>{"name": "x", "arguments": {{}}}</tool_call>'
        )
        assert intent.name == "x"
        assert intent.arguments == {}

    def test_missing_arguments_is_malformed(self, dialect: TaggedBlockDialect):
        with pytest.raises(DispatchError) as exc_info:
            dialect.extract_intent('<tool_call>{"name": "x"}</tool_call>')
        assert exc_info.value.code is ErrorCode.MALFORMED_INTENT
        assert "arguments" in exc_info.value.message


class TestParse:
    """Test full parse-and-dispatch."""

    @pytest.mark.asyncio
    async def test_success_wraps_result(self, dialect, registry):
        """Scenario: get_weather returns 22C."""
        response = await dialect.parse(
            '<tool_call>{"name": "get_weather", "arguments": {}}</tool_call>',
            "hermes",
            registry,
        )

        assert response.ok
        assert response.content == "<tool_response>\n22C\n</tool_response>\n"
        assert response.message.role == "assistant"
        assert response.model == "hermes"
        assert response.done
        assert response.final_data == {"tool": "get_weather", "arguments": {}}

    @pytest.mark.asyncio
    async def test_doubled_braces_dispatch(self, dialect, recorder):
        tool, calls = recorder
        response = await dialect.parse(
            '<tool_call>{{"name": "record", "arguments": {{"k": 1}}}}</tool_call>',
            "hermes",
            CapabilityRegistry([tool]),
        )

        assert response.ok
        assert calls == [{"k": 1}]

    @pytest.mark.asyncio
    async def test_malformed_json(self, dialect, registry):
        """Scenario: body is not JSON."""
        response = await dialect.parse("<tool_call>not json</tool_call>", "hermes", registry)

        assert not response.ok
        assert response.content.startswith(ERROR_PREFIX)
        assert response.content.endswith(ERROR_SUFFIX)
        assert "Invalid JSON" in response.content

    @pytest.mark.asyncio
    async def test_no_tag_is_distinct_from_parse_error(self, dialect, registry):
        """Scenario: no <tool_call> tag at all."""
        response = await dialect.parse("The weather is nice today.", "hermes", registry)

        assert not response.ok
        assert "Error while extracting <tool_call> tags." in response.content
        assert "Invalid JSON" not in response.content
        assert response.final_data["error"]["code"] == ErrorCode.EXTRACTION_FAILED.value

    @pytest.mark.asyncio
    async def test_unknown_tool(self, dialect, registry):
        response = await dialect.parse(
            '<tool_call>{"name": "Get_Weather", "arguments": {}}</tool_call>',
            "hermes",
            registry,
        )

        assert not response.ok
        assert response.content == f"{ERROR_PREFIX}Tool name not found{ERROR_SUFFIX}"

    @pytest.mark.asyncio
    async def test_capability_failure(self, dialect, registry):
        response = await dialect.parse(
            '<tool_call>{"name": "flaky", "arguments": {}}</tool_call>',
            "hermes",
            registry,
        )

        assert not response.ok
        assert "upstream service unavailable" in response.content
        assert response.content.startswith(ERROR_PREFIX)
        assert response.final_data["error"]["code"] == ErrorCode.CAPABILITY_FAILED.value

    @pytest.mark.asyncio
    async def test_unwrapped_errors_when_configured(self, registry):
        dialect = TaggedBlockDialect(DialectSettings(wrap_errors=False))
        response = await dialect.parse("no tags here", "hermes", registry)

        assert response.content == "Error while extracting <tool_call> tags."

    @pytest.mark.asyncio
    async def test_argument_validation(self, registry):
        dialect = TaggedBlockDialect(DialectSettings(validate_arguments=True))
        response = await dialect.parse(
            '<tool_call>{"name": "get_weather", "arguments": {"unit": "K"}}</tool_call>',
            "hermes",
            registry,
        )

        assert not response.ok
        assert "Missing required parameter: city" in response.content
        assert "invalid value" in response.content

    @pytest.mark.asyncio
    async def test_validation_with_boolean_subschema(self):
        tool = CapabilityDescriptor(
            "t",
            "Open schema",
            {"type": "object", "properties": {"x": True}, "required": ["x"]},
            invoke=lambda args: "ran",
        )
        dialect = TaggedBlockDialect(DialectSettings(validate_arguments=True))

        response = await dialect.parse(
            '<tool_call>{"name": "t", "arguments": {}}</tool_call>',
            "hermes",
            CapabilityRegistry([tool]),
        )

        assert not response.ok
        assert "Missing required parameter: x" in response.content
        assert response.final_data["error"]["code"] == ErrorCode.INVALID_ARGUMENTS.value


class TestFormatting:
    """Test turn formatting hooks and the system message."""

    def test_first_turn_note(self, dialect: TaggedBlockDialect):
        query = dialect.format_query("What's the weather in Oslo?")
        assert query == (
            "What's the weather in Oslo?\n"
            "This is the first turn and you don't have <tool_results> to analyze yet"
        )

    def test_later_turns_unchanged(self, dialect: TaggedBlockDialect):
        assert dialect.format_query("and tomorrow?", first_turn=False) == "and tomorrow?"

    def test_format_response(self, dialect: TaggedBlockDialect):
        assert dialect.format_response("checking") == (
            "Agent iteration to assist with user query: checking"
        )

    def test_system_message_lists_tools(self, dialect, registry):
        message = dialect.build_system_message(registry)

        assert message.role == "system"
        assert "{tools}" not in message.content
        start = message.content.index("<tools>\n") + len("<tools>\n")
        end = message.content.index("\n</tools>")
        declarations = json.loads(message.content[start:end])
        assert [d["function"]["name"] for d in declarations] == ["get_weather", "flaky"]
