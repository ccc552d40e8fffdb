"""Shared dialect contract.

A dialect turns one model family's raw output into a tool invocation and
turns the outcome back into a conversation message. Every dialect:

- extracts a FunctionCallIntent from text (``extract_intent``)
- looks the name up, optionally validates, and invokes (``dispatch``)
- routes every failure through ``handle_error``

``parse`` never raises for bad model output: extraction, parse, lookup,
validation and capability failures all come back as a TurnResponse with
``ok=False`` and feedback the model can act on next turn.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import ValidationError

from tooldialect.capabilities.advertisement import serialize_capabilities
from tooldialect.capabilities.registry import CapabilityRegistry
from tooldialect.capabilities.validation import format_validation_feedback, validate_arguments
from tooldialect.dialects.templates import TOOLS_PLACEHOLDER
from tooldialect.foundation.config import DialectSettings
from tooldialect.foundation.errors import (
    DispatchError,
    ErrorCode,
    ToolDialectError,
    capability_failed,
    config_error,
    invalid_arguments,
    malformed_intent,
    unknown_tool,
)
from tooldialect.models.protocol import (
    FunctionCallIntent,
    Message,
    TurnResponse,
    describe_validation_error,
)

logger = logging.getLogger(__name__)

# Plain-text feedback wording shared by dialects that opt into it.
PARSE_FEEDBACK_TEMPLATE = (
    "There was an error parsing function calls\n"
    " Here's the error stack trace: {detail}\n"
    "Please call the function again with correct syntax"
)


def parse_intent_json(text: str) -> FunctionCallIntent:
    """Parse a JSON ``{name, arguments}`` object.

    Raises:
        DispatchError: MALFORMED_INTENT with the parser's diagnostic
    """
    try:
        return FunctionCallIntent.model_validate_json(text)
    except ValidationError as e:
        raise malformed_intent(describe_validation_error(e), cause=e) from e


def build_intent(data: Any) -> FunctionCallIntent:
    """Validate an already-decoded ``{name, arguments}`` object."""
    try:
        return FunctionCallIntent.model_validate(data)
    except ValidationError as e:
        raise malformed_intent(describe_validation_error(e), cause=e) from e


class DialectParser(ABC):
    """Base class for dialect parsers.

    Subclasses set the class attributes and implement ``extract_intent``.
    Formatting hooks default to identity; override only what the dialect
    needs.
    """

    dialect_id: ClassVar[str]
    """Stable identifier used in configuration and the CLI."""

    system_template: ClassVar[str]
    """System prompt with one ``{tools}`` placeholder."""

    wrap_errors: ClassVar[bool]
    """Whether failure feedback goes through ``error_template``.

    Every dialect sets this explicitly.
    """

    error_template: ClassVar[str] = PARSE_FEEDBACK_TEMPLATE
    """Feedback wrapper used when errors are wrapped. ``{detail}`` is the failure text."""

    tool_not_found_message: ClassVar[str] = "Tool not found"

    def __init__(self, settings: DialectSettings | None = None) -> None:
        self._settings = settings or DialectSettings()

    @property
    def settings(self) -> DialectSettings:
        return self._settings

    @property
    def template(self) -> str:
        """Active system template (configured override or the dialect's own)."""
        return self._settings.system_template or self.system_template

    @property
    def wraps_errors(self) -> bool:
        if self._settings.wrap_errors is None:
            return self.wrap_errors
        return self._settings.wrap_errors

    # -------------------------------------------------------------------------
    # Extraction and dispatch
    # -------------------------------------------------------------------------

    @abstractmethod
    def extract_intent(self, raw_text: Any) -> FunctionCallIntent:
        """Pull one function-call intent out of raw model output.

        Raises:
            DispatchError: EXTRACTION_FAILED or MALFORMED_INTENT
        """

    async def parse(
        self,
        raw_text: Any,
        model_name: str,
        registry: CapabilityRegistry,
    ) -> TurnResponse:
        """Extract, validate and invoke the tool call in ``raw_text``.

        Args:
            raw_text: Raw model output
            model_name: Name of the model that produced it
            registry: Capabilities available for this turn

        Returns:
            TurnResponse with the tool result (``ok=True``) or feedback
            describing what went wrong (``ok=False``)
        """
        try:
            intent = self.extract_intent(raw_text)
        except DispatchError as e:
            return self.handle_error(e, model_name)

        logger.debug("%s: extracted call to '%s'", self.dialect_id, intent.name)
        return await self.dispatch(intent, model_name, registry)

    async def dispatch(
        self,
        intent: FunctionCallIntent,
        model_name: str,
        registry: CapabilityRegistry,
    ) -> TurnResponse:
        """Look up and invoke the capability an intent names."""
        descriptor = registry.get(intent.name)
        if descriptor is None:
            return self.handle_error(
                unknown_tool(intent.name, self.tool_not_found_message),
                model_name,
            )

        if self._settings.validate_arguments:
            validation = validate_arguments(intent.arguments, descriptor)
            if not validation.success:
                return self.handle_error(
                    invalid_arguments(
                        intent.name,
                        format_validation_feedback(validation, intent.name),
                    ),
                    model_name,
                )

        try:
            result = await descriptor.run(intent.arguments)
        except Exception as e:
            logger.debug("Capability '%s' raised", intent.name, exc_info=True)
            return self.handle_error(capability_failed(intent.name, e), model_name)

        return TurnResponse.success(
            self.format_tool_result(result),
            model=model_name,
            final_data={"tool": intent.name, "arguments": intent.arguments},
        )

    def handle_error(self, error: Exception, model_name: str = "") -> TurnResponse:
        """Convert any failure into a feedback TurnResponse.

        The single exit for every failure path of this dialect.
        """
        if isinstance(error, ToolDialectError):
            detail = error.message
            final_data = {"error": error.to_dict()}
            logger.warning("%s: %s %s", self.dialect_id, error.error_id, detail)
        else:
            detail = str(error)
            final_data = {"error": {"message": detail}}
            logger.warning("%s: %s", self.dialect_id, detail)

        return TurnResponse.failure(
            self.format_feedback(detail),
            model=model_name,
            final_data=final_data,
        )

    # -------------------------------------------------------------------------
    # Formatting hooks
    # -------------------------------------------------------------------------

    def format_tool_result(self, result: str) -> str:
        return result

    def format_feedback(self, detail: str) -> str:
        if not self.wraps_errors:
            return detail
        return self.error_template.format(detail=detail)

    def format_query(self, user_text: str, *, first_turn: bool = True) -> str:
        """Adjust an outbound user query. Identity by default."""
        return user_text

    def format_response(self, text: str) -> str:
        """Annotate an intermediate agent iteration. Identity by default."""
        return text

    # -------------------------------------------------------------------------
    # System prompt
    # -------------------------------------------------------------------------

    def build_system_message(self, registry: CapabilityRegistry) -> Message:
        """Advertise every capability in the dialect's system template.

        Raises:
            ToolDialectError: CONFIG_TEMPLATE_INVALID if the template has no
                ``{tools}`` placeholder
        """
        template = self.template
        if TOOLS_PLACEHOLDER not in template:
            raise config_error(
                ErrorCode.CONFIG_TEMPLATE_INVALID,
                dialect=self.dialect_id,
                placeholder=TOOLS_PLACEHOLDER,
            )
        return Message.system(template.replace(TOOLS_PLACEHOLDER, serialize_capabilities(registry)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(settings={self._settings!r})"
