"""FencedJSON dialect.

The whole reply is the call, optionally inside a json code fence:

    ```json
    {"name": "get_weather", "arguments": {"city": "Oslo"}}
    ```

Results and errors go back as plain text.
"""

from tooldialect.dialects.base import DialectParser, parse_intent_json
from tooldialect.dialects.templates import FENCED_SYSTEM_TEMPLATE
from tooldialect.models.protocol import FunctionCallIntent

_OPEN_FENCE = "```json"
_CLOSE_FENCE = "```"


def strip_code_fence(text: str) -> str:
    """Trim whitespace, then fence markers, then whitespace again.

    Repeated markers are all removed. Only a fence annotated ``json``
    opens a block.
    """
    cleaned = text.strip()
    while cleaned.startswith(_OPEN_FENCE):
        cleaned = cleaned[len(_OPEN_FENCE):]
    while cleaned.endswith(_CLOSE_FENCE):
        cleaned = cleaned[: -len(_CLOSE_FENCE)]
    return cleaned.strip()


class FencedJSONDialect(DialectParser):
    """Bare or fenced JSON in, plain text out."""

    dialect_id = "fenced"
    system_template = FENCED_SYSTEM_TEMPLATE
    wrap_errors = False

    def extract_intent(self, raw_text: str) -> FunctionCallIntent:
        return parse_intent_json(strip_code_fence(raw_text))
