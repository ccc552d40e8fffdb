"""System prompt templates, one per dialect.

Each template contains exactly one ``{tools}`` placeholder, replaced with
the serialized function declarations. Substitution is a plain string
replace, so literal braces in the templates need no escaping.
"""

TOOLS_PLACEHOLDER = "{tools}"

# The doubled braces in the example are what this model family is trained
# on; the tagged dialect undoes them when they are echoed back.
TAGGED_SYSTEM_TEMPLATE = """You are a function calling AI model. You are provided with function signatures within <tools></tools> XML tags. You may call one function to assist with the user query. Don't make assumptions about what values to plug into functions.
<tools>
{tools}
</tools>
For the function call, return a json object with function name and arguments within <tool_call></tool_call> XML tags as follows:
<tool_call>
{{"name": <function-name>, "arguments": <args-dict>}}
</tool_call>
Function results are returned to you within <tool_response></tool_response> XML tags."""

FENCED_SYSTEM_TEMPLATE = """You have access to the following tools:
{tools}

You must always select one of the above tools and respond with only a JSON object matching the following schema:

```json
{"name": "<name of the selected tool>", "arguments": <parameters for the selected tool, matching the tool's JSON schema>}
```
"""

STRUCTURED_SYSTEM_TEMPLATE = """You can call functions to help answer the user.

Available functions:
{tools}

To call a function, reply with a tool call naming exactly one of the functions above and arguments matching its parameter schema."""
