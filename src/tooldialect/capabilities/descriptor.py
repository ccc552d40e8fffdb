"""Capability descriptors.

A CapabilityDescriptor is the immutable declaration of one tool: name,
description, JSON Schema for its arguments, and the callable that runs it.
Descriptors are built either directly, from an object implementing the
``Capability`` protocol, or with the ``@capability`` decorator:

    >>> @capability(
    ...     name="get_weather",
    ...     description="Current weather for a city",
    ...     parameters={
    ...         "type": "object",
    ...         "properties": {"city": {"type": "string"}},
    ...         "required": ["city"],
    ...     },
    ... )
    ... async def get_weather(arguments: dict) -> str:
    ...     return "22C"
"""

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

Invoke = Callable[[Any], Any]

def _empty_schema() -> dict[str, Any]:
    return {"type": "object", "properties": {}}


@runtime_checkable
class Capability(Protocol):
    """Contract for externally implemented tools.

    tooldialect never constructs capabilities. It reads the declaration
    and awaits ``run``.
    """

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def parameters(self) -> dict[str, Any]: ...

    async def run(self, arguments: Any) -> str: ...


@dataclass(frozen=True, slots=True)
class CapabilityDescriptor:
    """Declaration of one tool plus its invocation behavior.

    Attributes:
        name: Identifier matched exactly (case-sensitive) against the model's call
        description: Human-readable description advertised to the model
        parameter_schema: JSON Schema document describing accepted arguments
        invoke: Callable taking the arguments; may return an awaitable
    """

    name: str
    description: str
    parameter_schema: dict[str, Any] = field(default_factory=_empty_schema)
    invoke: Invoke | None = field(default=None, compare=False, repr=False)

    async def run(self, arguments: Any) -> str:
        """Invoke the capability and return its result as text.

        Exceptions raised by the capability propagate to the caller.

        Raises:
            RuntimeError: If the descriptor has no invoke behavior bound
        """
        if self.invoke is None:
            raise RuntimeError(f"Capability '{self.name}' has no invoke behavior")
        result = self.invoke(arguments)
        if inspect.isawaitable(result):
            result = await result
        return result if isinstance(result, str) else str(result)

    @classmethod
    def from_capability(cls, cap: Capability) -> "CapabilityDescriptor":
        """Adapt an object implementing the ``Capability`` protocol."""
        return cls(
            name=cap.name,
            description=cap.description,
            parameter_schema=cap.parameters,
            invoke=cap.run,
        )

    @classmethod
    def from_declaration(
        cls,
        declaration: dict[str, Any],
        invoke: Invoke | None = None,
    ) -> "CapabilityDescriptor":
        """Build from a ``{name, description, parameters}`` mapping."""
        parameters = declaration.get("parameters")
        return cls(
            name=declaration["name"],
            description=declaration.get("description", ""),
            parameter_schema=_empty_schema() if parameters is None else parameters,
            invoke=invoke,
        )


def capability(
    *,
    name: str | None = None,
    description: str | None = None,
    parameters: dict[str, Any] | None = None,
) -> Callable[[Invoke], CapabilityDescriptor]:
    """Decorator turning a function into a CapabilityDescriptor.

    ``name`` defaults to the function name and ``description`` to the first
    line of its docstring.
    """

    def decorator(fn: Invoke) -> CapabilityDescriptor:
        doc = inspect.getdoc(fn) or ""
        return CapabilityDescriptor(
            name=name or fn.__name__,
            description=description if description is not None else doc.split("\n", 1)[0],
            parameter_schema=_empty_schema() if parameters is None else parameters,
            invoke=fn,
        )

    return decorator
