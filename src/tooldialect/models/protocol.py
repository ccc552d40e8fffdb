"""Conversation protocol types.

Message and TurnResponse are what tooldialect speaks into a conversation;
FunctionCallIntent is the transient ``{name, arguments}`` pair a dialect
extracts from model output.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError

Role = Literal["system", "user", "assistant"]


# =============================================================================
# Message Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class Message:
    """A conversation message."""

    role: Role
    content: str

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role="assistant", content=content)

    def to_dict(self) -> dict[str, str]:
        """Wire shape expected by chat clients: ``{"role", "content"}``."""
        return {"role": self.role, "content": self.content}


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()


@dataclass(frozen=True, slots=True)
class TurnResponse:
    """Outcome of one parse-and-dispatch call.

    Success and failure share this shape so the conversation loop can
    append either to history without special-casing. Only ``ok`` and the
    message content differ.
    """

    message: Message
    """Assistant message carrying the tool result or the feedback text."""

    ok: bool
    """True when a capability ran and returned a result."""

    model: str = ""
    """Name of the model whose output was parsed."""

    created_at: str = ""
    """ISO-8601 UTC timestamp of when the response was produced."""

    done: bool = True
    """Completion flag. Dispatch always produces a complete message."""

    final_data: dict[str, Any] | None = None
    """Optional structured trailer data (e.g. the dispatched intent)."""

    @classmethod
    def success(
        cls,
        content: str,
        model: str,
        final_data: dict[str, Any] | None = None,
    ) -> "TurnResponse":
        return cls(
            message=Message.assistant(content),
            ok=True,
            model=model,
            created_at=_utc_now(),
            final_data=final_data,
        )

    @classmethod
    def failure(
        cls,
        content: str,
        model: str = "",
        final_data: dict[str, Any] | None = None,
    ) -> "TurnResponse":
        return cls(
            message=Message.assistant(content),
            ok=False,
            model=model,
            created_at=_utc_now(),
            final_data=final_data,
        )

    @property
    def content(self) -> str:
        return self.message.content

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "created_at": self.created_at,
            "message": self.message.to_dict(),
            "done": self.done,
            "ok": self.ok,
            "final_data": self.final_data,
        }


# =============================================================================
# Intent
# =============================================================================


class FunctionCallIntent(BaseModel):
    """A function call claimed by the model: tool name plus arguments.

    Both fields are required. Extra keys the model adds are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    arguments: Any


def describe_validation_error(error: ValidationError) -> str:
    """Compact, single-line rendering of a pydantic validation error.

    Keeps the parser's own wording (e.g. ``Invalid JSON: expected value at
    line 1 column 1``) so the model sees exactly what was malformed.
    """
    parts = []
    for item in error.errors(include_url=False):
        loc = ".".join(str(p) for p in item.get("loc", ()))
        msg = item.get("msg", "")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or str(error)
