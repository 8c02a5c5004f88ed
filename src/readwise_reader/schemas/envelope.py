"""
Uniform response envelope.

Every client and service operation returns an APIResponse: the payload
plus zero or more advisory messages. Messages never abort an operation;
they describe degraded or partial results (truncated full-content
fetches, client-side filtering, documents whose content could not be
retrieved).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class MessageKind(str, Enum):
    """Kind of an advisory message."""

    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class APIMessage:
    """Advisory message attached to a successful response."""

    kind: MessageKind
    content: str

    def render(self) -> str:
        """Render as a single ``KIND: content`` line."""
        return f"{self.kind.value.upper()}: {self.content}"

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "content": self.content}


@dataclass
class APIResponse(Generic[T]):
    """Payload plus advisory messages."""

    data: T
    messages: list[APIMessage] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(m.kind is MessageKind.ERROR for m in self.messages)


def create_response(data: T, messages: list[APIMessage] | None = None) -> APIResponse[T]:
    """Wrap a payload and optional messages into an APIResponse."""
    return APIResponse(data=data, messages=list(messages or []))


def info_message(content: str) -> APIMessage:
    return APIMessage(kind=MessageKind.INFO, content=content)


def error_message(content: str) -> APIMessage:
    return APIMessage(kind=MessageKind.ERROR, content=content)
