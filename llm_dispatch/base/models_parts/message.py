"""
Message DTO used in request payloads.

Defines the `Message` dataclass and the `Role` literal representing the sender
role. Callers may also pass plain ``{"role": ..., "content": ...}`` mappings;
`coerce_message` normalizes both shapes to the wire mapping.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping, Union

# Message roles accepted by chat-completion endpoints.
Role = Literal["system", "user", "assistant", "tool"]


@dataclass
class Message:
    """A chat message in provider-neutral form.

    Attributes:
        role: The role of the message author.
        content: Plain text content of the message.
    """

    role: Role
    content: str

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-serializable wire mapping."""
        return {"role": self.role, "content": self.content}


def coerce_message(message: Union[Message, Mapping[str, Any]]) -> Dict[str, Any]:
    """Return a wire mapping for a `Message` or an existing mapping (copied)."""
    if isinstance(message, Message):
        return message.to_dict()
    return dict(message)


__all__ = [
    "Message",
    "Role",
    "coerce_message",
]
