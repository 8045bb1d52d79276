"""Message models for conversation threads."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator

from edqorta.core.ids import utcnow


class MessageType(str, Enum):
    """Who authored the message."""

    USER = "user"
    SYSTEM = "system"  # Synthesized by the engine, e.g. an agent joining


class AudioClip(BaseModel):
    """A recorded voice note."""

    url: str = Field(..., min_length=1)
    duration_seconds: float = Field(..., ge=0)


class TextContent(BaseModel):
    """Plain text payload for a new message."""

    kind: Literal["text"] = "text"
    text: str


class AudioContent(BaseModel):
    """Voice note payload for a new message."""

    kind: Literal["audio"] = "audio"
    audio: AudioClip


MessageContent = Annotated[TextContent | AudioContent, Field(discriminator="kind")]


class Message(BaseModel):
    """A single entry in a conversation.

    Carries exactly one of ``text`` or ``audio``. Immutable once created,
    except for the ``read`` flag.
    """

    id: str = Field(..., description="Unique message identifier")
    sender_id: str = Field(..., description="User who sent the message")
    timestamp: datetime = Field(default_factory=utcnow)

    text: str | None = None
    audio: AudioClip | None = None

    read: bool = False
    type: MessageType = MessageType.USER

    @model_validator(mode="after")
    def _exactly_one_payload(self) -> "Message":
        if (self.text is None) == (self.audio is None):
            raise ValueError("A message carries exactly one of text or audio")
        return self
