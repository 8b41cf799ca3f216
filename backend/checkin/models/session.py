# /checkin/models/session.py

from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from checkin.models.flow import InputField, StepType


class MessageOrigin(str, Enum):
    BOT = "bot"
    USER = "user"


class ChatMessage(BaseModel):
    """A single emitted chat line. Presentation-facing record only."""
    id: str
    origin: MessageOrigin
    text: str = ""
    image_url: Optional[str] = None


class InputRequest(BaseModel):
    """What the presentation surface must collect before the session can advance."""
    step_id: str
    type: StepType
    options: List[str] = Field(default_factory=list)
    placeholder: Optional[str] = None
    required: bool = False
    inputs: List[InputField] = Field(default_factory=list)
    max_attachments: Optional[int] = Field(default=None, description="Only set for file steps")


class Attachment(BaseModel):
    """Reference to a photo selected on a file step."""
    filename: str
    content_type: Optional[str] = None
    url: Optional[str] = None
    size: Optional[int] = None


class SessionSnapshot(BaseModel):
    """
    Serializable progress of an interrupted session.

    Attachments are deliberately absent: selected photos are not carried over
    when a conversation is resumed.
    """
    step_index: int
    answers: Dict[str, str] = Field(default_factory=dict)
    transcript: List[ChatMessage] = Field(default_factory=list)
